import math
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, model_validator

from autopath.domain import config

class LightState(str, Enum):
    GREEN = "GREEN"
    RED = "RED"

class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    SUCCESS = "success"

class ConstraintStatus(str, Enum):
    SATISFIED = "Satisfied"
    VIOLATED = "Violated"

class Node(BaseModel):
    id: str  # e.g., "41"
    x: float  # km
    y: float  # km
    label: str = ""
    light: LightState = LightState.GREEN

    def toggle_light(self):
        self.light = LightState.RED if self.light == LightState.GREEN else LightState.GREEN

class Edge(BaseModel):
    id: str  # e.g., "1-2"
    source: str
    target: str
    length: float = Field(gt=0)  # km
    limit: float = Field(gt=0)  # km/h
    base_speed: float = Field(gt=0)
    current_speed: float = Field(gt=0)
    incident: bool = False

    @model_validator(mode="after")
    def _check_speeds(self):
        if self.limit < config.MIN_SPEED:
            raise ValueError(f"Edge {self.id}: limit below minimum speed")
        self.current_speed = clamp_speed(self.current_speed, self.limit)
        return self

    def other_end(self, node_id: str) -> str:
        return self.target if node_id == self.source else self.source

    def set_speed(self, speed: float):
        self.current_speed = clamp_speed(speed, self.limit)

def clamp_speed(speed: float, limit: float) -> float:
    if not math.isfinite(speed):
        raise ValueError(f"Speed must be finite, got {speed}")
    return max(config.MIN_SPEED, min(limit, speed))

class DecisionLogEntry(BaseModel):
    id: int
    timestamp: float  # Logical seconds
    tick: int
    severity: Severity
    message: str

# API/Response Models

class RouteView(BaseModel):
    start: str
    end: str
    path: List[str]
    estimatedTime: float

class Metrics(BaseModel):
    elapsedTime: float
    rerouteCount: int
    distanceTraveled: float
    constraintStatus: ConstraintStatus

class EndpointUpdate(BaseModel):
    nodeId: str

class PenaltyUpdate(BaseModel):
    penaltyWeight: float = Field(ge=0)

class IncidentRequest(BaseModel):
    edgeId: str
    speed: float = config.INCIDENT_SPEED
    reason: str = "Incident"

class IncidentResult(BaseModel):
    edgeId: str
    speed: float
    reason: str
    status: str

class SimulationStatus(BaseModel):
    playing: bool
    arrived: bool
    failed: bool
    waitingForLight: bool
    tick: int
    message: Optional[str] = None

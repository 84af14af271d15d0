from typing import Literal, Optional
from pydantic import BaseModel, Field, model_validator

from autopath.domain import config

class PlannerWeights(BaseModel):
    red_light_penalty: float = Field(default=config.RED_LIGHT_PENALTY, ge=0)  # minutes
    turn_penalty: float = Field(default=config.TURN_PENALTY, ge=0)  # minutes
    highway_limit: float = config.HIGHWAY_LIMIT
    highway_factor: float = Field(default=config.HIGHWAY_FACTOR, gt=0)
    local_factor: float = Field(default=config.LOCAL_FACTOR, gt=0)
    free_flow_speed: float = Field(default=config.FREE_FLOW_SPEED, gt=0)
    # "manhattan" is the coarse reference estimate; "euclidean" is admissible
    heuristic: Literal["manhattan", "euclidean", "none"] = "manhattan"

    @classmethod
    def travel_time_only(cls, heuristic: str = "euclidean") -> "PlannerWeights":
        """Pure length / speed costs, no light, turn or road level terms."""
        return cls(red_light_penalty=0.0, turn_penalty=0.0, highway_factor=1.0,
                   local_factor=1.0, heuristic=heuristic)

class SimulationParameters(BaseModel):
    """Operator tunables for one simulation kernel."""

    seed: int = 42
    start_node: Optional[str] = None  # Defaults to the first topology node
    end_node: Optional[str] = None  # Defaults to the last topology node

    tick_seconds: float = Field(default=config.TICK_SECONDS, gt=0)
    environment_interval: float = Field(default=config.ENVIRONMENT_INTERVAL, gt=0)

    penalty_weight: float = Field(default=config.PENALTY_WEIGHT, ge=0)
    acceptance_threshold: float = Field(default=config.ACCEPTANCE_THRESHOLD, ge=0)

    speed_noise: float = Field(default=config.SPEED_NOISE, ge=0)
    slowdown_probability: float = Field(default=config.SLOWDOWN_PROBABILITY, ge=0, le=1)
    light_flip_probability: float = Field(default=config.LIGHT_FLIP_PROBABILITY, ge=0, le=1)

    planner: PlannerWeights = Field(default_factory=PlannerWeights)

    @model_validator(mode="after")
    def _check_intervals(self):
        if self.environment_interval < self.tick_seconds:
            raise ValueError("environment_interval must be at least one tick")
        return self

    @property
    def environment_every(self) -> int:
        """Vehicle ticks between two environment updates."""
        return max(1, round(self.environment_interval / self.tick_seconds))

import math
from abc import ABC, abstractmethod
from typing import Any

from autopath.domain import config
from autopath.domain.errors import UnknownEdgeError, UnknownNodeError

class Command(ABC):
    def validate(self, kernel: Any):
        pass

    @abstractmethod
    def execute(self, kernel: Any):
        pass

class StartCommand(Command):
    def execute(self, kernel: Any):
        kernel.start_simulation()

class PauseCommand(Command):
    def execute(self, kernel: Any):
        kernel.pause_simulation()

class ResetCommand(Command):
    def execute(self, kernel: Any):
        kernel.reset_simulation()

class SetStartCommand(Command):
    def __init__(self, node_id: str):
        self.node_id = node_id

    def validate(self, kernel: Any):
        if not kernel.network.has_node(self.node_id):
            raise UnknownNodeError(self.node_id)

    def execute(self, kernel: Any):
        kernel.state.start_node = self.node_id
        kernel.log(f"Start set to: Node {self.node_id}")
        kernel.reset_simulation()

class SetEndCommand(Command):
    def __init__(self, node_id: str):
        self.node_id = node_id

    def validate(self, kernel: Any):
        if not kernel.network.has_node(self.node_id):
            raise UnknownNodeError(self.node_id)

    def execute(self, kernel: Any):
        kernel.state.end_node = self.node_id
        kernel.log(f"End set to: Node {self.node_id}")
        kernel.reset_simulation()

class SetPenaltyWeightCommand(Command):
    def __init__(self, penalty_weight: float):
        self.penalty_weight = penalty_weight

    def validate(self, kernel: Any):
        if not math.isfinite(self.penalty_weight) or self.penalty_weight < 0:
            raise ValueError(f"Penalty weight must be a non-negative number, got {self.penalty_weight}")

    def execute(self, kernel: Any):
        kernel.reroute_engine.penalty_weight = self.penalty_weight
        kernel.params.penalty_weight = self.penalty_weight
        kernel.on_environment_changed()

class InjectIncidentCommand(Command):
    def __init__(self, edge_id: str, speed: float = config.INCIDENT_SPEED,
                 reason: str = config.INCIDENT_REASON):
        self.edge_id = edge_id
        self.speed = speed
        self.reason = reason

    def validate(self, kernel: Any):
        if not kernel.network.has_edge(self.edge_id):
            raise UnknownEdgeError(self.edge_id)
        if not math.isfinite(self.speed) or self.speed <= 0:
            raise ValueError(f"Incident speed must be positive, got {self.speed}")

    def execute(self, kernel: Any):
        edge = kernel.network.edge(self.edge_id)
        edge.set_speed(self.speed)
        edge.incident = True
        kernel.log(f"Incident: {self.reason} (Edge {self.edge_id}), "
                   f"speed dropped to {edge.current_speed:g} km/h", "error")
        kernel.on_environment_changed()

class ClearIncidentCommand(Command):
    def __init__(self, edge_id: str):
        self.edge_id = edge_id

    def validate(self, kernel: Any):
        if not kernel.network.has_edge(self.edge_id):
            raise UnknownEdgeError(self.edge_id)

    def execute(self, kernel: Any):
        edge = kernel.network.edge(self.edge_id)
        if not edge.incident:
            return
        edge.incident = False
        edge.set_speed(edge.base_speed)
        kernel.log(f"Incident cleared on Edge {self.edge_id}, speed restored to {edge.current_speed:g} km/h")
        kernel.on_environment_changed()

from typing import List
from pydantic import BaseModel, Field

class SimulationState(BaseModel):
    tick_id: int = 0
    time: float = 0.0  # Logical seconds, advances only while playing
    playing: bool = False

    start_node: str = ""
    end_node: str = ""

    # Route (owned by planning/reroute step)
    path: List[str] = Field(default_factory=list)
    estimated_time: float = 0.0  # Minutes for the whole committed path
    reroute_count: int = 0

    # Position (owned by the vehicle step)
    node_index: int = 0  # Path index of the start node of the edge being traversed
    progress: float = 0.0
    elapsed_time: float = 0.0  # Minutes
    distance_traveled: float = 0.0  # km
    waiting_for_light: bool = False
    arrived: bool = False
    failed: bool = False

    @property
    def current_node(self) -> str:
        if not self.path:
            return self.start_node
        return self.path[min(self.node_index, len(self.path) - 1)]

    @property
    def remaining_path(self) -> List[str]:
        return self.path[self.node_index:]

from typing import List, Tuple

from autopath.domain import config
from autopath.domain.errors import PathIntegrityError
from autopath.domain.graph import RoadNetwork
from autopath.domain.models import LightState, Severity
from autopath.domain.state import SimulationState

class VehicleSystem:
    def __init__(self, tick_seconds: float = config.TICK_SECONDS):
        self.tick_seconds = tick_seconds

    def progress_step(self, speed: float, length: float) -> float:
        return (speed / length) * self.tick_seconds * config.PROGRESS_SCALE

    def update(self, state: SimulationState, network: RoadNetwork) -> List[Tuple[Severity, str]]:
        """Moves the vehicle one tick along the committed path.

        Raises PathIntegrityError when consecutive path nodes are not joined by
        an edge; the caller must stop the simulation.
        """
        if not state.path or state.arrived:
            return []

        if state.node_index >= len(state.path) - 1:
            state.arrived = True
            state.playing = False
            state.waiting_for_light = False
            return [(Severity.SUCCESS, f"Destination reached! Total Time: {state.elapsed_time:.1f} min")]

        u = state.path[state.node_index]
        v = state.path[state.node_index + 1]
        edge = network.edge_between(u, v)
        if edge is None:
            raise PathIntegrityError(u, v)

        step = self.progress_step(edge.current_speed, edge.length)
        red_ahead = network.node(v).light == LightState.RED

        # Hold at the stop line while the next light is red
        if red_ahead and state.progress >= config.STOP_THRESHOLD:
            state.waiting_for_light = True
            state.elapsed_time += config.WAIT_TIME_COST
            return []

        state.waiting_for_light = False
        new_progress = state.progress + step
        if red_ahead:
            # A long step must not carry the car through a red light
            new_progress = min(new_progress, config.STOP_THRESHOLD)
        advanced = new_progress - state.progress
        if new_progress >= 1.0:
            state.node_index += 1
            state.progress = 0.0
        else:
            state.progress = new_progress

        state.elapsed_time += config.MOVE_TIME_COST
        state.distance_traveled += advanced * edge.length
        return []

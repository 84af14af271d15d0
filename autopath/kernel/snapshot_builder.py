from typing import Any, Dict, Tuple
from autopath.domain.graph import RoadNetwork
from autopath.domain.state import SimulationState

class SnapshotBuilder:
    """Render payload for the map layer: lights, edge speeds, route and car position."""

    def build(self, state: SimulationState, network: RoadNetwork) -> Dict[str, Any]:
        x, y = self.vehicle_position(state, network)
        return {
            "tick": state.tick_id,
            "time": state.time,
            "vehicle": {
                "x": x,
                "y": y,
                "nodeIndex": state.node_index,
                "progress": state.progress,
                "waitingForLight": state.waiting_for_light,
            },
            "route": {
                "path": list(state.path),
                "estimatedTime": state.estimated_time,
            },
            "nodes": [
                {
                    "id": n.id,
                    "x": n.x,
                    "y": n.y,
                    "light": n.light.value
                }
                for n in network.nodes()
            ],
            "edges": [
                {
                    "id": e.id,
                    "source": e.source,
                    "target": e.target,
                    "currentSpeed": e.current_speed,
                    "speedRatio": round(e.current_speed / e.base_speed, 2),
                    "incident": e.incident
                }
                for e in network.edges()
            ]
        }

    def vehicle_position(self, state: SimulationState, network: RoadNetwork) -> Tuple[float, float]:
        if not state.path:
            return 0.0, 0.0
        index = min(state.node_index, len(state.path) - 1)
        u = network.node(state.path[index])
        if index + 1 >= len(state.path):
            return u.x, u.y
        v = network.node(state.path[index + 1])
        return (u.x + (v.x - u.x) * state.progress,
                u.y + (v.y - u.y) * state.progress)

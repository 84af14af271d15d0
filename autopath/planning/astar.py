import math
from typing import AbstractSet, Dict, List, Optional
from pydantic import BaseModel

from autopath.domain import config
from autopath.domain.graph import RoadNetwork
from autopath.domain.models import Edge, LightState, Node
from autopath.domain.parameters import PlannerWeights

class PlanResult(BaseModel):
    path: List[str]
    time: float  # Minutes

def orientation(a: Node, b: Node) -> str:
    if abs(a.x - b.x) > abs(a.y - b.y):
        return "horizontal"
    return "vertical"

class PathPlanner:
    """Time-aware A* over the instantaneous state of a RoadNetwork.

    Edge impedance (minutes) for moving u -> v along e, given the node that
    preceded u:

        ((e.length / e.current_speed) * 60 + red(v) + turn) * level(e)

    The open set is an insertion-ordered dict; ties on f-score go to the node
    inserted first. Costs depend on the predecessor through the turn term, so
    search state is the node alone and the result is optimal only when the turn
    penalty is zero.
    """

    def __init__(self, network: RoadNetwork, weights: Optional[PlannerWeights] = None):
        self.network = network
        self.weights = weights or PlannerWeights()

    def travel_minutes(self, edge: Edge) -> float:
        speed = max(config.MIN_SPEED_EPSILON, edge.current_speed)
        return (edge.length / speed) * 60.0

    def level_factor(self, edge: Edge) -> float:
        if edge.limit >= self.weights.highway_limit:
            return self.weights.highway_factor
        return self.weights.local_factor

    def edge_cost(self, edge: Edge, u: str, v: str, previous: Optional[str] = None) -> float:
        cost = self.travel_minutes(edge)

        if self.network.node(v).light == LightState.RED:
            cost += self.weights.red_light_penalty

        if previous is not None:
            prev_node = self.network.node(previous)
            u_node = self.network.node(u)
            v_node = self.network.node(v)
            if orientation(prev_node, u_node) != orientation(u_node, v_node):
                cost += self.weights.turn_penalty

        return cost * self.level_factor(edge)

    def heuristic(self, node: Node, goal: Node, top_speed: Optional[float] = None) -> float:
        mode = self.weights.heuristic
        if mode == "manhattan":
            dist = abs(node.x - goal.x) + abs(node.y - goal.y)
            return dist / self.weights.free_flow_speed * 60.0
        if mode == "euclidean":
            if top_speed is None:
                top_speed = self.network.max_speed_limit()
            if top_speed <= 0:
                return 0.0
            dist = math.hypot(node.x - goal.x, node.y - goal.y)
            factor = min(self.weights.highway_factor, self.weights.local_factor)
            return dist / top_speed * 60.0 * factor
        return 0.0

    def plan(self, start: str, goal: str,
             excluded: AbstractSet[str] = frozenset()) -> Optional[PlanResult]:
        """Returns the cheapest path found from start to goal, or None if unreachable.

        Nodes in ``excluded`` are never entered (used to keep a spliced route loop-free).
        """
        start_node = self.network.node(start)
        goal_node = self.network.node(goal)

        g_score: Dict[str, float] = {start: 0.0}
        came_from: Dict[str, str] = {}
        # Limits are fixed for the whole search
        top_speed = self.network.max_speed_limit() if self.weights.heuristic == "euclidean" else None
        open_set: Dict[str, float] = {start: self.heuristic(start_node, goal_node, top_speed)}

        while open_set:
            current = min(open_set, key=open_set.__getitem__)

            if current == goal:
                return PlanResult(path=self._reconstruct(came_from, current), time=g_score[current])

            del open_set[current]
            previous = came_from.get(current)

            for neighbor, edge in self.network.incident_edges(current):
                if neighbor in excluded:
                    continue
                tentative = g_score[current] + self.edge_cost(edge, current, neighbor, previous)
                if tentative < g_score.get(neighbor, math.inf):
                    came_from[neighbor] = current
                    g_score[neighbor] = tentative
                    open_set[neighbor] = tentative + self.heuristic(
                        self.network.node(neighbor), goal_node, top_speed)

        return None

    def path_cost(self, path: List[str]) -> float:
        """Cost of an explicit path under the current weights; inf if disconnected."""
        total = 0.0
        for i in range(len(path) - 1):
            edge = self.network.edge_between(path[i], path[i + 1])
            if edge is None:
                return math.inf
            previous = path[i - 1] if i > 0 else None
            total += self.edge_cost(edge, path[i], path[i + 1], previous)
        return total

    @staticmethod
    def _reconstruct(came_from: Dict[str, str], current: str) -> List[str]:
        path = [current]
        while current in came_from:
            current = came_from[current]
            path.append(current)
        path.reverse()
        return path

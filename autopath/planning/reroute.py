import logging
from typing import List, Optional
from pydantic import BaseModel, Field

from autopath.domain import config
from autopath.domain.graph import RoadNetwork
from autopath.domain.state import SimulationState
from autopath.planning.astar import PathPlanner

logger = logging.getLogger(__name__)

class RerouteDecision(BaseModel):
    old_remaining: float
    new_remaining: float
    time_saved: float
    net_benefit: float
    relative_improvement: float
    accepted: bool

def evaluate_reroute(
    old_estimate: float,
    elapsed: float,
    new_remaining: float,
    penalty_weight: float,
    threshold: float = config.ACCEPTANCE_THRESHOLD,
) -> RerouteDecision:
    """Soft-constraint switching rule.

    A candidate replaces the committed route only when the time it saves pays
    for the switching penalty (net benefit > 0) and is a meaningful share of the
    remaining trip (relative improvement > threshold).
    """
    old_remaining = max(config.MIN_REMAINING_TIME, old_estimate - elapsed)
    time_saved = old_remaining - new_remaining
    net_benefit = time_saved - penalty_weight
    relative_improvement = time_saved / old_remaining
    return RerouteDecision(
        old_remaining=old_remaining,
        new_remaining=new_remaining,
        time_saved=time_saved,
        net_benefit=net_benefit,
        relative_improvement=relative_improvement,
        accepted=net_benefit > 0 and relative_improvement > threshold,
    )

class RerouteOutcome(BaseModel):
    decision: RerouteDecision
    candidate: List[str] = Field(default_factory=list)
    message: Optional[str] = None

class RerouteDecisionEngine:
    def __init__(self, planner: PathPlanner, penalty_weight: float = config.PENALTY_WEIGHT,
                 threshold: float = config.ACCEPTANCE_THRESHOLD):
        self.planner = planner
        self.penalty_weight = penalty_weight
        self.threshold = threshold

    @property
    def network(self) -> RoadNetwork:
        return self.planner.network

    def evaluate(self, state: SimulationState) -> Optional[RerouteOutcome]:
        """Replans from the vehicle's current node and commits the candidate if it wins.

        Returns None when no decision was needed: vehicle at the goal, no route,
        unreachable goal, or a candidate identical to the remaining route.
        """
        if not state.path or state.arrived:
            return None
        current = state.current_node
        if current == state.end_node:
            return None

        traveled = frozenset(state.path[:state.node_index])
        candidate = self.planner.plan(current, state.end_node, excluded=traveled)
        if candidate is None:
            logger.debug("Reroute skipped: %s unreachable from %s", state.end_node, current)
            return None
        if candidate.path == state.remaining_path:
            return None

        decision = evaluate_reroute(state.estimated_time, state.elapsed_time, candidate.time,
                                    self.penalty_weight, self.threshold)
        if not decision.accepted:
            logger.debug("Reroute rejected: saved %.2f, net %.2f, relative %.2f",
                         decision.time_saved, decision.net_benefit, decision.relative_improvement)
            return RerouteOutcome(decision=decision, candidate=candidate.path)

        state.path = state.path[:state.node_index] + candidate.path
        state.reroute_count += 1
        state.estimated_time = state.elapsed_time + candidate.time
        message = (f"Reroute triggered | Saved: {decision.time_saved:.1f}m"
                   f" | Net Benefit: {decision.net_benefit:.1f}m")
        return RerouteOutcome(decision=decision, candidate=candidate.path, message=message)

import logging
import random
from typing import List, Optional, Sequence, Tuple

from autopath.domain import config
from autopath.domain.errors import PathIntegrityError
from autopath.domain.graph import RoadNetwork
from autopath.domain.models import (
    ConstraintStatus, DecisionLogEntry, Edge, Metrics, Node, RouteView, Severity, SimulationStatus
)
from autopath.domain.parameters import SimulationParameters
from autopath.domain.state import SimulationState
from autopath.domain.topology import grid_topology
from autopath.kernel.command_queue import CommandQueue
from autopath.kernel.commands import (
    ClearIncidentCommand, Command, InjectIncidentCommand, PauseCommand, ResetCommand,
    SetEndCommand, SetPenaltyWeightCommand, SetStartCommand, StartCommand
)
from autopath.kernel.decision_log import DecisionLog
from autopath.kernel.snapshot_builder import SnapshotBuilder
from autopath.planning.astar import PathPlanner
from autopath.planning.reroute import RerouteDecisionEngine
from autopath.systems.environment_system import EnvironmentSystem
from autopath.systems.vehicle_system import VehicleSystem

logger = logging.getLogger(__name__)

class SimulationKernel:
    """Single-threaded owner of the road network, the vehicle state and the decision log.

    Each run_tick() first applies queued commands, then (while playing) runs the
    environment step every ``environment_every`` ticks, chained with the reroute
    evaluation, and finally the vehicle step. Nothing else mutates shared state.
    """

    def __init__(self, topology: Optional[Tuple[Sequence[Node], Sequence[Edge]]] = None,
                 params: Optional[SimulationParameters] = None):
        self.params = params or SimulationParameters()
        nodes, edges = topology if topology is not None else grid_topology()
        self._pristine = RoadNetwork.from_topology(
            [n.model_copy(deep=True) for n in nodes],
            [e.model_copy(deep=True) for e in edges],
        )
        if not self._pristine.nodes():
            raise ValueError("Topology has no nodes")

        self.network = self._pristine.copy()
        self.state = SimulationState()
        self.dt = self.params.tick_seconds
        self.command_queue = CommandQueue()
        self.decision_log = DecisionLog()
        self.rng = random.Random(self.params.seed)
        self.initialized = False
        self._ticks_since_environment = 0

        self.planner = PathPlanner(self.network, self.params.planner)
        self.reroute_engine = RerouteDecisionEngine(
            self.planner, self.params.penalty_weight, self.params.acceptance_threshold
        )
        self.environment = EnvironmentSystem(
            self.rng,
            speed_noise=self.params.speed_noise,
            slowdown_probability=self.params.slowdown_probability,
            light_flip_probability=self.params.light_flip_probability,
        )
        self.vehicle_system = VehicleSystem(self.dt)
        self.snapshot_builder = SnapshotBuilder()

    def initialize(self, seed: Optional[int] = None):
        seed = self.params.seed if seed is None else seed
        self.rng.seed(seed)
        self.decision_log.clear()

        node_ids = [n.id for n in self._pristine.nodes()]
        start = self.params.start_node or node_ids[0]
        end = self.params.end_node or node_ids[-1]
        for node_id in (start, end):
            self._pristine.node(node_id)  # Raises UnknownNodeError

        self.state = SimulationState(start_node=start, end_node=end)
        self._restore_network()
        self.plan_route()
        self.initialized = True
        logger.info("Kernel initialized (seed %s, %s -> %s)", seed, start, end)

    # Command submission (validated synchronously, applied at the next tick)

    def queue_command(self, command: Command):
        self.command_queue.submit(command, self)

    def start(self):
        self.queue_command(StartCommand())

    def pause(self):
        self.queue_command(PauseCommand())

    def reset(self):
        self.queue_command(ResetCommand())

    def set_start(self, node_id: str):
        self.queue_command(SetStartCommand(node_id))

    def set_end(self, node_id: str):
        self.queue_command(SetEndCommand(node_id))

    def set_penalty_weight(self, penalty_weight: float):
        self.queue_command(SetPenaltyWeightCommand(penalty_weight))

    def inject_incident(self, edge_id: str, speed: float = config.INCIDENT_SPEED,
                        reason: str = config.INCIDENT_REASON):
        self.queue_command(InjectIncidentCommand(edge_id, speed, reason))

    def clear_incident(self, edge_id: str):
        self.queue_command(ClearIncidentCommand(edge_id))

    # Loop

    def run_tick(self):
        if not self.initialized:
            self.initialize()

        # 1. Consume Commands
        commands = self.command_queue.drain()
        while commands:
            cmd = commands.popleft()
            cmd.execute(self)

        if not self.state.playing:
            return

        # 2. Environment, chained with reroute evaluation
        self._ticks_since_environment += 1
        if self._ticks_since_environment >= self.params.environment_every:
            self._ticks_since_environment = 0
            report = self.environment.update(self.network)
            logger.debug("Environment tick %d: %s", self.state.tick_id, report)
            self.evaluate_reroute()

        # 3. Vehicle
        self._move_vehicle()

        # 4. Time Advance
        self.state.time += self.dt
        self.state.tick_id += 1

    def _move_vehicle(self):
        try:
            events = self.vehicle_system.update(self.state, self.network)
        except PathIntegrityError as e:
            self.state.playing = False
            self.state.failed = True
            self.state.waiting_for_light = False
            self.log(f"Error: Path connectivity lost ({e})", Severity.ERROR)
            return
        for severity, message in events:
            self.log(message, severity)

    # Command handlers

    def start_simulation(self):
        if self.state.playing:
            return
        if self.state.failed or self.state.arrived:
            self.log("Simulation finished, reset before starting again", Severity.WARNING)
            return
        if not self.state.path:
            self.log("No route to follow", Severity.WARNING)
            return
        if not self._departed():
            self.log("Simulation started...")
        self.state.playing = True

    def pause_simulation(self):
        if not self.state.playing:
            return
        self.state.playing = False
        self.log("Simulation paused")

    def reset_simulation(self):
        self.state = SimulationState(start_node=self.state.start_node, end_node=self.state.end_node)
        self._restore_network()
        self.log("Simulation reset")
        self.plan_route()

    def on_environment_changed(self):
        """Reacts to a change made between ticks (incident, penalty weight).

        A vehicle in transit (paused or not) gets a reroute evaluation; one that
        has not left the start gets a fresh plan.
        """
        if self.state.arrived or self.state.failed:
            return
        if self.state.playing or self._departed():
            self.evaluate_reroute()
        else:
            self.plan_route()

    # Planning

    def plan_route(self) -> bool:
        result = self.planner.plan(self.state.start_node, self.state.end_node)
        if result is None:
            self.log(f"No route available from {self.state.start_node} to {self.state.end_node}",
                     Severity.WARNING)
            return False
        self.state.path = result.path
        self.state.estimated_time = result.time
        self.state.node_index = 0
        self.state.progress = 0.0
        logger.info("Route planned: %d nodes, est. %.1f min", len(result.path), result.time)
        return True

    def evaluate_reroute(self):
        outcome = self.reroute_engine.evaluate(self.state)
        if outcome is not None and outcome.message:
            self.log(outcome.message, Severity.SUCCESS)

    # Helpers

    def log(self, message: str, severity: Severity = Severity.INFO) -> DecisionLogEntry:
        return self.decision_log.append(message, Severity(severity),
                                        timestamp=self.state.time, tick=self.state.tick_id)

    def _departed(self) -> bool:
        return (self.state.node_index > 0 or self.state.progress > 0
                or self.state.elapsed_time > 0)

    def _restore_network(self):
        self.network = self._pristine.copy()
        self.planner.network = self.network
        self._ticks_since_environment = 0

    # Getters for API

    def get_route(self) -> RouteView:
        return RouteView(
            start=self.state.start_node,
            end=self.state.end_node,
            path=list(self.state.path),
            estimatedTime=self.state.estimated_time,
        )

    def get_metrics(self) -> Metrics:
        status = ConstraintStatus.SATISFIED
        if self.state.reroute_count > config.MAX_PATH_CHANGES:
            status = ConstraintStatus.VIOLATED
        return Metrics(
            elapsedTime=self.state.elapsed_time,
            rerouteCount=self.state.reroute_count,
            distanceTraveled=self.state.distance_traveled,
            constraintStatus=status,
        )

    def get_logs(self) -> List[DecisionLogEntry]:
        return self.decision_log.entries()

    def get_status(self) -> SimulationStatus:
        return SimulationStatus(
            playing=self.state.playing,
            arrived=self.state.arrived,
            failed=self.state.failed,
            waitingForLight=self.state.waiting_for_light,
            tick=self.state.tick_id,
        )

    def get_snapshot(self) -> dict:
        return self.snapshot_builder.build(self.state, self.network)

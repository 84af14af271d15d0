import unittest

from autopath.domain import config
from autopath.domain.errors import PathIntegrityError
from autopath.domain.graph import RoadNetwork
from autopath.domain.models import Edge, LightState, Node, Severity
from autopath.domain.state import SimulationState
from autopath.systems.vehicle_system import VehicleSystem

def straight_road():
    nodes = [Node(id="A", x=0, y=0), Node(id="B", x=1, y=0), Node(id="C", x=2, y=0)]
    edges = [
        Edge(id="A-B", source="A", target="B", length=1.0, limit=60, base_speed=60, current_speed=60),
        Edge(id="B-C", source="B", target="C", length=1.0, limit=60, base_speed=60, current_speed=60),
    ]
    return RoadNetwork.from_topology(nodes, edges)

class TestVehicleSystem(unittest.TestCase):
    def setUp(self):
        self.network = straight_road()
        self.system = VehicleSystem(tick_seconds=0.05)
        self.state = SimulationState(start_node="A", end_node="C", path=["A", "B", "C"], playing=True)

    def test_progress_step(self):
        # 60 km/h over 1 km: 60 * 0.05 * 0.1 = 0.3 per tick
        self.system.update(self.state, self.network)
        self.assertAlmostEqual(self.state.progress, 0.3)
        self.assertAlmostEqual(self.state.distance_traveled, 0.3)
        self.assertAlmostEqual(self.state.elapsed_time, config.MOVE_TIME_COST)
        self.assertEqual(self.state.node_index, 0)

    def test_edge_completion_moves_to_next_edge(self):
        self.state.progress = 0.8
        self.system.update(self.state, self.network)
        self.assertEqual(self.state.node_index, 1)
        self.assertEqual(self.state.progress, 0.0)

    def test_waits_at_red_light_then_resumes(self):
        self.state.progress = 0.9
        self.network.node("B").light = LightState.RED

        self.system.update(self.state, self.network)
        self.assertTrue(self.state.waiting_for_light)
        self.assertEqual(self.state.node_index, 0)
        self.assertAlmostEqual(self.state.progress, 0.9)
        self.assertAlmostEqual(self.state.elapsed_time, config.WAIT_TIME_COST)
        self.assertEqual(self.state.distance_traveled, 0.0)

        # Still red: still waiting
        self.system.update(self.state, self.network)
        self.assertTrue(self.state.waiting_for_light)
        self.assertEqual(self.state.node_index, 0)

        self.network.node("B").light = LightState.GREEN
        self.system.update(self.state, self.network)
        self.assertFalse(self.state.waiting_for_light)
        self.assertEqual(self.state.node_index, 1)

    def test_long_step_stops_at_red_light(self):
        # 0.6 + 0.3 would pass the stop line; the car halts on it instead
        self.state.progress = 0.6
        self.network.node("B").light = LightState.RED

        self.system.update(self.state, self.network)
        self.assertEqual(self.state.node_index, 0)
        self.assertAlmostEqual(self.state.progress, config.STOP_THRESHOLD)
        self.assertAlmostEqual(self.state.distance_traveled, config.STOP_THRESHOLD - 0.6)

        self.system.update(self.state, self.network)
        self.assertTrue(self.state.waiting_for_light)
        self.assertEqual(self.state.node_index, 0)

    def test_short_edge_never_skips_red_light(self):
        # One tick would cover the whole 0.1 km edge
        self.network.edge("A-B").length = 0.1
        self.network.node("B").light = LightState.RED
        for _ in range(10):
            self.system.update(self.state, self.network)
            self.assertEqual(self.state.node_index, 0)
        self.assertTrue(self.state.waiting_for_light)

    def test_red_light_far_away_does_not_stop(self):
        self.state.progress = 0.5
        self.network.node("B").light = LightState.RED
        self.system.update(self.state, self.network)
        self.assertFalse(self.state.waiting_for_light)
        self.assertAlmostEqual(self.state.progress, 0.8)

    def test_arrival(self):
        self.state.node_index = 2
        events = self.system.update(self.state, self.network)

        self.assertTrue(self.state.arrived)
        self.assertFalse(self.state.playing)
        self.assertEqual(events[0][0], Severity.SUCCESS)
        self.assertIn("Destination reached", events[0][1])

        # Terminal: further ticks do nothing
        elapsed = self.state.elapsed_time
        self.assertEqual(self.system.update(self.state, self.network), [])
        self.assertEqual(self.state.elapsed_time, elapsed)

    def test_missing_edge_raises(self):
        self.state.path = ["A", "C"]
        with self.assertRaises(PathIntegrityError):
            self.system.update(self.state, self.network)

    def test_empty_path_is_noop(self):
        self.state.path = []
        self.assertEqual(self.system.update(self.state, self.network), [])
        self.assertFalse(self.state.arrived)
        self.assertEqual(self.state.elapsed_time, 0.0)

    def test_slow_edge_moves_slowly(self):
        self.network.edge("A-B").set_speed(5)
        self.system.update(self.state, self.network)
        self.assertAlmostEqual(self.state.progress, 0.025)

if __name__ == '__main__':
    unittest.main()

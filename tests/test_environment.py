import math
import random
import unittest

from autopath.domain import config
from autopath.domain.graph import RoadNetwork
from autopath.domain.models import LightState
from autopath.domain.topology import grid_topology
from autopath.systems.environment_system import EnvironmentSystem

def default_network():
    return RoadNetwork.from_topology(*grid_topology())

class TestEnvironmentSystem(unittest.TestCase):
    def test_speeds_stay_in_bounds(self):
        network = default_network()
        env = EnvironmentSystem(random.Random(1))
        for _ in range(200):
            env.update(network)
            for edge in network.edges():
                self.assertTrue(math.isfinite(edge.current_speed))
                self.assertGreaterEqual(edge.current_speed, config.MIN_SPEED)
                self.assertLessEqual(edge.current_speed, edge.limit)

    def test_noise_is_bounded_around_base(self):
        network = default_network()
        env = EnvironmentSystem(random.Random(2), slowdown_probability=0.0)
        for _ in range(50):
            env.update(network)
            for edge in network.edges():
                self.assertGreaterEqual(edge.current_speed, edge.base_speed - config.SPEED_NOISE - 1)
                self.assertLessEqual(edge.current_speed, edge.base_speed + config.SPEED_NOISE)

    def test_quiet_environment_keeps_base_speeds(self):
        network = default_network()
        env = EnvironmentSystem(random.Random(3), speed_noise=0.0, slowdown_probability=0.0,
                                light_flip_probability=0.0)
        report = env.update(network)
        self.assertEqual(report.lights_flipped, 0)
        self.assertEqual(report.edges_perturbed, 144)
        for edge in network.edges():
            self.assertEqual(edge.current_speed, edge.base_speed)
        self.assertTrue(all(n.light == LightState.GREEN for n in network.nodes()))

    def test_forced_slowdown(self):
        network = default_network()
        env = EnvironmentSystem(random.Random(4), slowdown_probability=1.0)
        report = env.update(network)
        self.assertEqual(report.slowdowns, 144)
        self.assertEqual(network.edge("1-2").current_speed, 12.0)   # 20% of 60
        self.assertEqual(network.edge("10-11").current_speed, 8.0)  # 20% of 40

    def test_all_lights_flip(self):
        network = default_network()
        env = EnvironmentSystem(random.Random(5), light_flip_probability=1.0)
        env.update(network)
        self.assertTrue(all(n.light == LightState.RED for n in network.nodes()))
        env.update(network)
        self.assertTrue(all(n.light == LightState.GREEN for n in network.nodes()))

    def test_lights_flip_sometimes(self):
        network = default_network()
        report = EnvironmentSystem(random.Random(6)).update(network)
        # 30% of 81 nodes, loosely
        self.assertGreater(report.lights_flipped, 5)
        self.assertLess(report.lights_flipped, 60)

    def test_incident_edge_is_frozen_until_cleared(self):
        network = default_network()
        edge = network.edge("1-2")
        edge.set_speed(2.0)
        edge.incident = True
        env = EnvironmentSystem(random.Random(7))

        for _ in range(50):
            report = env.update(network)
            self.assertEqual(edge.current_speed, config.MIN_SPEED)
        self.assertEqual(report.edges_perturbed, 143)

        edge.incident = False
        env.update(network)
        self.assertNotEqual(edge.current_speed, config.MIN_SPEED)

    def test_seeded_runs_match(self):
        net1, net2 = default_network(), default_network()
        env1, env2 = EnvironmentSystem(random.Random(9)), EnvironmentSystem(random.Random(9))
        for _ in range(10):
            env1.update(net1)
            env2.update(net2)
        self.assertEqual([e.current_speed for e in net1.edges()], [e.current_speed for e in net2.edges()])
        self.assertEqual([n.light for n in net1.nodes()], [n.light for n in net2.nodes()])

if __name__ == '__main__':
    unittest.main()

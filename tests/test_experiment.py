import json
import os
import tempfile
import unittest

from autopath.experiments.run_experiment import load_parameters, run_headless_experiment

class TestHeadlessExperiment(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.output = os.path.join(self.tmpdir.name, "result.json")

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_default_trip_arrives(self):
        result = run_headless_experiment(None, self.output)

        self.assertTrue(result["arrived"])
        self.assertFalse(result["failed"])
        self.assertEqual(result["seed"], 42)
        self.assertEqual(result["route"]["path"][-1], "81")
        self.assertTrue(result["samples"])
        self.assertTrue(any("Destination reached" in e["message"] for e in result["log"]))

        with open(self.output) as f:
            written = json.load(f)
        self.assertEqual(written["ticks"], result["ticks"])

    def test_config_file(self):
        config_path = os.path.join(self.tmpdir.name, "config.json")
        with open(config_path, "w") as f:
            json.dump({"seed": 7, "penalty_weight": 3.0}, f)

        params = load_parameters(config_path)
        self.assertEqual(params.seed, 7)
        self.assertEqual(params.penalty_weight, 3.0)

        result = run_headless_experiment(config_path, self.output)
        self.assertEqual(result["seed"], 7)
        self.assertEqual(result["penaltyWeight"], 3.0)

    def test_same_config_same_trace(self):
        first = run_headless_experiment(None, self.output)
        second = run_headless_experiment(None, self.output)
        self.assertEqual(first["metrics"], second["metrics"])
        self.assertEqual(first["samples"], second["samples"])

if __name__ == '__main__':
    unittest.main()

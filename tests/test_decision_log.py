import unittest

from autopath.domain.models import Severity
from autopath.kernel.decision_log import DecisionLog

class TestDecisionLog(unittest.TestCase):
    def test_most_recent_first(self):
        log = DecisionLog()
        log.append("first")
        log.append("second", Severity.WARNING)
        log.append("third", Severity.SUCCESS, timestamp=1.5, tick=30)

        entries = log.entries()
        self.assertEqual([e.message for e in entries], ["third", "second", "first"])
        self.assertEqual(entries[0].severity, Severity.SUCCESS)
        self.assertEqual(entries[0].timestamp, 1.5)
        self.assertEqual(entries[0].tick, 30)
        self.assertEqual([e.id for e in entries], [3, 2, 1])

    def test_capacity_drops_oldest(self):
        log = DecisionLog()
        for i in range(150):
            log.append(f"event {i}")
        entries = log.entries()
        self.assertEqual(len(log), 100)
        self.assertEqual(entries[0].message, "event 149")
        self.assertEqual(entries[-1].message, "event 50")

    def test_clear(self):
        log = DecisionLog(capacity=3)
        log.append("a", Severity.ERROR)
        log.clear()
        self.assertEqual(len(log), 0)
        self.assertEqual(log.entries(), [])

    def test_mirrors_to_logging(self):
        log = DecisionLog()
        with self.assertLogs("autopath.kernel.decision_log", level="ERROR") as captured:
            log.append("Path connectivity lost", Severity.ERROR)
        self.assertIn("Path connectivity lost", captured.output[0])

if __name__ == '__main__':
    unittest.main()

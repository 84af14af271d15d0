import logging
from collections import deque
from typing import Deque, List

from autopath.domain import config
from autopath.domain.models import DecisionLogEntry, Severity

logger = logging.getLogger(__name__)

_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.SUCCESS: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}

class DecisionLog:
    """Bounded record of planning, reroute and incident events, newest first."""

    def __init__(self, capacity: int = config.LOG_CAPACITY):
        self._entries: Deque[DecisionLogEntry] = deque(maxlen=capacity)
        self._next_id = 1

    def append(self, message: str, severity: Severity = Severity.INFO,
               timestamp: float = 0.0, tick: int = 0) -> DecisionLogEntry:
        entry = DecisionLogEntry(id=self._next_id, timestamp=timestamp, tick=tick,
                                 severity=severity, message=message)
        self._next_id += 1
        self._entries.appendleft(entry)
        logger.log(_LEVELS[severity], "[%s] %s", severity.value, message)
        return entry

    def entries(self) -> List[DecisionLogEntry]:
        return list(self._entries)

    def clear(self):
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

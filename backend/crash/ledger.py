from collections import deque
from decimal import Decimal

from .state import HistoryEntry

HISTORY_LIMIT = 15


class HistoryLedger:
    """Newest-first record of recent crash points."""

    def __init__(self, capacity: int = HISTORY_LIMIT):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._entries = deque(maxlen=capacity)
        self._next_id = 1

    def record(self, crash_point: Decimal) -> HistoryEntry:
        entry = HistoryEntry(id=self._next_id, crash_point=crash_point)
        self._next_id += 1
        # appendleft on a full deque drops the oldest (rightmost) entry
        self._entries.appendleft(entry)
        return entry

    def entries(self) -> list:
        return list(self._entries)

    def to_list(self) -> list:
        return [e.to_dict() for e in self._entries]

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(list(self._entries))

from __future__ import annotations

from collections import deque

from breeding_advisor.application.interfaces.history_store import DEFAULT_HISTORY_CAPACITY
from breeding_advisor.domain.models.compatibility import EvaluationLogEntry


class InMemoryHistoryStore:
    """Process-local history, used when no history file is configured."""

    def __init__(self, *, capacity: int = DEFAULT_HISTORY_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._entries: deque[EvaluationLogEntry] = deque(maxlen=capacity)

    async def append(self, entry: EvaluationLogEntry) -> None:
        self._entries.appendleft(entry)

    async def entries(self, limit: int | None = None) -> list[EvaluationLogEntry]:
        items = list(self._entries)
        if limit is not None:
            items = items[: max(limit, 0)]
        return items

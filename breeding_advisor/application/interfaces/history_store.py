from __future__ import annotations

from typing import Protocol

from breeding_advisor.domain.models.compatibility import EvaluationLogEntry

DEFAULT_HISTORY_CAPACITY = 100


class HistoryStore(Protocol):
    async def append(self, entry: EvaluationLogEntry) -> None:
        """Prepend `entry`, evicting the oldest entries beyond capacity."""
        ...

    async def entries(self, limit: int | None = None) -> list[EvaluationLogEntry]:
        """Most-recent-first snapshot of the log."""
        ...

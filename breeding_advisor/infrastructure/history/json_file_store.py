from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
import weakref
from pathlib import Path

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from breeding_advisor.application.errors import HistoryPersistenceError
from breeding_advisor.application.interfaces.history_store import DEFAULT_HISTORY_CAPACITY
from breeding_advisor.domain.models.compatibility import EvaluationLogEntry
from breeding_advisor.interfaces.schemas.compatibility import EvaluationLogEntrySchema

logger = logging.getLogger(__name__)

_history_adapter = TypeAdapter(list[EvaluationLogEntrySchema])

# One writer lock per backing file and event loop, shared by every store instance.
# asyncio locks bind to the loop that first waits on them.
_loop_locks: weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, dict[Path, asyncio.Lock]] = (
    weakref.WeakKeyDictionary()
)


def _lock_for(path: Path) -> asyncio.Lock:
    locks = _loop_locks.setdefault(asyncio.get_running_loop(), {})
    lock = locks.get(path)
    if lock is None:
        lock = locks[path] = asyncio.Lock()
    return lock


class JsonFileHistoryStore:
    """Evaluation history kept as a most-recent-first JSON array on disk.

    Appends are serialized per file and written via temp file + os.replace,
    so readers only ever see a complete document of at most `capacity` entries.
    """

    def __init__(self, path: str | Path, *, capacity: int = DEFAULT_HISTORY_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.path = Path(path).resolve()
        self.capacity = capacity

    async def append(self, entry: EvaluationLogEntry) -> None:
        async with _lock_for(self.path):
            history = await asyncio.to_thread(self._read)
            history.insert(0, EvaluationLogEntrySchema.from_domain(entry))
            del history[self.capacity :]
            await asyncio.to_thread(self._write, history)
        logger.info(
            "Compatibility evaluation logged for %s and %s",
            entry.male_name,
            entry.female_name,
        )

    async def entries(self, limit: int | None = None) -> list[EvaluationLogEntry]:
        history = await asyncio.to_thread(self._read)
        if limit is not None:
            history = history[: max(limit, 0)]
        return [item.to_domain() for item in history]

    def _read(self) -> list[EvaluationLogEntrySchema]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as e:
            raise HistoryPersistenceError(
                f"Cannot read history file {self.path}", details={"error": str(e)}
            ) from e
        if not raw.strip():
            return []
        try:
            return _history_adapter.validate_python(json.loads(raw))
        except (json.JSONDecodeError, PydanticValidationError) as e:
            logger.error("Discarding corrupt history file %s: %s", self.path, e)
            return []

    def _write(self, history: list[EvaluationLogEntrySchema]) -> None:
        payload = json.dumps(
            _history_adapter.dump_python(history, mode="json", by_alias=True),
            indent=2,
        )
        tmp_name: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(payload)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise HistoryPersistenceError(
                f"Cannot write history file {self.path}", details={"error": str(e)}
            ) from e

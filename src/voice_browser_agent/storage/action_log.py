from __future__ import annotations

import threading
from collections import deque
from typing import Any, Optional

from loguru import logger

from ..domain.models import ActionLog
from .interfaces import ActionLogRepository, EntityKind
from .memory import InMemoryEntityStore


class MemoryActionLog(ActionLogRepository):
    """Most-recent-first action log over the entity store's ``logs`` table.

    ``max_entries=None`` keeps everything; otherwise the oldest entries beyond
    the cap are evicted (and dropped from the store) on every append.
    """

    def __init__(self, store: InMemoryEntityStore, *, max_entries: Optional[int] = None, name: str = "actions") -> None:
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be positive or None")
        self._store = store
        self._order: deque[str] = deque()
        self._lock = threading.Lock()
        self.max_entries = max_entries
        self.name = name

    def __len__(self) -> int:
        with self._lock:
            return len(self._order)

    def append(self, entry: ActionLog | dict[str, Any]) -> ActionLog:
        payload = entry.to_dict() if isinstance(entry, ActionLog) else dict(entry)
        record: ActionLog = self._store.create(EntityKind.LOGS, payload)
        evicted: list[str] = []
        with self._lock:
            self._order.appendleft(record.id)
            if self.max_entries is not None:
                while len(self._order) > self.max_entries:
                    evicted.append(self._order.pop())
        for log_id in evicted:
            self._store.delete(EntityKind.LOGS, log_id)
        if evicted:
            logger.debug("Evicted {} entries from {} log", len(evicted), self.name)
        return record

    def list(self, limit: int = 100, *, user_id: Optional[str] = None) -> list[ActionLog]:
        if limit <= 0:
            return []
        with self._lock:
            ids = list(self._order)
        out: list[ActionLog] = []
        for log_id in ids:
            record = self._store.get(EntityKind.LOGS, log_id)
            if record is None:
                continue
            if user_id is not None and record.user_id != user_id:
                continue
            out.append(record)
            if len(out) >= limit:
                break
        return out

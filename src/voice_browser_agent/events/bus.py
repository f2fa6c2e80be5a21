from __future__ import annotations

import threading
from collections import deque
from typing import Any, Callable

from loguru import logger

from ..constants import RECENT_EVENTS_LIMIT
from ..domain.models import _id, now_iso

Subscriber = Callable[[dict[str, Any]], None]


class EventBus:
    def __init__(self, *, history_limit: int = RECENT_EVENTS_LIMIT) -> None:
        self._recent: deque[dict[str, Any]] = deque(maxlen=history_limit)
        self._subscribers: list[Subscriber] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        with self._lock:
            self._subscribers.append(callback)

        def _unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return _unsubscribe

    def emit(self, *, channel: str, event_type: str, entity_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        event = {
            "id": _id("evt"),
            "channel": channel,
            "type": event_type,
            "entity_id": entity_id,
            "payload": payload,
            "ts": now_iso(),
        }
        with self._lock:
            self._recent.append(event)
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(event)
            except Exception:
                logger.exception("Event subscriber failed for {}", event_type)
        return event

    def list_recent(self, limit: int = 100, *, channel: str | None = None) -> list[dict[str, Any]]:
        with self._lock:
            events = list(self._recent)
        if channel is not None:
            events = [event for event in events if event["channel"] == channel]
        return events[-limit:] if limit > 0 else []

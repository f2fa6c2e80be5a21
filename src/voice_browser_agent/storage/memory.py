from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from ..domain.models import (
    COMPLETION_STATUSES,
    ActionLog,
    BrowserProfile,
    BrowsingHistoryItem,
    ChatConversation,
    TaskExecution,
    TaskTemplate,
    _id,
    now_iso,
)
from .interfaces import EntityKind, EntityStore, Predicate


T = TypeVar("T")


@dataclass(frozen=True)
class _KindRules(Generic[T]):
    prefix: str
    stamp_field: str
    loader: Callable[[dict[str, Any]], T]
    on_update: Optional[Callable[[T, dict[str, Any]], None]] = None


def _stamp_completion(execution: TaskExecution, fields: dict[str, Any]) -> None:
    if fields.get("status") in COMPLETION_STATUSES:
        execution.completed_at = now_iso()


def _touch_conversation(conversation: ChatConversation, fields: dict[str, Any]) -> None:
    conversation.updated_at = now_iso()


_KINDS: dict[EntityKind, _KindRules[Any]] = {
    EntityKind.PROFILES: _KindRules("profile", "created_at", BrowserProfile.from_dict),
    EntityKind.HISTORY: _KindRules("visit", "visited_at", BrowsingHistoryItem.from_dict),
    EntityKind.TEMPLATES: _KindRules("template", "created_at", TaskTemplate.from_dict),
    EntityKind.EXECUTIONS: _KindRules("exec", "started_at", TaskExecution.from_dict, _stamp_completion),
    EntityKind.CONVERSATIONS: _KindRules("conv", "created_at", ChatConversation.from_dict, _touch_conversation),
    EntityKind.LOGS: _KindRules("log", "timestamp", ActionLog.from_dict),
}


def _newest_first(items: list[T], key: Callable[[T], str]) -> list[T]:
    # Reversed first so that equal timestamps still come out newest-inserted first.
    return sorted(reversed(items), key=key, reverse=True)


class InMemoryEntityStore(EntityStore):
    """Process-lifetime tables keyed by generated id, one table per entity kind.

    Lookups by anything other than id are linear scans. Mutations hold a single
    re-entrant lock for the duration of the table operation only; concurrent
    updates to the same record are last-write-wins.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._tables: dict[EntityKind, dict[str, Any]] = {kind: {} for kind in _KINDS}

    @staticmethod
    def _kind(kind: EntityKind | str) -> EntityKind:
        try:
            return EntityKind(kind)
        except ValueError:
            raise ValueError(f"Unknown entity kind: {kind}") from None

    def create(self, kind: EntityKind | str, payload: dict[str, Any]) -> Any:
        resolved = self._kind(kind)
        rules = _KINDS[resolved]
        data = {k: v for k, v in dict(payload).items() if k not in {"id", rules.stamp_field}}
        data["id"] = _id(rules.prefix)
        data[rules.stamp_field] = now_iso()
        record = rules.loader(data)
        with self._lock:
            self._tables[resolved][record.id] = record
        return record

    def insert(self, kind: EntityKind | str, record: Any) -> Any:
        """Store a fully-formed record under its own id (used for seed data)."""
        resolved = self._kind(kind)
        with self._lock:
            self._tables[resolved][record.id] = record
        return record

    def get(self, kind: EntityKind | str, entity_id: str) -> Optional[Any]:
        resolved = self._kind(kind)
        with self._lock:
            return self._tables[resolved].get(entity_id)

    def list(self, kind: EntityKind | str, predicate: Optional[Predicate] = None) -> list[Any]:
        resolved = self._kind(kind)
        with self._lock:
            records = list(self._tables[resolved].values())
        if predicate is None:
            return records
        return [record for record in records if predicate(record)]

    def update(self, kind: EntityKind | str, entity_id: str, fields: dict[str, Any]) -> Optional[Any]:
        resolved = self._kind(kind)
        rules = _KINDS[resolved]
        with self._lock:
            existing = self._tables[resolved].get(entity_id)
            if existing is None:
                return None
            merged_data = existing.to_dict()
            merged_data.update({k: v for k, v in fields.items() if k not in {"id", rules.stamp_field}})
            merged = rules.loader(merged_data)
            if rules.on_update is not None:
                rules.on_update(merged, fields)
            self._tables[resolved][entity_id] = merged
            return merged

    def delete(self, kind: EntityKind | str, entity_id: str) -> bool:
        resolved = self._kind(kind)
        with self._lock:
            return self._tables[resolved].pop(entity_id, None) is not None

    def count(self, kind: EntityKind | str) -> int:
        resolved = self._kind(kind)
        with self._lock:
            return len(self._tables[resolved])

    # Typed lookups over the generic tables.

    def profiles_for(self, user_id: str) -> list[BrowserProfile]:
        return self.list(EntityKind.PROFILES, lambda p: p.user_id == user_id)

    def history_for(self, profile_id: str, limit: int = 50) -> list[BrowsingHistoryItem]:
        items = self.list(EntityKind.HISTORY, lambda h: h.profile_id == profile_id)
        return _newest_first(items, key=lambda h: h.visited_at)[: max(limit, 0)]

    def search_history(self, profile_id: str, query: str) -> list[BrowsingHistoryItem]:
        needle = query.lower()

        def _matches(item: BrowsingHistoryItem) -> bool:
            if item.profile_id != profile_id:
                return False
            return needle in (item.title or "").lower() or needle in item.url.lower()

        return _newest_first(self.list(EntityKind.HISTORY, _matches), key=lambda h: h.visited_at)

    def templates_for(self, user_id: str) -> list[TaskTemplate]:
        return self.list(EntityKind.TEMPLATES, lambda t: t.user_id == user_id)

    def executions_for(self, user_id: str) -> list[TaskExecution]:
        items = self.list(EntityKind.EXECUTIONS, lambda e: e.user_id == user_id)
        return _newest_first(items, key=lambda e: e.started_at)

    def conversation_for(self, user_id: str) -> Optional[ChatConversation]:
        for conversation in self.list(EntityKind.CONVERSATIONS):
            if conversation.user_id == user_id:
                return conversation
        return None

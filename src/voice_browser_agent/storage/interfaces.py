from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Optional

from ..domain.models import ActionLog


class EntityKind(str, Enum):
    PROFILES = "profiles"
    HISTORY = "history"
    TEMPLATES = "templates"
    EXECUTIONS = "executions"
    CONVERSATIONS = "conversations"
    LOGS = "logs"


Predicate = Callable[[Any], bool]


class EntityStore(ABC):
    @abstractmethod
    def create(self, kind: EntityKind | str, payload: dict[str, Any]) -> Any:
        raise NotImplementedError

    @abstractmethod
    def get(self, kind: EntityKind | str, entity_id: str) -> Optional[Any]:
        raise NotImplementedError

    @abstractmethod
    def list(self, kind: EntityKind | str, predicate: Optional[Predicate] = None) -> list[Any]:
        raise NotImplementedError

    @abstractmethod
    def update(self, kind: EntityKind | str, entity_id: str, fields: dict[str, Any]) -> Optional[Any]:
        raise NotImplementedError

    @abstractmethod
    def delete(self, kind: EntityKind | str, entity_id: str) -> bool:
        raise NotImplementedError


class ActionLogRepository(ABC):
    @abstractmethod
    def append(self, entry: ActionLog | dict[str, Any]) -> ActionLog:
        raise NotImplementedError

    @abstractmethod
    def list(self, limit: int = 100, *, user_id: Optional[str] = None) -> list[ActionLog]:
        raise NotImplementedError

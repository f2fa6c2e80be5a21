from .action_log import MemoryActionLog
from .container import AgentContainer
from .interfaces import ActionLogRepository, EntityKind, EntityStore
from .memory import InMemoryEntityStore

__all__ = [
    "AgentContainer",
    "EntityKind",
    "EntityStore",
    "ActionLogRepository",
    "InMemoryEntityStore",
    "MemoryActionLog",
]

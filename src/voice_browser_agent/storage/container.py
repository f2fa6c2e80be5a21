from __future__ import annotations

from typing import Optional

from ..config import AgentConfig
from ..events.bus import EventBus
from .action_log import MemoryActionLog
from .bootstrap import seed_default_data
from .memory import InMemoryEntityStore


class AgentContainer:
    def __init__(self, config: Optional[AgentConfig] = None, *, seed: bool = True) -> None:
        self.config = config or AgentConfig()
        self.store = InMemoryEntityStore()
        self.bus = EventBus()

        self.action_logs = MemoryActionLog(self.store, name="actions")
        self.automation_logs = MemoryActionLog(
            self.store,
            max_entries=self.config.automation_log_limit,
            name="automation",
        )

        if seed:
            seed_default_data(self.store, self.config.default_user_id)

    @property
    def user_id(self) -> str:
        return self.config.default_user_id

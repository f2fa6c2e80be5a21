from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any, Callable, Union

import pytest

Reply = Union[str, dict, Exception]


class FakeCompletions:
    """Stands in for ``AsyncOpenAI().chat.completions``; replays queued replies."""

    def __init__(self, replies: list[Reply]) -> None:
        self.replies = list(replies)
        self.calls: list[dict[str, Any]] = []

    async def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        reply = self.replies.pop(0) if self.replies else ""
        if isinstance(reply, Exception):
            raise reply
        content = json.dumps(reply) if isinstance(reply, dict) else reply
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class FakeOpenAI:
    def __init__(self, replies: list[Reply]) -> None:
        self.completions = FakeCompletions(replies)
        self.chat = SimpleNamespace(completions=self.completions)


@pytest.fixture
def fake_openai() -> Callable[..., FakeOpenAI]:
    def _make(*replies: Reply) -> FakeOpenAI:
        return FakeOpenAI(list(replies))

    return _make


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"

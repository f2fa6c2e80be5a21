from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal, Optional


ExecutionStatus = Literal["running", "completed", "failed", "cancelled"]
ChatRole = Literal["user", "assistant"]

TERMINAL_STATUSES = frozenset({"completed", "failed", "cancelled"})
COMPLETION_STATUSES = frozenset({"completed", "failed"})


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:10]}"


@dataclass
class BrowserProfile:
    id: str = field(default_factory=lambda: _id("profile"))
    user_id: Optional[str] = None
    name: str = ""
    session_data: dict[str, Any] = field(default_factory=dict)
    is_default: bool = False
    created_at: str = field(default_factory=now_iso)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BrowserProfile":
        return cls(
            id=str(data.get("id") or _id("profile")),
            user_id=data.get("user_id"),
            name=str(data.get("name") or ""),
            session_data=dict(data.get("session_data") or {}),
            is_default=bool(data.get("is_default") or False),
            created_at=str(data.get("created_at") or now_iso()),
        )


@dataclass
class BrowsingHistoryItem:
    id: str = field(default_factory=lambda: _id("visit"))
    profile_id: Optional[str] = None
    url: str = ""
    title: Optional[str] = None
    favicon: Optional[str] = None
    summary: Optional[str] = None
    visited_at: str = field(default_factory=now_iso)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BrowsingHistoryItem":
        return cls(
            id=str(data.get("id") or _id("visit")),
            profile_id=data.get("profile_id"),
            url=str(data.get("url") or ""),
            title=data.get("title"),
            favicon=data.get("favicon"),
            summary=data.get("summary"),
            visited_at=str(data.get("visited_at") or now_iso()),
        )


@dataclass
class TaskStep:
    type: str = "custom"
    description: Optional[str] = None

    @property
    def label(self) -> str:
        return self.description or self.type

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TaskStep":
        return cls(type=str(data.get("type") or "custom"), description=data.get("description"))


@dataclass
class TaskTemplate:
    id: str = field(default_factory=lambda: _id("template"))
    user_id: Optional[str] = None
    name: str = ""
    description: Optional[str] = None
    category: str = "general"
    steps: list[TaskStep] = field(default_factory=list)
    variables: list[dict[str, Any]] = field(default_factory=list)
    is_public: bool = False
    created_at: str = field(default_factory=now_iso)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["steps"] = [step.to_dict() for step in self.steps]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TaskTemplate":
        steps: list[TaskStep] = []
        for raw in list(data.get("steps") or []):
            if isinstance(raw, TaskStep):
                steps.append(raw)
            elif isinstance(raw, dict):
                steps.append(TaskStep.from_dict(raw))
        return cls(
            id=str(data.get("id") or _id("template")),
            user_id=data.get("user_id"),
            name=str(data.get("name") or ""),
            description=data.get("description"),
            category=str(data.get("category") or "general"),
            steps=steps,
            variables=[v for v in list(data.get("variables") or []) if isinstance(v, dict)],
            is_public=bool(data.get("is_public") or False),
            created_at=str(data.get("created_at") or now_iso()),
        )


@dataclass
class TaskExecution:
    id: str = field(default_factory=lambda: _id("exec"))
    template_id: str = ""
    user_id: Optional[str] = None
    status: ExecutionStatus = "running"
    progress: int = 0
    logs: list[str] = field(default_factory=list)
    result: Optional[dict[str, Any]] = None
    parameters: dict[str, Any] = field(default_factory=dict)
    started_at: str = field(default_factory=now_iso)
    completed_at: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TaskExecution":
        return cls(
            id=str(data.get("id") or _id("exec")),
            template_id=str(data.get("template_id") or ""),
            user_id=data.get("user_id"),
            status=str(data.get("status") or "running"),  # type: ignore[arg-type]
            progress=int(data.get("progress") or 0),
            logs=[str(line) for line in list(data.get("logs") or [])],
            result=data.get("result"),
            parameters=dict(data.get("parameters") or {}),
            started_at=str(data.get("started_at") or now_iso()),
            completed_at=data.get("completed_at"),
        )


@dataclass
class ActionLog:
    id: str = field(default_factory=lambda: _id("log"))
    user_id: Optional[str] = None
    action: str = ""
    details: dict[str, Any] = field(default_factory=dict)
    url: Optional[str] = None
    timestamp: str = field(default_factory=now_iso)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ActionLog":
        details = data.get("details")
        return cls(
            id=str(data.get("id") or _id("log")),
            user_id=data.get("user_id"),
            action=str(data.get("action") or ""),
            details=dict(details) if isinstance(details, dict) else ({"value": details} if details is not None else {}),
            url=data.get("url"),
            timestamp=str(data.get("timestamp") or now_iso()),
        )


@dataclass
class TaskAction:
    id: str = field(default_factory=lambda: _id("action"))
    type: str = "custom"
    label: str = ""
    parameters: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TaskAction":
        return cls(
            id=str(data.get("id") or _id("action")),
            type=str(data.get("type") or "custom"),
            label=str(data.get("label") or "Perform Action"),
            parameters=dict(data.get("parameters") or {}),
        )


@dataclass
class ChatMessage:
    id: str = field(default_factory=lambda: _id("msg"))
    role: ChatRole = "user"
    content: str = ""
    timestamp: str = field(default_factory=now_iso)
    actions: list[TaskAction] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["actions"] = [action.to_dict() for action in self.actions]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChatMessage":
        return cls(
            id=str(data.get("id") or _id("msg")),
            role=str(data.get("role") or "user"),  # type: ignore[arg-type]
            content=str(data.get("content") or ""),
            timestamp=str(data.get("timestamp") or now_iso()),
            actions=[TaskAction.from_dict(a) for a in list(data.get("actions") or []) if isinstance(a, dict)],
        )


@dataclass
class ChatConversation:
    id: str = field(default_factory=lambda: _id("conv"))
    user_id: Optional[str] = None
    messages: list[dict[str, Any]] = field(default_factory=list)
    context: dict[str, Any] = field(default_factory=dict)
    created_at: str = field(default_factory=now_iso)
    updated_at: str = field(default_factory=now_iso)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChatConversation":
        return cls(
            id=str(data.get("id") or _id("conv")),
            user_id=data.get("user_id"),
            messages=[m for m in list(data.get("messages") or []) if isinstance(m, dict)],
            context=dict(data.get("context") or {}),
            created_at=str(data.get("created_at") or now_iso()),
            updated_at=str(data.get("updated_at") or now_iso()),
        )


@dataclass
class VoiceCommand:
    text: str = ""
    intent: str = "help"
    confidence: float = 0.0
    parameters: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class PageAnalysis:
    page_type: str = "Unknown"
    elements: list[str] = field(default_factory=list)
    summary: str = "No summary available"
    suggested_actions: list[TaskAction] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["suggested_actions"] = [a.to_dict() for a in self.suggested_actions]
        return data


@dataclass
class LoginRequest:
    id: str = field(default_factory=lambda: _id("login"))
    website: str = ""
    needs_credentials: bool = False
    detected_selectors: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

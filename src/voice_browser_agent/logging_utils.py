"""Configure logging and format executions and events for log lines."""

import json
import sys
from typing import Any

from loguru import logger


_TRUNCATE_AT = 240


def configure_logging(level: str = "INFO") -> None:
    """Configure the loguru logger with the specified level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{module}</cyan>:<cyan>{line}</cyan>\n"
            "{message}"
        ),
    )


def _clip(text: str) -> str:
    return (text[:_TRUNCATE_AT] + "…") if len(text) > _TRUNCATE_AT else text


def summarize_execution(execution: Any) -> dict[str, Any]:
    """Render a compact, JSON-friendly summary of a task execution.

    Args:
        execution: ``TaskExecution`` instance (or None).

    Returns:
        A dictionary suitable for logging or serialization.
    """
    if execution is None:
        return {"execution": None}

    d: dict[str, Any] = {
        "execution": getattr(execution, "id", None),
        "template_id": getattr(execution, "template_id", None),
        "status": getattr(execution, "status", None),
        "progress": getattr(execution, "progress", None),
    }
    logs = list(getattr(execution, "logs", []) or [])
    d["logs_n"] = len(logs)
    if logs:
        d["last_log"] = _clip(str(logs[-1]))

    result = getattr(execution, "result", None)
    if isinstance(result, dict) and result.get("error"):
        d["error"] = _clip(str(result["error"]))

    completed_at = getattr(execution, "completed_at", None)
    if completed_at:
        d["completed_at"] = completed_at
    return d


def summarize_event(event: dict[str, Any] | None) -> dict[str, Any]:
    """Flatten a bus event into a single-level summary.

    Args:
        event: Event mapping as emitted by ``EventBus.emit``.

    Returns:
        ``channel``, ``type`` and ``entity_id`` plus any scalar payload fields.
    """
    if not event:
        return {"event": None}
    d: dict[str, Any] = {
        "event": event.get("type"),
        "channel": event.get("channel"),
        "entity_id": event.get("entity_id"),
    }
    payload = event.get("payload") or {}
    for key, value in payload.items():
        if isinstance(value, (str, int, float, bool)) or value is None:
            d[key] = _clip(value) if isinstance(value, str) else value
    return d


def pretty(obj: Any, *, indent: int = 2) -> str:
    """Serialize an object as JSON for readable logs.

    Args:
        obj: Object to serialize.
        indent: Indentation level for JSON output.

    Returns:
        A JSON string when possible; otherwise `str(obj)`.
    """
    try:
        return json.dumps(obj, indent=indent, default=str)
    except Exception:
        return str(obj)

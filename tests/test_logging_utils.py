"""Tests for logging_utils module."""

from __future__ import annotations

import json
import sys

from loguru import logger

from voice_browser_agent.domain.models import TaskExecution
from voice_browser_agent.logging_utils import (
    configure_logging,
    pretty,
    summarize_event,
    summarize_execution,
)


class TestSummarizeExecution:
    """Test summarize_execution function."""

    def test_none(self):
        assert summarize_execution(None) == {"execution": None}

    def test_running_execution(self):
        execution = TaskExecution(id="exec-1", template_id="t", progress=33, logs=["Step 1: Open page"])
        result = summarize_execution(execution)

        assert result["execution"] == "exec-1"
        assert result["status"] == "running"
        assert result["progress"] == 33
        assert result["logs_n"] == 1
        assert result["last_log"] == "Step 1: Open page"
        assert "completed_at" not in result
        assert "error" not in result

    def test_failed_execution_includes_error(self):
        execution = TaskExecution(
            id="exec-2",
            status="failed",
            result={"success": False, "error": "x" * 500},
            completed_at="2026-01-01T00:00:00+00:00",
        )
        result = summarize_execution(execution)

        assert result["completed_at"] == "2026-01-01T00:00:00+00:00"
        assert result["error"].endswith("…")
        assert len(result["error"]) < 500


class TestSummarizeEvent:
    """Test summarize_event function."""

    def test_empty(self):
        assert summarize_event(None) == {"event": None}

    def test_scalar_payload_is_flattened(self):
        event = {
            "type": "execution.progress",
            "channel": "executions",
            "entity_id": "exec-1",
            "payload": {"progress": 67, "label": "Extract", "nested": {"skip": True}},
        }
        result = summarize_event(event)

        assert result == {
            "event": "execution.progress",
            "channel": "executions",
            "entity_id": "exec-1",
            "progress": 67,
            "label": "Extract",
        }


class TestPretty:
    def test_json_serializable(self):
        assert json.loads(pretty({"a": [1, 2]})) == {"a": [1, 2]}

    def test_falls_back_to_default_str(self):
        assert "object" in pretty({"obj": object()})


def test_configure_logging_respects_level(capsys):
    configure_logging("warning")
    logger.info("hidden message")
    logger.warning("visible message")
    err = capsys.readouterr().err
    assert "visible message" in err
    assert "hidden message" not in err
    logger.remove()
    logger.add(sys.__stderr__, level="INFO")

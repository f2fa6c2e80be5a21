from __future__ import annotations

from typing import Any

from voice_browser_agent.events import EventBus


def test_emit_delivers_to_subscribers_and_records_history() -> None:
    bus = EventBus()
    received: list[dict[str, Any]] = []
    bus.subscribe(received.append)

    event = bus.emit(channel="executions", event_type="execution.started", entity_id="exec-1", payload={"steps": 3})

    assert received == [event]
    assert event["type"] == "execution.started"
    assert event["id"].startswith("evt-")
    assert bus.list_recent() == [event]


def test_unsubscribe_stops_delivery() -> None:
    bus = EventBus()
    received: list[dict[str, Any]] = []
    unsubscribe = bus.subscribe(received.append)
    unsubscribe()
    bus.emit(channel="logs", event_type="log.appended", entity_id="log-1", payload={})
    assert received == []


def test_failing_subscriber_does_not_block_others() -> None:
    bus = EventBus()
    received: list[str] = []

    def _boom(event: dict[str, Any]) -> None:
        raise RuntimeError("subscriber broke")

    bus.subscribe(_boom)
    bus.subscribe(lambda event: received.append(event["type"]))
    bus.emit(channel="executions", event_type="execution.progress", entity_id="e", payload={"progress": 50})
    assert received == ["execution.progress"]


def test_recent_history_is_bounded_and_filterable() -> None:
    bus = EventBus(history_limit=3)
    for i in range(5):
        bus.emit(channel="a" if i % 2 else "b", event_type=f"t{i}", entity_id=str(i), payload={})
    assert [e["type"] for e in bus.list_recent()] == ["t2", "t3", "t4"]
    assert [e["type"] for e in bus.list_recent(channel="a")] == ["t3"]
    assert [e["type"] for e in bus.list_recent(limit=1)] == ["t4"]
    assert bus.list_recent(limit=0) == []

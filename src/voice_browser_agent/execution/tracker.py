"""Background execution of task templates.

Each execution walks its template's ordered steps on the running event loop.
Progress after step ``i`` of ``n`` is ``round((i + 1) / n * 100)`` rounded half
up, logs are append-only, and cancellation requests are honoured before every
step.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Optional

from loguru import logger

from ..constants import DEFAULT_STEP_DELAY_SECONDS
from ..domain.models import TaskExecution, TaskStep, TaskTemplate
from ..errors import TemplateNotFoundError
from ..events.bus import EventBus
from ..logging_utils import summarize_execution
from ..storage.interfaces import EntityKind
from ..storage.memory import InMemoryEntityStore

StepRunner = Callable[[TaskStep, TaskExecution], Awaitable[None]]


def step_progress(index: int, total: int) -> int:
    """Percent complete after finishing step ``index`` (zero-based) of ``total``."""
    if total <= 0:
        return 100
    return ((index + 1) * 200 + total) // (2 * total)


class SimulatedStepRunner:
    """Stands in for real automation: every step just takes ``delay`` seconds."""

    def __init__(self, delay: float = DEFAULT_STEP_DELAY_SECONDS) -> None:
        self.delay = delay

    async def __call__(self, step: TaskStep, execution: TaskExecution) -> None:
        await asyncio.sleep(self.delay)


class TaskExecutionTracker:
    def __init__(
        self,
        store: InMemoryEntityStore,
        bus: EventBus,
        *,
        step_runner: Optional[StepRunner] = None,
        step_delay: float = DEFAULT_STEP_DELAY_SECONDS,
    ) -> None:
        self._store = store
        self._bus = bus
        self._step_runner: StepRunner = step_runner or SimulatedStepRunner(step_delay)
        self._tasks: dict[str, asyncio.Task[None]] = {}
        self._cancel_requested: set[str] = set()

    def get(self, execution_id: str) -> Optional[TaskExecution]:
        return self._store.get(EntityKind.EXECUTIONS, execution_id)

    def is_active(self, execution_id: str) -> bool:
        task = self._tasks.get(execution_id)
        return task is not None and not task.done()

    async def start(
        self,
        template: TaskTemplate,
        *,
        user_id: Optional[str],
        parameters: Optional[dict[str, Any]] = None,
    ) -> TaskExecution:
        """Create a running execution and schedule its steps in the background."""
        execution: TaskExecution = self._store.create(
            EntityKind.EXECUTIONS,
            {
                "template_id": template.id,
                "user_id": user_id,
                "status": "running",
                "progress": 0,
                "logs": [],
                "result": None,
                "parameters": dict(parameters or {}),
            },
        )
        logger.info("Execution {} started for template '{}' ({} steps)", execution.id, template.name, len(template.steps))
        self._bus.emit(
            channel="executions",
            event_type="execution.started",
            entity_id=execution.id,
            payload={"template_id": template.id, "steps": len(template.steps)},
        )
        task = asyncio.get_running_loop().create_task(
            self._run(execution.id, list(template.steps), dict(parameters or {})),
            name=f"execution-{execution.id}",
        )
        self._tasks[execution.id] = task
        task.add_done_callback(lambda _t, eid=execution.id: self._forget(eid))
        return execution

    async def start_by_id(
        self,
        template_id: str,
        *,
        user_id: Optional[str],
        parameters: Optional[dict[str, Any]] = None,
    ) -> TaskExecution:
        template = self._store.get(EntityKind.TEMPLATES, template_id)
        if template is None:
            raise TemplateNotFoundError(f"Template not found: {template_id}")
        return await self.start(template, user_id=user_id, parameters=parameters)

    def cancel(self, execution_id: str) -> Optional[TaskExecution]:
        """Request cancellation of a live execution; honoured before its next step or its completion."""
        execution = self.get(execution_id)
        if execution is None:
            return None
        if execution.is_terminal or execution_id not in self._tasks:
            return execution
        self._cancel_requested.add(execution_id)
        logger.info("Cancellation requested for execution {}", execution_id)
        return execution

    async def join(self, execution_id: str, timeout: Optional[float] = None) -> Optional[TaskExecution]:
        task = self._tasks.get(execution_id)
        if task is not None:
            await asyncio.wait_for(asyncio.shield(task), timeout=timeout)
        return self.get(execution_id)

    async def shutdown(self) -> None:
        tasks = [task for task in self._tasks.values() if not task.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.info("Stopped {} in-flight execution(s)", len(tasks))

    def _forget(self, execution_id: str) -> None:
        self._tasks.pop(execution_id, None)
        self._cancel_requested.discard(execution_id)

    def _update(self, execution_id: str, fields: dict[str, Any]) -> Optional[TaskExecution]:
        return self._store.update(EntityKind.EXECUTIONS, execution_id, fields)

    def _append_log(self, execution_id: str, line: str, **fields: Any) -> Optional[TaskExecution]:
        current = self.get(execution_id)
        logs = list(current.logs) if current else []
        logs.append(line)
        return self._update(execution_id, {"logs": logs, **fields})

    def _finish_cancelled(self, execution_id: str) -> None:
        self._append_log(
            execution_id,
            "Execution cancelled",
            status="cancelled",
            result={"success": False, "cancelled": True},
        )
        self._bus.emit(channel="executions", event_type="execution.cancelled", entity_id=execution_id, payload={})
        logger.info("Execution {} cancelled", execution_id)

    async def _run(self, execution_id: str, steps: list[TaskStep], parameters: dict[str, Any]) -> None:
        total = len(steps)
        try:
            for index, step in enumerate(steps):
                if execution_id in self._cancel_requested:
                    self._finish_cancelled(execution_id)
                    return

                execution = self._append_log(execution_id, f"Step {index + 1}: {step.label}")
                if execution is None:
                    logger.warning("Execution {} vanished from the store; stopping", execution_id)
                    return
                await self._step_runner(step, execution)

                progress = step_progress(index, total)
                self._update(execution_id, {"progress": progress})
                self._bus.emit(
                    channel="executions",
                    event_type="execution.progress",
                    entity_id=execution_id,
                    payload={"progress": progress, "step": index + 1, "total": total, "label": step.label},
                )

            if execution_id in self._cancel_requested:
                self._finish_cancelled(execution_id)
                return

            finished = self._update(
                execution_id,
                {
                    "status": "completed",
                    "progress": 100,
                    "result": {
                        "success": True,
                        "message": "Task completed successfully",
                        "steps": total,
                        "parameters": parameters,
                    },
                },
            )
            self._bus.emit(channel="executions", event_type="execution.completed", entity_id=execution_id, payload={})
            logger.info("Execution finished: {}", summarize_execution(finished))
        except asyncio.CancelledError:
            self._finish_cancelled(execution_id)
            raise
        except Exception as exc:
            logger.exception("Execution {} failed", execution_id)
            self._update(execution_id, {"status": "failed", "result": {"success": False, "error": str(exc)}})
            self._bus.emit(
                channel="executions",
                event_type="execution.failed",
                entity_id=execution_id,
                payload={"error": str(exc)},
            )

"""Task template and execution endpoints, mounted under ``/api/tasks``."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException
from loguru import logger

from ..execution.tracker import TaskExecutionTracker
from ..storage.container import AgentContainer
from ..storage.interfaces import EntityKind
from .models import CreateTemplateRequest, ExecuteTaskRequest


def create_task_router(container: AgentContainer, tracker: TaskExecutionTracker) -> APIRouter:
    router = APIRouter(prefix="/api/tasks", tags=["tasks"])
    store = container.store

    @router.get("/templates")
    async def list_templates() -> list[dict[str, Any]]:
        return [t.to_dict() for t in store.templates_for(container.user_id)]

    @router.post("/templates")
    async def create_template(body: CreateTemplateRequest) -> dict[str, Any]:
        payload = body.model_dump()
        payload["user_id"] = container.user_id
        template = store.create(EntityKind.TEMPLATES, payload)
        logger.info("Created task template {} ({} steps)", template.id, len(template.steps))
        return template.to_dict()

    @router.get("/executions")
    async def list_executions() -> list[dict[str, Any]]:
        return [e.to_dict() for e in store.executions_for(container.user_id)]

    @router.get("/executions/{execution_id}")
    async def get_execution(execution_id: str) -> dict[str, Any]:
        execution = tracker.get(execution_id)
        if execution is None:
            raise HTTPException(status_code=404, detail="Execution not found")
        return execution.to_dict()

    @router.post("/executions/{execution_id}/cancel")
    async def cancel_execution(execution_id: str) -> dict[str, Any]:
        execution = tracker.cancel(execution_id)
        if execution is None:
            raise HTTPException(status_code=404, detail="Execution not found")
        return execution.to_dict()

    @router.post("/execute")
    async def execute_task(body: ExecuteTaskRequest) -> dict[str, Any]:
        if not body.template_id:
            raise HTTPException(status_code=400, detail="Template ID required")
        template = store.get(EntityKind.TEMPLATES, body.template_id)
        if template is None:
            raise HTTPException(status_code=404, detail="Template not found")
        try:
            execution = await tracker.start(template, user_id=container.user_id, parameters=body.parameters)
        except Exception as exc:
            logger.exception("Failed to start execution for template {}", template.id)
            raise HTTPException(status_code=500, detail="Failed to start task execution") from exc
        return execution.to_dict()

    return router

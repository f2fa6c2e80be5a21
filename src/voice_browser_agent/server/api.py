"""FastAPI application for the voice browser agent dashboard."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..config import AgentConfig
from ..constants import DEFAULT_LOG_LIST_LIMIT, SERVICE_NAME, SERVICE_VERSION
from ..errors import NotFoundError
from ..execution.tracker import TaskExecutionTracker
from ..logging_utils import summarize_event
from ..services.browser import SimulatedBrowser
from ..services.generator import ContentGenerator
from ..services.voice import VoiceProcessor
from ..services.wordpress import WordPressClient
from ..storage.container import AgentContainer
from .assistant_api import create_assistant_router
from .browser_api import create_browser_router
from .models import LogActionRequest
from .task_api import create_task_router


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "invalid value")
    return f"Invalid request: {location}: {message}" if location else f"Invalid request: {message}"


def create_app(
    config: Optional[AgentConfig] = None,
    *,
    container: Optional[AgentContainer] = None,
    generator: Optional[ContentGenerator] = None,
    browser: Optional[SimulatedBrowser] = None,
    wordpress: Optional[WordPressClient] = None,
    enable_cors: bool = True,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Runtime settings; read from the environment when omitted.
        container: Pre-built store and logs (tests inject their own).
        generator: Completion client; built from ``config`` when omitted.
        browser: Page automation backend; simulated by default.
        wordpress: WordPress REST client.
        enable_cors: Whether to enable CORS.

    Returns:
        Configured FastAPI app.
    """
    config = config or (container.config if container is not None else AgentConfig())
    container = container or AgentContainer(config)
    generator = generator or ContentGenerator(config.openai_api_key, config.openai_model)
    browser = browser or SimulatedBrowser(generator, navigate_delay=config.navigate_delay_seconds)
    wordpress = wordpress or WordPressClient(config)
    voice = VoiceProcessor()
    tracker = TaskExecutionTracker(container.store, container.bus, step_delay=config.step_delay_seconds)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        unsubscribe = container.bus.subscribe(lambda event: logger.debug("event {}", summarize_event(event)))
        logger.info("{} {} ready (user={})", SERVICE_NAME, SERVICE_VERSION, container.user_id)
        try:
            yield
        finally:
            unsubscribe()
            await tracker.shutdown()

    app = FastAPI(
        title=SERVICE_NAME,
        description="Backend for the voice-driven browser automation dashboard",
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )

    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.state.config = config
    app.state.container = container
    app.state.tracker = tracker

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": _validation_message(exc)})

    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": str(exc)})

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on {} {}", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    @app.get("/")
    async def root() -> dict[str, str]:
        return {"name": SERVICE_NAME, "version": SERVICE_VERSION, "status": "running"}

    # Action logs

    @app.get("/api/logs")
    async def list_logs(limit: int = Query(DEFAULT_LOG_LIST_LIMIT)) -> list[dict[str, Any]]:
        return [entry.to_dict() for entry in container.action_logs.list(limit, user_id=container.user_id)]

    @app.post("/api/logs")
    async def log_action(body: LogActionRequest) -> dict[str, bool]:
        container.automation_logs.append(
            {
                "user_id": container.user_id,
                "action": body.action,
                "details": body.details,
                "url": body.url,
            }
        )
        return {"logged": True}

    @app.get("/api/logs/automation")
    async def list_automation_logs(limit: int = Query(DEFAULT_LOG_LIST_LIMIT)) -> list[dict[str, Any]]:
        return [entry.to_dict() for entry in container.automation_logs.list(limit)]

    @app.get("/api/events")
    async def list_events(
        limit: int = Query(100),
        channel: Optional[str] = Query(None),
    ) -> list[dict[str, Any]]:
        return container.bus.list_recent(limit, channel=channel)

    app.include_router(create_task_router(container, tracker))
    app.include_router(create_browser_router(container, browser, generator))
    app.include_router(create_assistant_router(container, generator, voice, wordpress))

    return app

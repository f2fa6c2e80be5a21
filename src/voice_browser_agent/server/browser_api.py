"""Profiles, browsing history and simulated browser session endpoints."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Query
from loguru import logger

from ..constants import DEFAULT_HISTORY_LIMIT
from ..services.browser import SimulatedBrowser
from ..services.generator import ContentGenerator
from ..storage.container import AgentContainer
from ..storage.interfaces import EntityKind
from .models import AddHistoryRequest, CreateProfileRequest, CreateSessionRequest, NavigateRequest


def create_browser_router(
    container: AgentContainer,
    browser: SimulatedBrowser,
    generator: ContentGenerator,
) -> APIRouter:
    router = APIRouter(prefix="/api", tags=["browser"])
    store = container.store

    # Profiles and history

    @router.get("/profiles")
    async def list_profiles() -> list[dict[str, Any]]:
        return [p.to_dict() for p in store.profiles_for(container.user_id)]

    @router.post("/profiles")
    async def create_profile(body: CreateProfileRequest) -> dict[str, Any]:
        payload = body.model_dump()
        payload["user_id"] = container.user_id
        return store.create(EntityKind.PROFILES, payload).to_dict()

    @router.get("/history/{profile_id}")
    async def list_history(profile_id: str, limit: int = Query(DEFAULT_HISTORY_LIMIT)) -> list[dict[str, Any]]:
        return [h.to_dict() for h in store.history_for(profile_id, limit)]

    @router.post("/history")
    async def add_history(body: AddHistoryRequest) -> dict[str, Any]:
        payload = body.model_dump()
        if body.url and body.title:
            payload["summary"] = await generator.summarize_content(f"{body.title} - {body.url}")
        return store.create(EntityKind.HISTORY, payload).to_dict()

    @router.get("/history/{profile_id}/search")
    async def search_history(profile_id: str, q: Optional[str] = Query(None)) -> list[dict[str, Any]]:
        if not q:
            raise HTTPException(status_code=400, detail="Search query required")
        return [h.to_dict() for h in store.search_history(profile_id, q)]

    # Browser sessions

    @router.post("/browser/session")
    async def create_session(body: Optional[CreateSessionRequest] = None) -> dict[str, Any]:
        session = await browser.create_session(body.profile_id if body else None)
        return session.to_dict()

    @router.post("/browser/{session_id}/navigate")
    async def navigate(session_id: str, body: NavigateRequest) -> dict[str, Any]:
        session = await browser.navigate(session_id, body.url)
        container.action_logs.append(
            {
                "user_id": container.user_id,
                "action": "navigate",
                "details": {"url": body.url, "session_id": session_id},
                "url": body.url,
            }
        )
        logger.debug("Session {} navigated to {}", session_id, body.url)
        return session.to_dict()

    @router.post("/browser/{session_id}/back")
    async def go_back(session_id: str) -> dict[str, Any]:
        return (await browser.go_back(session_id)).to_dict()

    @router.post("/browser/{session_id}/forward")
    async def go_forward(session_id: str) -> dict[str, Any]:
        return (await browser.go_forward(session_id)).to_dict()

    @router.post("/browser/{session_id}/refresh")
    async def refresh(session_id: str) -> dict[str, Any]:
        return (await browser.refresh(session_id)).to_dict()

    @router.get("/browser/{session_id}/analyze")
    async def analyze(session_id: str) -> dict[str, Any]:
        return (await browser.analyze(session_id)).to_dict()

    @router.get("/browser/{session_id}/scrape")
    async def scrape(session_id: str) -> dict[str, Any]:
        data = await browser.scrape(session_id)
        container.action_logs.append(
            {
                "user_id": container.user_id,
                "action": "scrape_data",
                "details": {"session_id": session_id, "data_size": len(data.text)},
                "url": data.url,
            }
        )
        return data.to_dict()

    @router.get("/browser/{session_id}/screenshot")
    async def screenshot(session_id: str) -> dict[str, str]:
        return await browser.screenshot(session_id)

    return router

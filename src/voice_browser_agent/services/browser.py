"""Simulated page automation backend.

Sessions, navigation history and page content are fabricated deterministically
from the URL; nothing here drives a real browser engine.
"""

from __future__ import annotations

import asyncio
import base64
from dataclasses import asdict, dataclass, field
from typing import Any, Optional
from urllib.parse import urlparse

from loguru import logger

from ..constants import DEFAULT_NAVIGATE_DELAY_SECONDS, DEFAULT_REFRESH_DELAY_SECONDS
from ..domain.models import PageAnalysis, _id, now_iso
from ..errors import SessionNotFoundError
from .generator import ContentGenerator

BLANK_URL = "about:blank"


@dataclass
class BrowserSession:
    id: str = field(default_factory=lambda: _id("session"))
    profile_id: Optional[str] = None
    url: str = BLANK_URL
    title: str = "New Tab"
    is_loading: bool = False
    back_stack: list[str] = field(default_factory=list)
    forward_stack: list[str] = field(default_factory=list)
    created_at: str = field(default_factory=now_iso)

    @property
    def can_go_back(self) -> bool:
        return bool(self.back_stack)

    @property
    def can_go_forward(self) -> bool:
        return bool(self.forward_stack)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "profile_id": self.profile_id,
            "url": self.url,
            "title": self.title,
            "is_loading": self.is_loading,
            "can_go_back": self.can_go_back,
            "can_go_forward": self.can_go_forward,
        }


@dataclass
class ScrapedData:
    url: str
    title: str
    text: str
    links: list[dict[str, str]] = field(default_factory=list)
    images: list[dict[str, str]] = field(default_factory=list)
    metadata: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def title_for_url(url: str) -> str:
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.hostname:
        return url
    hostname = parsed.hostname
    if "wordpress.com" in hostname or "wp-admin" in hostname or "/wp-admin" in parsed.path:
        return "WordPress Dashboard"
    if "gmail.com" in hostname:
        return "Gmail"
    if "github.com" in hostname:
        return "GitHub"
    return f"{hostname}{parsed.path}"


def sample_text(url: str) -> str:
    if "wordpress" in url:
        return "WordPress Dashboard - Manage your website content, posts, pages, and settings."
    if "github" in url:
        return "GitHub repository with code, documentation, and collaboration tools."
    return f"Sample content from {url}. This would contain the actual page text in a real implementation."


def sample_links(url: str) -> list[dict[str, str]]:
    if "wordpress" in url:
        return [
            {"text": "Posts", "href": "/wp-admin/edit.php"},
            {"text": "Pages", "href": "/wp-admin/edit.php?post_type=page"},
            {"text": "Plugins", "href": "/wp-admin/plugins.php"},
            {"text": "Settings", "href": "/wp-admin/options-general.php"},
        ]
    return [
        {"text": "Home", "href": "/"},
        {"text": "About", "href": "/about"},
        {"text": "Contact", "href": "/contact"},
    ]


def sample_images(url: str) -> list[dict[str, str]]:
    return [
        {"src": "/sample-image-1.jpg", "alt": "Sample image"},
        {"src": "/sample-image-2.jpg", "alt": "Another sample image"},
    ]


def _escape(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;")


def screenshot_preview(url: str, title: str) -> str:
    """Return an SVG mock-up of the page as a base64 data URL."""
    safe_url = _escape(url)
    safe_title = _escape(title)
    svg = f"""<svg width="800" height="600" xmlns="http://www.w3.org/2000/svg">
  <rect width="100%" height="100%" fill="#ffffff"/>
  <rect x="0" y="0" width="100%" height="60" fill="#f8f9fa"/>
  <text x="20" y="35" font-family="Arial, sans-serif" font-size="16" font-weight="bold" fill="#333">{safe_title}</text>
  <rect x="20" y="80" width="760" height="40" fill="#e9ecef" rx="4"/>
  <text x="30" y="105" font-family="monospace" font-size="12" fill="#666">{safe_url}</text>
  <rect x="20" y="140" width="760" height="420" fill="#fff" stroke="#dee2e6" stroke-width="1" rx="4"/>
  <rect x="40" y="160" width="200" height="20" fill="#e9ecef" rx="2"/>
  <rect x="40" y="190" width="300" height="15" fill="#f8f9fa" rx="2"/>
  <rect x="40" y="215" width="250" height="15" fill="#f8f9fa" rx="2"/>
  <rect x="40" y="250" width="100" height="30" fill="#007bff" rx="4"/>
  <text x="60" y="270" font-family="Arial, sans-serif" font-size="12" fill="white">Button</text>
  <rect x="160" y="250" width="100" height="30" fill="#6c757d" rx="4"/>
  <text x="185" y="270" font-family="Arial, sans-serif" font-size="12" fill="white">Link</text>
  <text x="40" y="540" font-family="Arial, sans-serif" font-size="11" fill="#999">Current URL: {safe_url}</text>
</svg>"""
    encoded = base64.b64encode(svg.encode("utf-8")).decode("ascii")
    return f"data:image/svg+xml;base64,{encoded}"


class SimulatedBrowser:
    def __init__(
        self,
        generator: Optional[ContentGenerator] = None,
        *,
        navigate_delay: float = DEFAULT_NAVIGATE_DELAY_SECONDS,
        refresh_delay: float = DEFAULT_REFRESH_DELAY_SECONDS,
    ) -> None:
        self._sessions: dict[str, BrowserSession] = {}
        self._generator = generator or ContentGenerator()
        self.navigate_delay = navigate_delay
        self.refresh_delay = refresh_delay

    def _require(self, session_id: str) -> BrowserSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def get_session(self, session_id: str) -> Optional[BrowserSession]:
        return self._sessions.get(session_id)

    async def create_session(self, profile_id: Optional[str] = None) -> BrowserSession:
        session = BrowserSession(profile_id=profile_id)
        self._sessions[session.id] = session
        logger.debug("Created browser session {} (profile={})", session.id, profile_id)
        return session

    async def _load(self, session: BrowserSession, url: str, delay: float) -> None:
        session.is_loading = True
        session.url = url
        try:
            await asyncio.sleep(delay)
            session.title = title_for_url(url)
        finally:
            session.is_loading = False

    async def navigate(self, session_id: str, url: str) -> BrowserSession:
        session = self._require(session_id)
        previous = session.url
        await self._load(session, url, self.navigate_delay)
        if previous != BLANK_URL:
            session.back_stack.append(previous)
        session.forward_stack.clear()
        return session

    async def go_back(self, session_id: str) -> BrowserSession:
        session = self._require(session_id)
        if not session.back_stack:
            return session
        session.forward_stack.append(session.url)
        await self._load(session, session.back_stack.pop(), 0)
        return session

    async def go_forward(self, session_id: str) -> BrowserSession:
        session = self._require(session_id)
        if not session.forward_stack:
            return session
        session.back_stack.append(session.url)
        await self._load(session, session.forward_stack.pop(), 0)
        return session

    async def refresh(self, session_id: str) -> BrowserSession:
        session = self._require(session_id)
        await self._load(session, session.url, self.refresh_delay)
        return session

    async def scrape(self, session_id: str) -> ScrapedData:
        session = self._require(session_id)
        return ScrapedData(
            url=session.url,
            title=session.title,
            text=sample_text(session.url),
            links=sample_links(session.url),
            images=sample_images(session.url),
            metadata={
                "og:title": session.title,
                "og:description": "Sample description",
                "viewport": "width=device-width, initial-scale=1",
            },
        )

    async def analyze(self, session_id: str) -> PageAnalysis:
        data = await self.scrape(session_id)
        return await self._generator.analyze_page_content(data.url, data.text, data.title)

    async def screenshot(self, session_id: str) -> dict[str, str]:
        session = self._require(session_id)
        return {"screenshot": screenshot_preview(session.url, session.title), "timestamp": now_iso()}

    async def click_element(self, session_id: str, selector: str) -> None:
        self._require(session_id)
        await asyncio.sleep(0.1)

    async def fill_form(self, session_id: str, form_data: dict[str, str]) -> None:
        self._require(session_id)
        for _selector in form_data:
            await asyncio.sleep(0.05)

    async def wait_for_element(self, session_id: str, selector: str, timeout: float = 5.0) -> bool:
        self._require(session_id)
        await asyncio.sleep(min(timeout, 1.0))
        return True

    async def execute_script(self, session_id: str, script: str) -> dict[str, Any]:
        self._require(session_id)
        return {"success": True, "result": "Script executed successfully"}

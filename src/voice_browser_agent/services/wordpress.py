"""WordPress REST client used by the dashboard's publishing actions.

Every public call returns a ``{"success": bool, "data"?, "error"?}`` mapping;
HTTP and network failures are folded into ``error`` rather than raised.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Optional

import httpx
from loguru import logger

from ..config import AgentConfig
from ..constants import WORDPRESS_BULK_PAUSE_SECONDS, WORDPRESS_USER_AGENT
from ..errors import WordPressError

NOT_CONFIGURED = "WordPress configuration not found"


@dataclass(frozen=True)
class WordPressConfig:
    site_url: str
    username: str
    application_password: str

    @property
    def api_root(self) -> str:
        return f"{self.site_url.rstrip('/')}/wp-json"


def _ok(data: Any) -> dict[str, Any]:
    return {"success": True, "data": data}


def _fail(error: str) -> dict[str, Any]:
    return {"success": False, "error": error}


class WordPressClient:
    def __init__(
        self,
        config: Optional[AgentConfig] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
        bulk_pause: float = WORDPRESS_BULK_PAUSE_SECONDS,
    ) -> None:
        self._configs: dict[str, WordPressConfig] = {}
        self._default: Optional[WordPressConfig] = None
        if config is not None and config.has_wordpress_defaults:
            self._default = WordPressConfig(
                site_url=str(config.wp_site_url),
                username=str(config.wp_username),
                application_password=str(config.wp_app_password),
            )
        self._transport = transport
        self._timeout = timeout
        self.bulk_pause = bulk_pause

    def set_config(self, user_id: str, config: WordPressConfig) -> None:
        self._configs[user_id] = config
        logger.info("WordPress site configured for {}: {}", user_id, config.site_url)

    def get_config(self, user_id: str) -> Optional[WordPressConfig]:
        return self._configs.get(user_id) or self._default

    async def _request(
        self,
        config: WordPressConfig,
        endpoint: str,
        method: str = "GET",
        *,
        json_body: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Issue one authenticated call.

        Raises:
            WordPressError: Non-2xx status, network failure or a non-JSON body.
        """
        url = f"{config.api_root}{endpoint}"
        headers = {"User-Agent": WORDPRESS_USER_AGENT, "Content-Type": "application/json"}
        try:
            async with httpx.AsyncClient(
                auth=(config.username, config.application_password),
                headers=headers,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(method, url, json=json_body, params=params)
        except httpx.HTTPError as exc:
            raise WordPressError(f"{exc.__class__.__name__}: {exc}") from exc
        if response.is_error:
            raise WordPressError(f"HTTP {response.status_code}: {response.text}")
        try:
            return response.json()
        except ValueError as exc:
            raise WordPressError(f"Invalid JSON from {endpoint}: {exc}") from exc

    async def _call(self, user_id: str, failure: str, endpoint: str, method: str = "GET", **kwargs: Any) -> dict[str, Any]:
        config = self.get_config(user_id)
        if config is None:
            return _fail(NOT_CONFIGURED)
        try:
            return _ok(await self._request(config, endpoint, method, **kwargs))
        except WordPressError as exc:
            logger.warning("WordPress {} {} failed: {}", method, endpoint, exc)
            return _fail(f"{failure}: {exc}")

    async def test_connection(self, user_id: str) -> dict[str, Any]:
        return await self._call(user_id, "Connection failed", "/wp/v2/users/me")

    async def create_post(self, user_id: str, post: dict[str, Any]) -> dict[str, Any]:
        return await self._call(user_id, "Failed to create post", "/wp/v2/posts", "POST", json_body=post)

    async def update_post(self, user_id: str, post_id: int, updates: dict[str, Any]) -> dict[str, Any]:
        return await self._call(user_id, "Failed to update post", f"/wp/v2/posts/{post_id}", "POST", json_body=updates)

    async def get_posts(self, user_id: str, params: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        return await self._call(user_id, "Failed to fetch posts", "/wp/v2/posts", params=params or None)

    async def delete_post(self, user_id: str, post_id: int) -> dict[str, Any]:
        return await self._call(user_id, "Failed to delete post", f"/wp/v2/posts/{post_id}", "DELETE")

    async def get_categories(self, user_id: str) -> dict[str, Any]:
        return await self._call(user_id, "Failed to fetch categories", "/wp/v2/categories")

    async def create_category(self, user_id: str, name: str, description: Optional[str] = None) -> dict[str, Any]:
        return await self._call(
            user_id,
            "Failed to create category",
            "/wp/v2/categories",
            "POST",
            json_body={"name": name, "description": description or ""},
        )

    async def bulk_create_posts(self, user_id: str, posts: list[dict[str, Any]]) -> dict[str, Any]:
        created: list[Any] = []
        errors: list[dict[str, Any]] = []
        for index, post in enumerate(posts):
            result = await self.create_post(user_id, post)
            if result["success"]:
                created.append(result["data"])
            else:
                errors.append({"post": post.get("title"), "error": result["error"]})
            if index < len(posts) - 1 and self.bulk_pause > 0:
                await asyncio.sleep(self.bulk_pause)

        outcome: dict[str, Any] = {"success": not errors, "data": {"created": created, "errors": errors}}
        if errors:
            outcome["error"] = f"{len(errors)} posts failed to create"
        return outcome

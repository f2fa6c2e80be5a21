"""Tests for the WordPress REST client."""

from __future__ import annotations

import asyncio
import base64
import json

import httpx
import pytest

from voice_browser_agent.config import AgentConfig
from voice_browser_agent.constants import WORDPRESS_USER_AGENT
from voice_browser_agent.services.wordpress import NOT_CONFIGURED, WordPressClient, WordPressConfig

SITE = WordPressConfig(site_url="https://blog.test/", username="admin", application_password="app pass")


class Recorder:
    def __init__(self, responder=None) -> None:
        self.requests: list[httpx.Request] = []
        self.responder = responder or (lambda request: httpx.Response(200, json={"ok": True}))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)


def _client(recorder: Recorder, config: AgentConfig | None = None) -> WordPressClient:
    client = WordPressClient(config, transport=httpx.MockTransport(recorder), bulk_pause=0)
    if config is None:
        client.set_config("u", SITE)
    return client


def test_unconfigured_user_fails_without_request() -> None:
    recorder = Recorder()
    client = WordPressClient(transport=httpx.MockTransport(recorder))
    result = asyncio.run(client.get_posts("nobody"))
    assert result == {"success": False, "error": NOT_CONFIGURED}
    assert recorder.requests == []


def test_requests_use_basic_auth_and_user_agent() -> None:
    recorder = Recorder()
    result = asyncio.run(_client(recorder).test_connection("u"))
    assert result == {"success": True, "data": {"ok": True}}

    request = recorder.requests[0]
    assert str(request.url) == "https://blog.test/wp-json/wp/v2/users/me"
    expected = base64.b64encode(b"admin:app pass").decode()
    assert request.headers["Authorization"] == f"Basic {expected}"
    assert request.headers["User-Agent"] == WORDPRESS_USER_AGENT


def test_create_update_delete_routes() -> None:
    recorder = Recorder()
    client = _client(recorder)

    async def _run() -> None:
        await client.create_post("u", {"title": "Hi", "content": "Body", "status": "draft"})
        await client.update_post("u", 9, {"status": "publish"})
        await client.delete_post("u", 9)
        await client.create_category("u", "News")
        await client.get_categories("u")

    asyncio.run(_run())
    seen = [(r.method, r.url.path) for r in recorder.requests]
    assert seen == [
        ("POST", "/wp-json/wp/v2/posts"),
        ("POST", "/wp-json/wp/v2/posts/9"),
        ("DELETE", "/wp-json/wp/v2/posts/9"),
        ("POST", "/wp-json/wp/v2/categories"),
        ("GET", "/wp-json/wp/v2/categories"),
    ]
    assert json.loads(recorder.requests[0].content) == {"title": "Hi", "content": "Body", "status": "draft"}
    assert json.loads(recorder.requests[3].content) == {"name": "News", "description": ""}


def test_http_error_becomes_failure_result() -> None:
    recorder = Recorder(lambda request: httpx.Response(401, text="rest_not_logged_in"))
    result = asyncio.run(_client(recorder).create_post("u", {"title": "x"}))
    assert result["success"] is False
    assert result["error"] == "Failed to create post: HTTP 401: rest_not_logged_in"


def test_network_error_becomes_failure_result() -> None:
    def _refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    result = asyncio.run(_client(Recorder(_refuse)).test_connection("u"))
    assert result["success"] is False
    assert result["error"].startswith("Connection failed: ConnectError")


def test_bulk_create_collects_per_post_errors() -> None:
    def _responder(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if body["title"] == "bad":
            return httpx.Response(400, text="invalid")
        return httpx.Response(201, json={"id": len(body["title"])})

    result = asyncio.run(
        _client(Recorder(_responder)).bulk_create_posts("u", [{"title": "one"}, {"title": "bad"}, {"title": "three"}])
    )
    assert result["success"] is False
    assert result["error"] == "1 posts failed to create"
    assert result["data"]["created"] == [{"id": 3}, {"id": 5}]
    assert result["data"]["errors"][0]["post"] == "bad"


def test_bulk_create_all_succeed() -> None:
    result = asyncio.run(_client(Recorder()).bulk_create_posts("u", [{"title": "a"}, {"title": "b"}]))
    assert result["success"] is True
    assert "error" not in result


@pytest.mark.parametrize("configured", [True, False])
def test_environment_defaults(configured: bool) -> None:
    env = {"WP_SITE_URL": "https://env.test", "WP_ADMIN_USER": "bot"}
    if configured:
        env["WP_APP_PASSWORD"] = "secret"
    recorder = Recorder()
    client = _client(recorder, AgentConfig(environ=env))
    result = asyncio.run(client.test_connection("anyone"))
    assert result["success"] is configured
    if configured:
        assert recorder.requests[0].url.host == "env.test"

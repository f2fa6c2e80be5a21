"""Tests for the completion-backed generator and its safe defaults."""

from __future__ import annotations

import asyncio

import openai
import pytest

from voice_browser_agent.errors import GeneratorError
from voice_browser_agent.services.generator import (
    CHAT_FALLBACK,
    ContentGenerator,
    extract_actions_from_response,
)


def _run(coro):
    return asyncio.run(coro)


class TestComplete:
    def test_without_client_raises(self) -> None:
        generator = ContentGenerator()
        assert generator.available is False
        with pytest.raises(GeneratorError, match="not configured"):
            _run(generator.complete("sys", "user"))

    def test_json_mode_requests_json_object(self, fake_openai) -> None:
        client = fake_openai({"ok": True})
        result = _run(ContentGenerator(client=client, model="test-model").complete("sys", "user", "json"))
        assert result == {"ok": True}
        call = client.completions.calls[0]
        assert call["model"] == "test-model"
        assert call["response_format"] == {"type": "json_object"}
        assert [m["role"] for m in call["messages"]] == ["system", "user"]

    def test_text_mode_has_no_response_format(self, fake_openai) -> None:
        client = fake_openai("hello")
        assert _run(ContentGenerator(client=client).complete("sys", "user")) == "hello"
        assert "response_format" not in client.completions.calls[0]

    def test_invalid_json_raises(self, fake_openai) -> None:
        with pytest.raises(GeneratorError, match="invalid JSON"):
            _run(ContentGenerator(client=fake_openai("not json")).complete("s", "u", "json"))

    def test_non_object_json_raises(self, fake_openai) -> None:
        with pytest.raises(GeneratorError, match="expected an object"):
            _run(ContentGenerator(client=fake_openai("[1, 2]")).complete("s", "u", "json"))

    def test_api_error_is_wrapped(self, fake_openai) -> None:
        client = fake_openai(openai.OpenAIError("rate limited"))
        with pytest.raises(GeneratorError, match="rate limited"):
            _run(ContentGenerator(client=client).complete("s", "u"))


class TestSafeDefaults:
    def test_voice_command_default(self) -> None:
        command = _run(ContentGenerator().process_voice_command("scroll down"))
        assert command.intent == "help"
        assert command.confidence == 0.0

    def test_voice_command_confidence_clamped(self, fake_openai) -> None:
        generator = ContentGenerator(client=fake_openai({"intent": "scrape", "confidence": -2}))
        command = _run(generator.process_voice_command("grab the prices"))
        assert command.intent == "scrape"
        assert command.confidence == 0.0

    def test_voice_command_unknown_intent_becomes_help(self, fake_openai) -> None:
        generator = ContentGenerator(client=fake_openai({"intent": "dance", "confidence": 0.9, "parameters": {"x": 1}}))
        command = _run(generator.process_voice_command("do a dance"))
        assert command.intent == "help"
        assert command.confidence == 0.9
        assert command.parameters == {"x": 1}

    def test_chat_default(self, fake_openai) -> None:
        generator = ContentGenerator(client=fake_openai(openai.OpenAIError("down")))
        message = _run(generator.process_chat_message("hi", {}))
        assert message.role == "assistant"
        assert message.content == CHAT_FALLBACK

    def test_analysis_default_on_malformed_json(self, fake_openai) -> None:
        analysis = _run(ContentGenerator(client=fake_openai("{oops")).analyze_page_content("https://x", "<p/>"))
        assert analysis.page_type == "Unknown"
        assert analysis.summary == "Analysis failed"
        assert analysis.suggested_actions == []

    def test_analysis_parses_suggested_actions(self, fake_openai) -> None:
        reply = {
            "pageType": "Blog",
            "elements": ["header", "posts"],
            "summary": "A blog",
            "suggestedActions": [{"type": "scrape_data", "label": "Extract posts"}, "junk"],
        }
        analysis = _run(ContentGenerator(client=fake_openai(reply)).analyze_page_content("https://x", "<p/>", "Blog"))
        assert analysis.page_type == "Blog"
        assert [a.label for a in analysis.suggested_actions] == ["Extract posts"]

    def test_analysis_truncates_content(self, fake_openai) -> None:
        client = fake_openai({"pageType": "Long"})
        _run(ContentGenerator(client=client).analyze_page_content("https://x", "a" * 10_000))
        prompt = client.completions.calls[0]["messages"][1]["content"]
        assert prompt.count("a") < 4100

    def test_summary_default(self) -> None:
        assert _run(ContentGenerator().summarize_content("text")) == "Summary not available"

    def test_blog_default(self) -> None:
        assert _run(ContentGenerator().generate_blog_content("topic")).startswith("Failed to generate content")

    def test_login_detection(self, fake_openai) -> None:
        reply = {"hasLoginForm": True, "detectedSelectors": {"username": "#user", "password": "#pass"}}
        login = _run(ContentGenerator(client=fake_openai(reply)).detect_login_form("https://x/login", "<form/>"))
        assert login.needs_credentials is True
        assert login.detected_selectors == {"username": "#user", "password": "#pass"}

    def test_login_detection_default(self) -> None:
        login = _run(ContentGenerator().detect_login_form("https://x", ""))
        assert login.needs_credentials is False
        assert login.website == "https://x"

    def test_post_login_tasks(self, fake_openai) -> None:
        reply = {"actions": [{"type": "click_element", "label": "Open inbox", "parameters": {"selector": "#inbox"}}]}
        actions = _run(ContentGenerator(client=fake_openai(reply)).generate_post_login_tasks("https://x", "..."))
        assert [a.type for a in actions] == ["click_element"]
        assert _run(ContentGenerator().generate_post_login_tasks("https://x", "...")) == []


class TestActionExtraction:
    def test_keywords_map_to_actions(self) -> None:
        actions = extract_actions_from_response(
            "I can analyze the page, then log in and click the button.",
            {"url": "https://shop.test"},
        )
        assert [a.type for a in actions] == ["analyze_page", "login", "click_element"]
        assert all(a.parameters == {"url": "https://shop.test"} for a in actions)

    def test_fill_requires_form_or_field(self) -> None:
        assert extract_actions_from_response("fill it in") == []
        assert [a.type for a in extract_actions_from_response("fill the form")] == ["fill_form"]

    def test_no_keywords(self) -> None:
        assert extract_actions_from_response("Hello there!") == []

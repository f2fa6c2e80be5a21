"""Chat, intent and content generation over the OpenAI chat-completions API.

Every public operation degrades to a safe default when the completion service
is unavailable or returns something unusable; only ``complete`` raises.
"""

from __future__ import annotations

import json
from typing import Any, Literal, Optional

import openai
from loguru import logger

from ..constants import ANALYSIS_CONTENT_CHARS, DEFAULT_MODEL, LOGIN_CONTENT_CHARS, SUMMARY_CONTENT_CHARS
from ..domain.models import ChatMessage, LoginRequest, PageAnalysis, TaskAction, VoiceCommand
from ..errors import GeneratorError

ResponseShape = Literal["text", "json"]

VOICE_INTENTS = ("navigate", "scrape", "create_post", "analyze", "search", "login", "help")

CHAT_FALLBACK = "I'm sorry, I'm having trouble processing your request right now. Please try again."

_VOICE_SYSTEM_PROMPT = """You are a voice command processor for a browser automation assistant. Analyze the user's voice input and extract the intent and parameters. Respond with JSON in this format:
{
  "intent": "navigate|scrape|create_post|analyze|search|login|help",
  "confidence": 0.0-1.0,
  "parameters": {}
}"""

_CHAT_SYSTEM_PROMPT = """You are an AI assistant that helps with browser automation, web scraping, WordPress management, and website login automation. You can:
- Analyze web pages and suggest actions
- Help create and manage WordPress content
- Extract data from websites
- Automate repetitive web tasks
- Automate website logins and form interactions
- Detect login forms and guide users through authentication

Current page context: {context}

Respond in a helpful, conversational tone. If you can suggest specific automation actions, include them in your response."""

_ANALYSIS_SYSTEM_PROMPT = """Analyze the provided webpage content and return a JSON response with:
{
  "pageType": "description of page type",
  "elements": ["key elements found"],
  "summary": "brief summary of the page",
  "suggestedActions": [{"type": "action_type", "label": "Action Label", "parameters": {}}]
}"""

_BLOG_SYSTEM_PROMPT = (
    "You are a professional content writer. Create engaging, informative blog post content that is "
    "well-structured with headings, paragraphs, and natural keyword integration."
)

_LOGIN_SYSTEM_PROMPT = """Analyze the webpage content and detect if there's a login form. Return JSON with:
{
  "hasLoginForm": boolean,
  "detectedSelectors": {"username": "CSS selector", "password": "CSS selector", "submit": "CSS selector"},
  "loginUrl": "detected login page URL if different",
  "confidence": 0.0-1.0
}"""

_POST_LOGIN_SYSTEM_PROMPT = """Analyze the post-login page content and suggest useful automation tasks. Return JSON:
{
  "actions": [
    {"type": "fill_form|click_element|extract_data|custom", "label": "User-friendly action description", "parameters": {"selector": "CSS selector", "action": "specific action"}}
  ]
}"""

# (action type, label, trigger) where trigger decides on the lower-cased reply text.
_ACTION_RULES: tuple[tuple[str, str, Any], ...] = (
    ("wordpress_create_post", "Create WordPress Post", lambda t: "create" in t and "post" in t),
    ("analyze_page", "Analyze Current Page", lambda t: "analyze" in t or "extract" in t),
    ("scrape_data", "Extract Page Data", lambda t: "scrape" in t or "data" in t),
    ("login", "Login to Website", lambda t: "login" in t or "sign in" in t or "log in" in t),
    ("fill_form", "Fill Form", lambda t: "fill" in t and ("form" in t or "field" in t)),
    ("click_element", "Click Element", lambda t: "click" in t or "button" in t),
)


def extract_actions_from_response(content: str, context: Optional[dict[str, Any]] = None) -> list[TaskAction]:
    """Suggest follow-up automation actions from keywords in an assistant reply."""
    text = content.lower()
    url = str((context or {}).get("url") or "")
    actions: list[TaskAction] = []
    for action_type, label, triggered in _ACTION_RULES:
        if triggered(text):
            key = "content" if action_type == "wordpress_create_post" else "url"
            actions.append(TaskAction(type=action_type, label=label, parameters={key: url}))
    return actions


def _clamp(value: Any, low: float = 0.0, high: float = 1.0) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return low
    return max(low, min(high, number))


class ContentGenerator:
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        *,
        client: Any = None,
    ) -> None:
        if client is None and api_key:
            client = openai.AsyncOpenAI(api_key=api_key)
        self._client = client
        self.model = model

    @property
    def available(self) -> bool:
        return self._client is not None

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        response_shape: ResponseShape = "text",
    ) -> str | dict[str, Any]:
        """Run one chat completion.

        Raises:
            GeneratorError: No client configured, the API call failed, or a JSON
                response could not be parsed into an object.
        """
        if self._client is None:
            raise GeneratorError("Completion service is not configured (missing OPENAI_API_KEY)")

        request: dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        }
        if response_shape == "json":
            request["response_format"] = {"type": "json_object"}

        try:
            response = await self._client.chat.completions.create(**request)
        except openai.OpenAIError as exc:
            raise GeneratorError(f"Completion request failed: {exc}") from exc

        try:
            content = response.choices[0].message.content or ""
        except (AttributeError, IndexError, TypeError) as exc:
            raise GeneratorError(f"Malformed completion response: {exc}") from exc

        if response_shape == "text":
            return content
        try:
            parsed = json.loads(content or "{}")
        except json.JSONDecodeError as exc:
            raise GeneratorError(f"Completion returned invalid JSON: {exc}") from exc
        if not isinstance(parsed, dict):
            raise GeneratorError(f"Completion returned {type(parsed).__name__}, expected an object")
        return parsed

    async def process_voice_command(self, text: str) -> VoiceCommand:
        try:
            result = await self.complete(_VOICE_SYSTEM_PROMPT, text, "json")
        except GeneratorError as exc:
            logger.error("Voice command processing failed: {}", exc)
            return VoiceCommand(text=text, intent="help", confidence=0.0, parameters={})
        parameters = result.get("parameters")
        intent = str(result.get("intent") or "help")
        if intent not in VOICE_INTENTS:
            logger.warning("Unrecognised voice intent {!r}; using help", intent)
            intent = "help"
        return VoiceCommand(
            text=text,
            intent=intent,
            confidence=_clamp(result.get("confidence")),
            parameters=parameters if isinstance(parameters, dict) else {},
        )

    async def process_chat_message(self, message: str, context: Optional[dict[str, Any]] = None) -> ChatMessage:
        system_prompt = _CHAT_SYSTEM_PROMPT.format(context=json.dumps(context or {}))
        try:
            content = await self.complete(system_prompt, message)
        except GeneratorError as exc:
            logger.error("Chat processing failed: {}", exc)
            return ChatMessage(role="assistant", content=CHAT_FALLBACK)
        return ChatMessage(
            role="assistant",
            content=str(content),
            actions=extract_actions_from_response(str(content), context),
        )

    async def analyze_page_content(self, url: str, html: str, title: Optional[str] = None) -> PageAnalysis:
        prompt = f"URL: {url}\nTitle: {title or 'Unknown'}\nHTML Content: {html[:ANALYSIS_CONTENT_CHARS]}"
        try:
            result = await self.complete(_ANALYSIS_SYSTEM_PROMPT, prompt, "json")
        except GeneratorError as exc:
            logger.error("Page analysis failed: {}", exc)
            return PageAnalysis(page_type="Unknown", elements=[], summary="Analysis failed", suggested_actions=[])
        elements = result.get("elements")
        suggested = result.get("suggestedActions")
        return PageAnalysis(
            page_type=str(result.get("pageType") or "Unknown"),
            elements=[str(e) for e in elements] if isinstance(elements, list) else [],
            summary=str(result.get("summary") or "No summary available"),
            suggested_actions=[TaskAction.from_dict(a) for a in suggested if isinstance(a, dict)]
            if isinstance(suggested, list)
            else [],
        )

    async def generate_blog_content(self, topic: str, keywords: Optional[list[str]] = None) -> str:
        keyword_text = f"Keywords to include: {', '.join(keywords)}" if keywords else ""
        prompt = (
            f"Create a comprehensive blog post about: {topic}\n{keyword_text}\n\n"
            "Please include an engaging title, introduction, main sections with headings, and a conclusion. "
            "Aim for approximately 1000-1500 words."
        )
        try:
            content = await self.complete(_BLOG_SYSTEM_PROMPT, prompt)
        except GeneratorError as exc:
            logger.error("Content generation failed: {}", exc)
            return "Failed to generate content. Please try again."
        return str(content) or "Content generation failed"

    async def summarize_content(self, content: str, max_length: int = 200) -> str:
        system_prompt = (
            f"Summarize the following content in approximately {max_length} characters. "
            "Be concise but capture the key points."
        )
        try:
            summary = await self.complete(system_prompt, content[:SUMMARY_CONTENT_CHARS])
        except GeneratorError as exc:
            logger.error("Summarization failed: {}", exc)
            return "Summary not available"
        return str(summary) or "Summary not available"

    async def detect_login_form(self, url: str, page_content: str) -> LoginRequest:
        prompt = f"URL: {url}\nPage Content: {page_content[:LOGIN_CONTENT_CHARS]}"
        try:
            result = await self.complete(_LOGIN_SYSTEM_PROMPT, prompt, "json")
        except GeneratorError as exc:
            logger.error("Login form detection failed: {}", exc)
            return LoginRequest(website=url, needs_credentials=False)
        selectors = result.get("detectedSelectors")
        return LoginRequest(
            website=url,
            needs_credentials=bool(result.get("hasLoginForm") or False),
            detected_selectors={k: str(v) for k, v in selectors.items()} if isinstance(selectors, dict) else {},
        )

    async def generate_post_login_tasks(self, website: str, page_content: str) -> list[TaskAction]:
        prompt = f"Website: {website}\nPost-login page content: {page_content[:LOGIN_CONTENT_CHARS]}"
        try:
            result = await self.complete(_POST_LOGIN_SYSTEM_PROMPT, prompt, "json")
        except GeneratorError as exc:
            logger.error("Post-login task generation failed: {}", exc)
            return []
        actions = result.get("actions")
        if not isinstance(actions, list):
            return []
        return [TaskAction.from_dict(a) for a in actions if isinstance(a, dict)]

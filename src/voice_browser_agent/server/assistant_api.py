"""Assistant endpoints: voice commands, chat, content generation, voices and WordPress."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Request
from loguru import logger

from ..domain.models import ChatMessage
from ..services.generator import ContentGenerator
from ..services.voice import VoiceProcessor
from ..services.wordpress import WordPressClient, WordPressConfig
from ..storage.container import AgentContainer
from ..storage.interfaces import EntityKind
from .models import ChatRequest, GenerateContentRequest, VoiceCommandRequest, WordPressConfigRequest


def create_assistant_router(
    container: AgentContainer,
    generator: ContentGenerator,
    voice: VoiceProcessor,
    wordpress: WordPressClient,
) -> APIRouter:
    router = APIRouter(prefix="/api", tags=["assistant"])
    store = container.store

    @router.post("/ai/voice-command")
    async def voice_command(body: VoiceCommandRequest) -> dict[str, Any]:
        if not body.text:
            raise HTTPException(status_code=400, detail="Text required")
        return (await generator.process_voice_command(body.text)).to_dict()

    @router.post("/ai/chat")
    async def chat(body: ChatRequest) -> dict[str, Any]:
        if not body.message:
            raise HTTPException(status_code=400, detail="Message required")

        user_message = ChatMessage(role="user", content=body.message)
        reply = await generator.process_chat_message(body.message, body.context)
        new_messages = [user_message.to_dict(), reply.to_dict()]

        conversation = store.conversation_for(container.user_id)
        if conversation is None:
            store.create(
                EntityKind.CONVERSATIONS,
                {"user_id": container.user_id, "messages": new_messages, "context": body.context},
            )
        else:
            store.update(
                EntityKind.CONVERSATIONS,
                conversation.id,
                {"messages": conversation.messages + new_messages, "context": body.context},
            )
        return reply.to_dict()

    @router.get("/ai/chat/history")
    async def chat_history() -> list[dict[str, Any]]:
        conversation = store.conversation_for(container.user_id)
        return list(conversation.messages) if conversation else []

    @router.post("/ai/generate-content")
    async def generate_content(body: GenerateContentRequest) -> dict[str, str]:
        if not body.topic:
            raise HTTPException(status_code=400, detail="Topic required")
        return {"content": await generator.generate_blog_content(body.topic, body.keywords)}

    @router.get("/voice/voices")
    async def list_voices() -> list[dict[str, Any]]:
        return voice.available_voices()

    @router.get("/voice/config")
    async def audio_config() -> dict[str, Any]:
        return voice.audio_config()

    @router.post("/wordpress/config")
    async def configure_wordpress(body: WordPressConfigRequest) -> dict[str, Any]:
        if not (body.site_url and body.username and body.application_password):
            raise HTTPException(status_code=400, detail="All WordPress credentials required")
        wordpress.set_config(
            container.user_id,
            WordPressConfig(
                site_url=body.site_url,
                username=body.username,
                application_password=body.application_password,
            ),
        )
        return await wordpress.test_connection(container.user_id)

    @router.post("/wordpress/posts")
    async def create_post(request: Request) -> dict[str, Any]:
        try:
            post = await request.json()
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid JSON body") from None
        if not isinstance(post, dict):
            raise HTTPException(status_code=400, detail="Post body must be an object")
        result = await wordpress.create_post(container.user_id, post)
        if result["success"]:
            data = result.get("data")
            container.action_logs.append(
                {
                    "user_id": container.user_id,
                    "action": "wordpress_create_post",
                    "details": {
                        "post_id": data.get("id") if isinstance(data, dict) else None,
                        "title": post.get("title"),
                    },
                }
            )
            logger.info("Created WordPress post '{}'", post.get("title"))
        return result

    @router.get("/wordpress/posts")
    async def list_posts(request: Request) -> dict[str, Any]:
        return await wordpress.get_posts(container.user_id, dict(request.query_params))

    return router

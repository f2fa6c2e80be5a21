"""Pydantic request models for the dashboard API.

Bodies accept the dashboard's camelCase keys as aliases of the snake_case
field names.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class _Request(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CreateProfileRequest(_Request):
    name: str = Field(min_length=1)
    session_data: dict[str, Any] = Field(default_factory=dict, alias="sessionData")
    is_default: bool = Field(False, alias="isDefault")


class AddHistoryRequest(_Request):
    profile_id: str = Field(alias="profileId")
    url: str = Field(min_length=1)
    title: Optional[str] = None
    favicon: Optional[str] = None


class CreateSessionRequest(_Request):
    profile_id: Optional[str] = Field(None, alias="profileId")


class NavigateRequest(_Request):
    url: str = Field(min_length=1)


class VoiceCommandRequest(_Request):
    text: Optional[str] = None


class ChatRequest(_Request):
    message: Optional[str] = None
    context: dict[str, Any] = Field(default_factory=dict)


class GenerateContentRequest(_Request):
    topic: Optional[str] = None
    keywords: list[str] = Field(default_factory=list)


class TaskStepModel(_Request):
    type: str = "custom"
    description: Optional[str] = None


class CreateTemplateRequest(_Request):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    category: str = "general"
    steps: list[TaskStepModel] = Field(default_factory=list)
    variables: list[dict[str, Any]] = Field(default_factory=list)
    is_public: bool = Field(False, alias="isPublic")


class ExecuteTaskRequest(_Request):
    template_id: Optional[str] = Field(None, alias="templateId")
    parameters: dict[str, Any] = Field(default_factory=dict)


class LogActionRequest(_Request):
    action: str = Field(min_length=1)
    details: Any = None
    url: Optional[str] = None


class WordPressConfigRequest(_Request):
    site_url: Optional[str] = Field(None, alias="siteUrl")
    username: Optional[str] = None
    application_password: Optional[str] = Field(None, alias="applicationPassword")

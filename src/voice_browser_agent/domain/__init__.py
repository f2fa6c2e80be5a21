from .models import (
    ActionLog,
    BrowserProfile,
    BrowsingHistoryItem,
    ChatConversation,
    ChatMessage,
    LoginRequest,
    PageAnalysis,
    TaskAction,
    TaskExecution,
    TaskStep,
    TaskTemplate,
    VoiceCommand,
)

__all__ = [
    "BrowserProfile",
    "BrowsingHistoryItem",
    "TaskStep",
    "TaskTemplate",
    "TaskExecution",
    "ActionLog",
    "ChatConversation",
    "ChatMessage",
    "TaskAction",
    "VoiceCommand",
    "PageAnalysis",
    "LoginRequest",
]

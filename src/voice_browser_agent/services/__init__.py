from .browser import BrowserSession, ScrapedData, SimulatedBrowser
from .generator import ContentGenerator, extract_actions_from_response
from .voice import VoiceProcessor, VoiceSettings
from .wordpress import WordPressClient, WordPressConfig

__all__ = [
    "BrowserSession",
    "ContentGenerator",
    "ScrapedData",
    "SimulatedBrowser",
    "VoiceProcessor",
    "VoiceSettings",
    "WordPressClient",
    "WordPressConfig",
    "extract_actions_from_response",
]

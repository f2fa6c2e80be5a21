from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Optional

OPTIMAL_SAMPLE_RATE = 16000
SPEECH_ACTIVITY_MIN_BYTES = 1000


@dataclass(frozen=True)
class VoiceSettings:
    language: str = "en-US"
    voice_index: int = 0
    rate: float = 1.0
    pitch: float = 1.0
    volume: float = 1.0


VOICES: tuple[dict[str, Any], ...] = (
    {"name": "English (US) - Female", "language": "en-US", "index": 0},
    {"name": "English (US) - Male", "language": "en-US", "index": 1},
    {"name": "English (UK) - Female", "language": "en-GB", "index": 2},
    {"name": "Spanish (ES) - Female", "language": "es-ES", "index": 3},
)


class VoiceProcessor:
    """Voice catalogue and recognition settings; speech itself happens in the browser."""

    def __init__(self, defaults: Optional[VoiceSettings] = None) -> None:
        self.defaults = defaults or VoiceSettings()

    def available_voices(self) -> list[dict[str, Any]]:
        return [dict(voice) for voice in VOICES]

    def settings(self, **overrides: Any) -> VoiceSettings:
        known = {k: v for k, v in overrides.items() if k in VoiceSettings.__dataclass_fields__ and v is not None}
        return replace(self.defaults, **known)

    def audio_config(self, **overrides: Any) -> dict[str, Any]:
        settings = self.settings(**overrides)
        return {
            "audio_encoding": "WEBM_OPUS",
            "sample_rate_hertz": OPTIMAL_SAMPLE_RATE,
            "language_code": settings.language,
            "enable_automatic_punctuation": True,
            "enable_word_time_offsets": True,
            "max_alternatives": 1,
            "voice": asdict(settings),
        }

    @staticmethod
    def validate_audio(audio: bytes) -> bool:
        return len(audio) > 0

    @staticmethod
    def has_speech_activity(audio: bytes) -> bool:
        return len(audio) > SPEECH_ACTIVITY_MIN_BYTES

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

ENGINES = ("scripted", "llm")

DEFAULT_CONTACT_PHONE = "5511994760149"
DEFAULT_CONTACT_TEXT = "Oi William, acabei de passar pela triagem e quero saber como começar"


class ConfigurationError(RuntimeError):
    """Raised when required settings or credentials are missing or invalid."""


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


@dataclass
class ScreenerConfig:
    # Conversation
    engine: str = "scripted"
    typing_delay_s: float = 1.0
    typing_chars_per_s: float = 0.0
    max_typing_delay_s: float = 4.0

    # Contact handoff
    contact_phone: str = DEFAULT_CONTACT_PHONE
    contact_text: str = DEFAULT_CONTACT_TEXT

    # OpenAI LLM
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"

    # LiveKit
    livekit_url: Optional[str] = None
    livekit_api_key: Optional[str] = None
    livekit_api_secret: Optional[str] = None
    room_name: str = "agent-room"
    identity: str = "agent"

    def __post_init__(self) -> None:
        if self.engine not in ENGINES:
            raise ConfigurationError(f"Unknown engine {self.engine!r}; expected one of {', '.join(ENGINES)}")
        if self.typing_delay_s < 0 or self.max_typing_delay_s < 0 or self.typing_chars_per_s < 0:
            raise ConfigurationError("Typing delay settings must not be negative")

    @classmethod
    def from_env(cls) -> "ScreenerConfig":
        """Load configuration from environment variables."""
        return cls(
            engine=os.getenv("SCREENER_ENGINE", "scripted"),
            typing_delay_s=_float_env("SCREENER_TYPING_DELAY_S", 1.0),
            typing_chars_per_s=_float_env("SCREENER_TYPING_CHARS_PER_S", 0.0),
            max_typing_delay_s=_float_env("SCREENER_MAX_TYPING_DELAY_S", 4.0),
            contact_phone=os.getenv("SCREENER_CONTACT_PHONE", DEFAULT_CONTACT_PHONE),
            contact_text=os.getenv("SCREENER_CONTACT_TEXT", DEFAULT_CONTACT_TEXT),
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
            livekit_url=os.getenv("LIVEKIT_URL"),
            livekit_api_key=os.getenv("LIVEKIT_API_KEY"),
            livekit_api_secret=os.getenv("LIVEKIT_API_SECRET"),
            room_name=os.getenv("LIVEKIT_ROOM", "agent-room"),
            identity=os.getenv("LIVEKIT_IDENTITY", "agent"),
        )

    def require_livekit(self) -> None:
        missing = [
            name
            for name, value in (
                ("LIVEKIT_URL", self.livekit_url),
                ("LIVEKIT_API_KEY", self.livekit_api_key),
                ("LIVEKIT_API_SECRET", self.livekit_api_secret),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(f"Missing LiveKit settings: {', '.join(missing)}")

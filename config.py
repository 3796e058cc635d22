"""
Configuration module for the AI Relay Bridge application.
Reads environment variables once at startup into an immutable settings object.
"""
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings, built once per process and injected into routes."""

    # API Keys
    OPENAI_API_KEY: str = ""
    ELEVENLABS_API_KEY: str = ""
    GEMINI_API_KEY: str = ""

    # Overridable defaults
    OPENAI_MODEL: str = "gpt-4.1-mini"
    ELEVENLABS_VOICE_ID: str = "21m00Tcm4TlvDq8ikWAM"

    # API Configuration
    OPENAI_CHAT_URL: str = "https://api.openai.com/v1/chat/completions"
    ELEVENLABS_TTS_URL: str = "https://api.elevenlabs.io/v1/text-to-speech/{voice_id}"
    GEMINI_GENERATE_URL: str = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

    # Provider models
    MODERATION_MODEL: str = "gpt-4.1-mini"
    GEMINI_CHAT_MODEL: str = "gemini-2.5-flash"
    GEMINI_IMAGE_MODEL: str = "gemini-2.0-flash-preview-image-generation"
    ELEVENLABS_MODEL_ID: str = "eleven_multilingual_v2"

    # Voice synthesis parameters
    VOICE_STABILITY: float = 0.75
    VOICE_SIMILARITY_BOOST: float = 0.75

    # Application Settings
    APP_TITLE: str = "AI Relay Bridge"
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"
    STATIC_DIR: Optional[str] = None
    INDEX_FILE: str = "index.html"
    CORS_ORIGINS: Tuple[str, ...] = ("*",)

    # Timeouts (in seconds)
    UPSTREAM_TIMEOUT: float = 120.0

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the process environment."""
        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            OPENAI_API_KEY=os.getenv("OPENAI_API_KEY", ""),
            ELEVENLABS_API_KEY=os.getenv("ELEVENLABS_API_KEY", ""),
            GEMINI_API_KEY=os.getenv("GEMINI_API_KEY", ""),
            OPENAI_MODEL=os.getenv("OPENAI_MODEL") or cls.OPENAI_MODEL,
            ELEVENLABS_VOICE_ID=os.getenv("ELEVENLABS_VOICE_ID") or cls.ELEVENLABS_VOICE_ID,
            HOST=os.getenv("HOST", cls.HOST),
            PORT=int(os.getenv("PORT", cls.PORT)),
            LOG_LEVEL=os.getenv("LOG_LEVEL", cls.LOG_LEVEL).upper(),
            STATIC_DIR=os.getenv("STATIC_DIR") or None,
            INDEX_FILE=os.getenv("INDEX_FILE", cls.INDEX_FILE),
            CORS_ORIGINS=tuple(o.strip() for o in origins.split(",") if o.strip()) or ("*",),
            UPSTREAM_TIMEOUT=float(os.getenv("UPSTREAM_TIMEOUT", cls.UPSTREAM_TIMEOUT)),
        )

    def configured_providers(self) -> dict:
        """Which provider credentials are present (never the values)."""
        return {
            "openai": bool(self.OPENAI_API_KEY),
            "elevenlabs": bool(self.ELEVENLABS_API_KEY),
            "gemini": bool(self.GEMINI_API_KEY),
        }

    def validate(self, logger) -> None:
        """Log warnings for missing API keys."""
        if not self.OPENAI_API_KEY:
            logger.warning("OPENAI_API_KEY not set: /chat will fail and image moderation is skipped")
        if not self.ELEVENLABS_API_KEY:
            logger.warning("ELEVENLABS_API_KEY not set: /tts will fail")
        if not self.GEMINI_API_KEY:
            logger.warning("GEMINI_API_KEY not set: /image and /gemini/chat will fail")


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, constructed on first use."""
    return Settings.from_env()

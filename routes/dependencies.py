"""
FastAPI dependencies resolving settings and provider credentials.
A missing credential fails the request before anything is sent upstream.
"""
from fastapi import Depends

from config import Settings, get_settings
from errors import ConfigurationError
from utils.logger import app_logger


def _require(settings: Settings, key: str, provider: str) -> Settings:
    if not getattr(settings, key):
        app_logger.error(f"Error: {key} environment variable not set on the server.")
        raise ConfigurationError(provider)
    return settings


def require_openai(settings: Settings = Depends(get_settings)) -> Settings:
    return _require(settings, "OPENAI_API_KEY", "OpenAI")


def require_elevenlabs(settings: Settings = Depends(get_settings)) -> Settings:
    return _require(settings, "ELEVENLABS_API_KEY", "ElevenLabs")


def require_gemini(settings: Settings = Depends(get_settings)) -> Settings:
    return _require(settings, "GEMINI_API_KEY", "Gemini")

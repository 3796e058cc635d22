"""
Pydantic data models for API requests and responses.
"""
from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Message(BaseModel):
    """Chat turn as sent by the client (OpenAI message shape)."""
    model_config = ConfigDict(extra="allow")

    role: str  # "system", "user" or "assistant"
    content: Union[str, List[Dict[str, Any]], None] = None


class ChatRequest(BaseModel):
    """Chat request with ordered conversation history."""
    model: Optional[str] = None
    messages: List[Message]


class TTSRequest(BaseModel):
    """Text-to-speech request. Voice settings are server-side."""
    text: str

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("No text provided for TTS.")
        return value


class ReferenceImage(BaseModel):
    """Inline image passed along with an image-generation prompt."""
    model_config = ConfigDict(populate_by_name=True)

    data: str = Field(..., min_length=1, description="Base64-encoded image bytes")
    mime_type: str = Field(..., alias="mimeType")


class ImageRequest(BaseModel):
    """Image generation request."""
    model_config = ConfigDict(populate_by_name=True)

    prompt: str
    reference_image: Optional[ReferenceImage] = Field(None, alias="referenceImage")

    @field_validator("prompt")
    @classmethod
    def prompt_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Prompt must not be empty.")
        return value


class ImageResponse(BaseModel):
    """Generated image returned to the client."""
    model_config = ConfigDict(populate_by_name=True)

    image: str
    mime_type: str = Field(..., serialization_alias="mimeType")

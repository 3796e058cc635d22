"""
Google Gemini generateContent adapters for chat and image generation.
"""
from typing import Iterator, Optional

import httpx

from errors import UpstreamError, UpstreamProtocolError
from models.api_models import ReferenceImage
from models.relay_models import GeminiConversation, GeneratedImage
from services.adapters.base import ProviderAdapter, decode_error_body
from utils.logger import app_logger


def iter_parts(data: dict, first_candidate: bool = False) -> Iterator[dict]:
    """Yield the content parts of every candidate, or of the first one only."""
    candidates = data.get("candidates") or []
    if first_candidate:
        candidates = candidates[:1]
    for candidate in candidates:
        if not isinstance(candidate, dict):
            continue
        content = candidate.get("content") or {}
        for part in content.get("parts") or []:
            if isinstance(part, dict):
                yield part


def extract_text(data: dict, first_candidate: bool = False) -> str:
    """Concatenate the text parts of a response."""
    parts = iter_parts(data, first_candidate)
    return "".join(part["text"] for part in parts if isinstance(part.get("text"), str))


def find_inline_image(data: dict) -> Optional[GeneratedImage]:
    """First part carrying inline image bytes, or None."""
    text = extract_text(data) or None
    for part in iter_parts(data):
        inline = part.get("inlineData") or part.get("inline_data")
        if not isinstance(inline, dict):
            continue
        b64_data = inline.get("data")
        if not isinstance(b64_data, str) or not b64_data:
            continue
        mime_type = inline.get("mimeType") or inline.get("mime_type") or "image/png"
        return GeneratedImage(data=b64_data, mime_type=mime_type, text=text)
    return None


class GeminiAdapter(ProviderAdapter):
    """Common request/error handling for Gemini models."""

    provider_name = "Gemini"

    @property
    def api_key(self) -> str:
        return self.settings.GEMINI_API_KEY

    async def _generate(self, model: str, payload: dict) -> dict:
        url = self.settings.GEMINI_GENERATE_URL.format(model=model)
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key
        }
        response = await self._post(url, json=payload, headers=headers)
        try:
            data = response.json()
        except ValueError:
            raise UpstreamProtocolError("Gemini returned a non-JSON response", details=response.text)
        if not isinstance(data, dict):
            raise UpstreamProtocolError("Gemini returned an unexpected response", details=data)
        return data

    def interpret_error(self, response: httpx.Response) -> UpstreamError:
        details = decode_error_body(response.content)
        message = None
        if isinstance(details, dict) and isinstance(details.get("error"), dict):
            message = details["error"].get("message")
        return UpstreamError(self.provider_name, response.status_code, details, message)


class GeminiChatAdapter(GeminiAdapter):
    """Non-streaming chat; the route replays the text as a synthesized stream."""

    async def send(self, conversation: GeminiConversation) -> str:
        data = await self._generate(self.settings.GEMINI_CHAT_MODEL, conversation.to_payload())
        text = extract_text(data, first_candidate=True)
        if not text:
            app_logger.error(f"Gemini chat returned no text: {str(data)[:500]}")
            raise UpstreamProtocolError(
                "No text returned from Gemini",
                details=data.get("promptFeedback") or data
            )
        app_logger.info(f"Gemini chat completed: {len(text)} characters")
        return text


class GeminiImageAdapter(GeminiAdapter):
    """Single-turn image generation with an optional reference image."""

    async def send(self, prompt: str, reference_image: Optional[ReferenceImage] = None) -> GeneratedImage:
        parts = []
        if reference_image is not None:
            parts.append({"inlineData": {"mimeType": reference_image.mime_type, "data": reference_image.data}})
        parts.append({"text": prompt})

        payload = {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": {"responseModalities": ["TEXT", "IMAGE"]}
        }
        data = await self._generate(self.settings.GEMINI_IMAGE_MODEL, payload)

        image = find_inline_image(data)
        if image is None:
            app_logger.error(f"Gemini image response had no inline image part: {str(data)[:500]}")
            raise UpstreamProtocolError("No image returned from Gemini", details=data)

        app_logger.info(f"Gemini image generated ({image.mime_type}, {len(image.data)} base64 chars)")
        return image

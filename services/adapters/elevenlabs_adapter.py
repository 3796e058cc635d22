"""
ElevenLabs text-to-speech adapter.
"""
import httpx

from errors import UpstreamError
from services.adapters.base import ProviderAdapter, decode_error_body
from utils.constants import MediaType
from utils.logger import app_logger


class ElevenLabsTTSAdapter(ProviderAdapter):
    """Synthesizes speech with the server's fixed voice and returns the whole MP3."""

    provider_name = "ElevenLabs"

    @property
    def api_key(self) -> str:
        return self.settings.ELEVENLABS_API_KEY

    async def send(self, text: str) -> bytes:
        url = self.settings.ELEVENLABS_TTS_URL.format(voice_id=self.settings.ELEVENLABS_VOICE_ID)
        payload = {
            "text": text,
            "model_id": self.settings.ELEVENLABS_MODEL_ID,
            "voice_settings": {
                "stability": self.settings.VOICE_STABILITY,
                "similarity_boost": self.settings.VOICE_SIMILARITY_BOOST
            }
        }
        headers = {
            "Accept": MediaType.AUDIO_MPEG,
            "Content-Type": "application/json",
            "xi-api-key": self.api_key
        }

        response = await self._post(url, json=payload, headers=headers)
        audio = response.content
        app_logger.info(f"ElevenLabs audio received ({len(audio)} bytes)")
        return audio

    def interpret_error(self, response: httpx.Response) -> UpstreamError:
        """
        Error bodies arrive on an audio request, so they may be JSON or anything else.
        Pull out detail.message / detail / message when the body is JSON.
        """
        details = decode_error_body(response.content)
        message = None
        if isinstance(details, dict):
            detail = details.get("detail")
            if isinstance(detail, dict):
                message = detail.get("message") or detail.get("status")
            elif isinstance(detail, str):
                message = detail
            if message is None and isinstance(details.get("message"), str):
                message = details["message"]
        return UpstreamError(self.provider_name, response.status_code, details, message)

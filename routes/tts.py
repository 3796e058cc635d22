"""
Route handlers for text-to-speech.
"""
from fastapi import APIRouter, Depends

from config import Settings
from models.api_models import TTSRequest
from routes.dependencies import require_elevenlabs
from services.adapters.elevenlabs_adapter import ElevenLabsTTSAdapter
from services.stream_service import StreamService
from utils.constants import MediaType
from utils.http_client import HTTPClientManager

router = APIRouter()


@router.post("/tts")
@router.post("/elevenlabs-tts")
async def text_to_speech(request: TTSRequest, settings: Settings = Depends(require_elevenlabs)):
    """Synthesize speech and return the complete MP3 body."""
    async with HTTPClientManager.open_client(settings.UPSTREAM_TIMEOUT) as client:
        audio = await ElevenLabsTTSAdapter(settings, client).send(request.text)

    return StreamService.binary_response(audio, MediaType.AUDIO_MPEG)

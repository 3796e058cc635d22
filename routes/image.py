"""
Route handlers for image generation.
Screens the prompt through the safety pre-filter, then generates with Gemini.
"""
from fastapi import APIRouter, Depends

from config import Settings
from models.api_models import ImageRequest, ImageResponse
from routes.dependencies import require_gemini
from services.adapters.gemini_adapter import GeminiImageAdapter
from services.adapters.openai_adapter import OpenAIChatAdapter
from services.moderation import ModerationService
from utils.http_client import HTTPClientManager

router = APIRouter()


@router.post("/image")
async def generate_image(request: ImageRequest, settings: Settings = Depends(require_gemini)):
    """
    Generate an image from a prompt and an optional reference image.
    """
    async with HTTPClientManager.open_client(settings.UPSTREAM_TIMEOUT) as client:
        prompt = await ModerationService.screen_prompt(
            request.prompt,
            OpenAIChatAdapter(settings, client),
            settings.MODERATION_MODEL
        )
        image = await GeminiImageAdapter(settings, client).send(prompt, request.reference_image)

    return ImageResponse(image=image.data, mime_type=image.mime_type).model_dump(by_alias=True)

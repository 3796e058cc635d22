"""
Route handlers for chat operations.
Handles OpenAI pass-through streaming and Gemini synthesized streaming.
"""
from fastapi import APIRouter, Depends
from starlette.background import BackgroundTask

from config import Settings
from errors import InvalidRequestError
from models.api_models import ChatRequest
from models.relay_models import RelayStage
from routes.dependencies import require_gemini, require_openai
from services.adapters.gemini_adapter import GeminiChatAdapter
from services.adapters.openai_adapter import OpenAIChatAdapter
from services.stream_service import StreamService
from utils.http_client import HTTPClientManager
from utils.logger import app_logger
from utils.message_translator import normalize_chat_request, translate

router = APIRouter()


@router.post("/chat")
@router.post("/openai/chat")
async def openai_chat(request: ChatRequest, settings: Settings = Depends(require_openai)):
    """
    Stream an OpenAI chat completion to the client byte for byte.
    """
    chat_request = normalize_chat_request(request.messages, request.model, settings.OPENAI_MODEL)

    client = HTTPClientManager.create_client(settings.UPSTREAM_TIMEOUT)
    try:
        app_logger.debug(f"/chat stage: {RelayStage.DISPATCHED.value}")
        upstream = await OpenAIChatAdapter(settings, client).send(chat_request)
    except BaseException:
        await client.aclose()
        raise

    return StreamService.sse_response(
        StreamService.passthrough(upstream, client, provider="OpenAI"),
        background=BackgroundTask(StreamService.close_upstream, upstream, client)
    )


@router.post("/gemini/chat")
async def gemini_chat(request: ChatRequest, settings: Settings = Depends(require_gemini)):
    """
    Answer with Gemini in one call, replayed in the same SSE framing as /chat.
    """
    conversation = translate(request.messages)
    if not conversation.contents:
        raise InvalidRequestError("No valid messages provided in the request body.")

    async with HTTPClientManager.open_client(settings.UPSTREAM_TIMEOUT) as client:
        app_logger.debug(f"/gemini/chat stage: {RelayStage.BUFFERING.value}")
        text = await GeminiChatAdapter(settings, client).send(conversation)

    return StreamService.sse_response(StreamService.synthesize(text))

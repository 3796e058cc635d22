"""
Streaming relay.
Pipes upstream chat streams, synthesizes streams from buffered text and sends binary bodies.
"""
import json
from typing import AsyncIterator, Optional

import httpx
from fastapi.responses import Response, StreamingResponse
from starlette.background import BackgroundTask

from models.relay_models import RelayStage
from utils.constants import SSE, MediaType
from utils.logger import app_logger


class StreamService:
    """Service for delivering provider results to the client."""

    @staticmethod
    def send_sse_data(data: dict | str) -> str:
        """Format one Server-Sent Events data frame."""
        payload = data if isinstance(data, str) else json.dumps(data, separators=(',', ':'))
        return f"{SSE.DATA_PREFIX}{payload}{SSE.EVENT_END}"

    @staticmethod
    def delta_event(text: str) -> str:
        """Chat delta frame in the OpenAI streaming shape."""
        return StreamService.send_sse_data({"choices": [{"delta": {"content": text}}]})

    @staticmethod
    def done_event() -> str:
        return StreamService.send_sse_data(SSE.DONE)

    @staticmethod
    async def passthrough(
        upstream: httpx.Response,
        client: Optional[httpx.AsyncClient] = None,
        provider: str = "upstream"
    ) -> AsyncIterator[bytes]:
        """
        Relay upstream bytes as they arrive, without buffering or reframing.

        Headers are already committed once the first chunk is out, so an
        upstream failure here only ends the stream. The upstream response and
        its client are closed on every exit, including client disconnects.
        """
        stage = RelayStage.STREAMING
        bytes_sent = 0
        try:
            async for chunk in upstream.aiter_bytes():
                bytes_sent += len(chunk)
                yield chunk
            stage = RelayStage.COMPLETE
            app_logger.info(f"{provider} stream to client ended successfully ({bytes_sent} bytes)")
        except (httpx.HTTPError, httpx.StreamError) as e:
            stage = RelayStage.FAILED
            app_logger.error(f"Error during {provider} stream to client after {bytes_sent} bytes: {e}")
        finally:
            if stage is RelayStage.STREAMING:
                app_logger.warning(f"{provider} stream abandoned by client after {bytes_sent} bytes")
            await StreamService.close_upstream(upstream, client)

    @staticmethod
    async def close_upstream(upstream: httpx.Response, client: Optional[httpx.AsyncClient] = None) -> None:
        """Close an upstream response and its client. Safe to call more than once."""
        await upstream.aclose()
        if client is not None:
            await client.aclose()

    @staticmethod
    async def synthesize(text: str) -> AsyncIterator[str]:
        """One delta frame carrying the whole text, then the terminal sentinel."""
        yield StreamService.delta_event(text)
        yield StreamService.done_event()

    @staticmethod
    def sse_response(events: AsyncIterator, background: Optional[BackgroundTask] = None) -> StreamingResponse:
        return StreamingResponse(
            events,
            media_type=MediaType.EVENT_STREAM,
            headers=SSE.HEADERS,
            background=background
        )

    @staticmethod
    def binary_response(content: bytes, media_type: str) -> Response:
        """Complete payload written once, no stream framing."""
        return Response(
            content=content,
            media_type=media_type,
            headers={"Cache-Control": "no-cache"}
        )

import httpx
import pytest
from starlette.background import BackgroundTask

from services.stream_service import StreamService
from tests.fixtures.mock_clients import chunked_stream
from tests.fixtures.responses import OPENAI_STREAM_CHUNKS
from tests.helpers import assembled_content, assert_chat_sse_framing


async def _collect(iterator):
    return [item async for item in iterator]


def _decode(items):
    return "".join(item.decode() if isinstance(item, bytes) else item for item in items)


def test_delta_event_matches_openai_frame():
    assert StreamService.delta_event("Hi") == 'data: {"choices":[{"delta":{"content":"Hi"}}]}\n\n'
    assert StreamService.done_event() == "data: [DONE]\n\n"


@pytest.mark.anyio
async def test_synthesize_emits_one_delta_then_done():
    events = await _collect(StreamService.synthesize("Hello there!"))

    assert events == [
        'data: {"choices":[{"delta":{"content":"Hello there!"}}]}\n\n',
        "data: [DONE]\n\n",
    ]


@pytest.mark.anyio
async def test_synthetic_and_real_streams_share_framing():
    """Synthesized single-chunk and real multi-chunk streams should be structurally identical."""
    upstream = httpx.Response(200, content=chunked_stream(OPENAI_STREAM_CHUNKS))

    real = _decode(await _collect(StreamService.passthrough(upstream, provider="OpenAI")))
    synthetic = _decode(await _collect(StreamService.synthesize("Hello there!")))

    assert_chat_sse_framing(real)
    assert_chat_sse_framing(synthetic)
    assert assembled_content(real) == assembled_content(synthetic) == "Hello there!"


@pytest.mark.anyio
async def test_passthrough_relays_chunks_unmodified():
    upstream = httpx.Response(200, content=chunked_stream([b"data: a", b"bc\n\n", b"data: [DONE]\n\n"]))

    chunks = await _collect(StreamService.passthrough(upstream))

    assert b"".join(chunks) == b"data: abc\n\ndata: [DONE]\n\n"


@pytest.mark.anyio
async def test_passthrough_ends_cleanly_on_mid_stream_error():
    """An upstream failure after the first chunk should end the stream without raising."""
    upstream = httpx.Response(200, content=chunked_stream(OPENAI_STREAM_CHUNKS, fail_after=2))
    client = httpx.AsyncClient()

    chunks = await _collect(StreamService.passthrough(upstream, client, provider="OpenAI"))

    assert chunks == OPENAI_STREAM_CHUNKS[:2]
    assert upstream.is_closed
    assert client.is_closed


def test_binary_response_writes_payload_once():
    response = StreamService.binary_response(b"\xff\xfbaudio", "audio/mpeg")
    assert response.body == b"\xff\xfbaudio"
    assert response.media_type == "audio/mpeg"
    assert response.headers["cache-control"] == "no-cache"


@pytest.mark.anyio
async def test_sse_response_background_closes_unread_upstream():
    """The close task should release the upstream even if the body is never iterated."""
    upstream = httpx.Response(200, content=chunked_stream(OPENAI_STREAM_CHUNKS))
    client = httpx.AsyncClient()
    response = StreamService.sse_response(
        StreamService.passthrough(upstream, client, provider="OpenAI"),
        background=BackgroundTask(StreamService.close_upstream, upstream, client),
    )

    await response.background()

    assert upstream.is_closed
    assert client.is_closed
    await StreamService.close_upstream(upstream, client)

import json

DONE_FRAME = "data: [DONE]"


def sse_frames(body):
    """Split an SSE body into its non-empty frames."""
    return [frame for frame in body.split("\n\n") if frame.strip()]


def assert_chat_sse_framing(body):
    """
    Assert the body is a chat SSE stream: every frame is a single `data: <json>`
    line and the stream ends with exactly one `data: [DONE]` frame.
    """
    frames = sse_frames(body)
    assert frames, "SSE body is empty"
    assert frames[-1] == DONE_FRAME, f"Stream does not end with [DONE]:\n{body}"
    assert frames.count(DONE_FRAME) == 1, f"Expected exactly one [DONE] frame:\n{body}"

    for frame in frames[:-1]:
        assert frame.startswith("data: "), f"Frame is not a data line: {frame!r}"
        assert "\n" not in frame, f"Frame spans several lines: {frame!r}"
        json.loads(frame[len("data: "):])


def assembled_content(body):
    """Concatenate the delta contents of a chat SSE stream."""
    text = ""
    for frame in sse_frames(body):
        if frame == DONE_FRAME:
            continue
        payload = json.loads(frame[len("data: "):])
        for choice in payload.get("choices", []):
            text += choice.get("delta", {}).get("content") or ""
    return text

"""
Constants and system prompts for the AI Relay Bridge application.
"""

MODERATION_SYSTEM_PROMPT = """You are the safety filter and prompt writer for an image generator.
Check the user's image request against this policy. A request is UNSAFE if it asks for:
• Nudity or partial nudity
• Anyone who is or appears to be a minor in a sexual, suggestive or harmful context
• Gore, mutilation or graphic injury
• Hate symbols, slurs or content attacking a protected group
• Violence against real people or glorified violence
• Self-harm or suicide
• Explicit sexual content
• Fetish content

Reply with ONE JSON object and nothing else:
{"status": "safe" | "unsafe", "optimized_prompt": "<string>", "response": "<string>"}

If SAFE: "optimized_prompt" is the request rewritten as a detailed image generation prompt (subject, style, lighting, composition). "response" is "".
If UNSAFE: "optimized_prompt" is "". "response" is one short, friendly, informal sentence telling the user you can't make that image. Do NOT repeat or quote the request."""

DEFAULT_REFUSAL_MESSAGE = "Sorry, I can't create that image. Try asking for something else!"


class SSE:
    """Server-sent event framing shared by real and synthesized chat streams."""
    DATA_PREFIX = "data: "
    EVENT_END = "\n\n"
    DONE = "[DONE]"
    HEADERS = {
        "Cache-Control": "no-cache",
        "Connection": "keep-alive",
        "X-Accel-Buffering": "no"
    }


class MediaType:
    EVENT_STREAM = "text/event-stream"
    AUDIO_MPEG = "audio/mpeg"

"""
Conversation translation between the client's OpenAI-style turns and provider schemas.
"""
import re
from typing import Any, Optional

from pydantic import BaseModel

from errors import InvalidRequestError
from models.relay_models import GeminiConversation, NormalizedChatRequest
from utils.logger import app_logger

VALID_ROLES = ("system", "user", "assistant")
GEMINI_ROLES = {"user": "user", "assistant": "model"}
SYSTEM_SEPARATOR = "\n\n"
DATA_URL_PATTERN = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.+)$", re.DOTALL)


def _as_dict(turn: Any) -> Optional[dict]:
    if isinstance(turn, BaseModel):
        return turn.model_dump(exclude_none=True)
    if isinstance(turn, dict):
        return turn
    return None


def _image_url(part: dict) -> Optional[str]:
    image_url = part.get("image_url")
    if isinstance(image_url, dict):
        return image_url.get("url")
    if isinstance(image_url, str):
        return image_url
    return None


def split_parts(content: Any) -> list:
    """
    Convert turn content into Gemini parts.

    Plain strings become one text part. OpenAI-style part lists keep their
    text parts and turn base64 data-URL images into inlineData parts.
    Blank text and non-inline images are dropped.
    """
    if isinstance(content, str):
        return [{"text": content}] if content.strip() else []
    if not isinstance(content, list):
        return []

    parts = []
    for part in content:
        if not isinstance(part, dict):
            continue
        part_type = part.get("type")
        if part_type == "text":
            text = part.get("text")
            if isinstance(text, str) and text.strip():
                parts.append({"text": text})
        elif part_type == "image_url":
            url = _image_url(part) or ""
            match = DATA_URL_PATTERN.match(url)
            if match:
                parts.append({"inlineData": {"mimeType": match.group("mime"), "data": match.group("data")}})
            else:
                app_logger.debug("Dropping image part without inline data")
    return parts


def text_of(content: Any) -> str:
    """Text carried by turn content, with list parts joined by newlines."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "\n".join(
            part["text"] for part in content
            if isinstance(part, dict) and part.get("type") == "text" and isinstance(part.get("text"), str)
        )
    return ""


def filter_turns(turns: Any) -> list[dict]:
    """
    Drop turns with an unknown role or no usable content.
    Returns an empty list for anything that is not a list.
    """
    if not isinstance(turns, list):
        return []

    kept = []
    for turn in turns:
        data = _as_dict(turn)
        if data is None or data.get("role") not in VALID_ROLES:
            continue
        content = data.get("content")
        if data["role"] == "system":
            if not text_of(content).strip():
                continue
        elif not split_parts(content):
            continue
        kept.append(data)
    return kept


def has_conversation(turns: list[dict]) -> bool:
    """True when at least one non-system turn is present."""
    return any(turn["role"] != "system" for turn in turns)


def translate(turns: Any) -> GeminiConversation:
    """
    Translate turns into Gemini's systemInstruction + contents schema.

    System turns are merged in order into one instruction block. Assistant
    turns take Gemini's "model" role. The result may hold no contents; the
    caller decides how to reject that.
    """
    system_texts = []
    contents = []

    for turn in filter_turns(turns):
        role = turn["role"]
        if role == "system":
            system_texts.append(text_of(turn.get("content")))
            continue
        contents.append({"role": GEMINI_ROLES[role], "parts": split_parts(turn.get("content"))})

    return GeminiConversation(
        system_instruction=SYSTEM_SEPARATOR.join(system_texts) or None,
        contents=contents,
    )


def normalize_chat_request(messages: Any, model: Optional[str], default_model: str) -> NormalizedChatRequest:
    """Validate a chat payload into filtered turns and a resolved model."""
    turns = filter_turns(messages)
    if not has_conversation(turns):
        raise InvalidRequestError("No valid messages provided in the request body.")
    return NormalizedChatRequest(turns=turns, model=model or default_model)

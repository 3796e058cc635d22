import pytest

from errors import InvalidRequestError
from models.api_models import Message
from utils.message_translator import (
    filter_turns,
    has_conversation,
    normalize_chat_request,
    split_parts,
    translate,
)


def test_translate_merges_consecutive_system_turns_in_order():
    """Given several system turns, translate should merge them into one instruction block in original order."""
    turns = [
        {"role": "system", "content": "You are Graxy."},
        {"role": "system", "content": "Answer briefly.\nUse emoji."},
        {"role": "user", "content": "Hi"},
    ]

    conversation = translate(turns)

    assert conversation.system_instruction == "You are Graxy.\n\nAnswer briefly.\nUse emoji."
    assert conversation.contents == [{"role": "user", "parts": [{"text": "Hi"}]}]


def test_translate_maps_assistant_to_model_role_and_keeps_order():
    """Given a multi-turn history, assistant turns should map to Gemini's model role in chronological order."""
    turns = [
        {"role": "user", "content": "Hello"},
        {"role": "assistant", "content": "Hi! How can I help?"},
        {"role": "user", "content": "Tell me a joke"},
    ]

    conversation = translate(turns)

    assert [c["role"] for c in conversation.contents] == ["user", "model", "user"]
    assert conversation.contents[1]["parts"] == [{"text": "Hi! How can I help?"}]
    assert conversation.system_instruction is None


@pytest.mark.parametrize("turns", [
    [{"role": "system", "content": "Only instructions"}],
    [{"role": "system", "content": "a"}, {"role": "system", "content": "b"}],
])
def test_translate_system_only_turns_produce_no_contents(turns):
    """Given only system turns, translate should produce zero output turns."""
    conversation = translate(turns)
    assert conversation.contents == []


@pytest.mark.parametrize("payload", [None, "hello", 42, {"role": "user", "content": "hi"}])
def test_translate_non_list_payload_returns_empty_result(payload):
    """Given a payload that is not a list, translate should return an empty result without raising."""
    conversation = translate(payload)
    assert conversation.contents == []
    assert conversation.system_instruction is None


def test_filter_turns_drops_empty_and_unknown_turns():
    """Empty-content turns and unrecognized roles should be dropped silently."""
    turns = [
        {"role": "user", "content": ""},
        {"role": "user", "content": "   "},
        {"role": "tool", "content": "result"},
        {"role": "assistant"},
        "not a turn",
        {"role": "user", "content": "kept"},
    ]

    assert filter_turns(turns) == [{"role": "user", "content": "kept"}]


def test_filter_turns_accepts_pydantic_messages_and_keeps_extra_fields():
    """Client messages parsed by pydantic should keep unknown fields for pass-through."""
    messages = [Message(role="user", content="Hi", name="sam")]
    assert filter_turns(messages) == [{"role": "user", "content": "Hi", "name": "sam"}]


def test_split_parts_separates_text_and_inline_images():
    """OpenAI-style content lists should split into text parts and inlineData parts."""
    content = [
        {"type": "text", "text": "What is in this picture?"},
        {"type": "image_url", "image_url": {"url": "data:image/jpeg;base64,/9j/4AAQSkZJRg=="}},
        {"type": "image_url", "image_url": {"url": "https://example.com/cat.png"}},
    ]

    assert split_parts(content) == [
        {"text": "What is in this picture?"},
        {"inlineData": {"mimeType": "image/jpeg", "data": "/9j/4AAQSkZJRg=="}},
    ]


def test_translate_system_turn_with_part_list_uses_text_only():
    """System turns given as part lists should contribute their text to the instruction."""
    turns = [
        {"role": "system", "content": [{"type": "text", "text": "Be kind."}]},
        {"role": "user", "content": "Hi"},
    ]
    assert translate(turns).system_instruction == "Be kind."


def test_has_conversation_requires_a_non_system_turn():
    assert has_conversation([{"role": "system", "content": "x"}]) is False
    assert has_conversation([{"role": "system", "content": "x"}, {"role": "user", "content": "y"}]) is True


def test_normalize_chat_request_rejects_when_nothing_remains():
    """Given only system turns, normalize_chat_request should raise a 400 validation error."""
    with pytest.raises(InvalidRequestError) as excinfo:
        normalize_chat_request([{"role": "system", "content": "x"}], None, "gpt-4.1-mini")
    assert excinfo.value.status_code == 400
    assert "No valid messages" in excinfo.value.error


def test_normalize_chat_request_resolves_default_model():
    request = normalize_chat_request([{"role": "user", "content": "Hi"}], None, "gpt-4.1-mini")
    assert request.model == "gpt-4.1-mini"
    assert normalize_chat_request([{"role": "user", "content": "Hi"}], "gpt-4o", "gpt-4.1-mini").model == "gpt-4o"

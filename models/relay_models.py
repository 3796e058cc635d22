"""
Data models for request processing.
Contains translated conversations, moderation verdicts, provider results and relay stages.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class RelayStage(Enum):
    """Lifecycle of one relayed request."""
    RECEIVED = "received"
    MODERATING = "moderating"
    DISPATCHED = "dispatched"
    STREAMING = "streaming"
    BUFFERING = "buffering"
    COMPLETE = "complete"
    FAILED = "failed"


class ModerationStatus(str, Enum):
    SAFE = "safe"
    UNSAFE = "unsafe"


@dataclass(frozen=True)
class ModerationVerdict:
    """
    Outcome of the safety pre-filter for one image prompt.
    optimized_prompt is set only for safe verdicts, user_message only for unsafe ones.
    """
    status: ModerationStatus
    optimized_prompt: Optional[str] = None
    user_message: Optional[str] = None

    @property
    def is_safe(self) -> bool:
        return self.status is ModerationStatus.SAFE


@dataclass
class NormalizedChatRequest:
    """Validated chat request: filtered turns plus the resolved model."""
    turns: list
    model: str


@dataclass
class GeminiConversation:
    """Conversation in Gemini's native schema."""
    system_instruction: Optional[str] = None
    contents: list = field(default_factory=list)

    def to_payload(self) -> dict:
        payload: dict = {"contents": self.contents}
        if self.system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": self.system_instruction}]}
        return payload


@dataclass
class GeneratedImage:
    """First inline image found in a generation response."""
    data: str
    mime_type: str
    text: Optional[str] = None

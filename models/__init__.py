"""
Models package exports.
"""
from models.api_models import Message, ChatRequest, TTSRequest, ReferenceImage, ImageRequest, ImageResponse
from models.relay_models import (
    RelayStage,
    ModerationStatus,
    ModerationVerdict,
    NormalizedChatRequest,
    GeminiConversation,
    GeneratedImage,
)

__all__ = [
    'Message',
    'ChatRequest',
    'TTSRequest',
    'ReferenceImage',
    'ImageRequest',
    'ImageResponse',
    'RelayStage',
    'ModerationStatus',
    'ModerationVerdict',
    'NormalizedChatRequest',
    'GeminiConversation',
    'GeneratedImage',
]

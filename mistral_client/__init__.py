"""Mistral Python client: typed sync/async access with SSE streaming."""

import logging

__version__ = "0.1.0"

from .client import MistralClient, AsyncMistralClient
from .config import Settings
from .models import (
    Message, Model, Role, Usage,
    ChatCompletionResponse, StreamedChatCompletionResponse,
    SimpleChatResponse, SimpleStreamChunk,
    FIMCompletionResponse, StreamedFIMCompletionResponse,
    EmbeddingResponse, ModelInfo, ModerationResponse,
    TranscriptionFormat, TranscriptionResponse,
    ConversationRequest, ConversationResponse,
    FileObject, FilePurpose, OCRDocument, OCRResponse,
    Agent, AgentList, ClassificationResponse,
)
from .exceptions import (
    MistralError, APIError, AuthenticationError, NotFoundError,
    ValidationError, RateLimitError, StreamDecodeError,
)
from ._streaming import iter_sse_events, aiter_sse_events

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "MistralClient",
    "AsyncMistralClient",
    "Settings",
    "Message",
    "Model",
    "Role",
    "Usage",
    "ChatCompletionResponse",
    "StreamedChatCompletionResponse",
    "SimpleChatResponse",
    "SimpleStreamChunk",
    "FIMCompletionResponse",
    "StreamedFIMCompletionResponse",
    "EmbeddingResponse",
    "ModelInfo",
    "ModerationResponse",
    "TranscriptionFormat",
    "TranscriptionResponse",
    "ConversationRequest",
    "ConversationResponse",
    "FileObject",
    "FilePurpose",
    "OCRDocument",
    "OCRResponse",
    "Agent",
    "AgentList",
    "ClassificationResponse",
    "MistralError",
    "APIError",
    "AuthenticationError",
    "NotFoundError",
    "ValidationError",
    "RateLimitError",
    "StreamDecodeError",
    "iter_sse_events",
    "aiter_sse_events",
]

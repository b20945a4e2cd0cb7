"""Type definitions for the proxy."""

from .chat import (
    ChatMessage,
    ChatReply,
    ChatRequest,
    ErrorReply,
    GeminiCandidate,
    GeminiContent,
    GeminiPart,
    GeminiResponse,
    OpenAIResponse,
)
from .results import (
    CONTENT_BLOCKED_MESSAGE,
    GENERIC_UPSTREAM_ERROR,
    TRANSPORT_ERROR_MESSAGE,
    ChatResult,
    ContentBlocked,
    Reply,
    TransportFailure,
    UpstreamRejection,
    is_success,
    to_error_payload,
    to_reply_payload,
)

__all__ = [
    "CONTENT_BLOCKED_MESSAGE",
    "GENERIC_UPSTREAM_ERROR",
    "TRANSPORT_ERROR_MESSAGE",
    "ChatMessage",
    "ChatReply",
    "ChatRequest",
    "ChatResult",
    "ContentBlocked",
    "ErrorReply",
    "GeminiCandidate",
    "GeminiContent",
    "GeminiPart",
    "GeminiResponse",
    "OpenAIResponse",
    "Reply",
    "TransportFailure",
    "UpstreamRejection",
    "is_success",
    "to_error_payload",
    "to_reply_payload",
]

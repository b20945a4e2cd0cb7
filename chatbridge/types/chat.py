"""Types for chat representation on both sides of the proxy.

This module defines the wire shapes the proxy reads and writes. Types are
separated into:
- Canonical types: What the browser client sends and receives
- Gemini types: Google generateContent requests and responses
- OpenAI types: Chat Completions requests and responses
"""

from typing import Any
from typing_extensions import TypedDict


# =============================================================================
# Canonical Types
# =============================================================================
# These types are what the browser client speaks, independent of which
# upstream provider ends up answering.


class ChatMessage(TypedDict):
    """A message in a chat conversation (canonical format).

    Attributes:
        role: Role of the message sender:
            - "system": System instruction, folded into the first user turn
            - "user": User message
            - "assistant": Model response
        content: Text content of the message.
    """
    role: str
    content: str


class ChatRequest(TypedDict):
    """Body of ``POST /api/chat``."""
    messages: list[ChatMessage]


class ReplyMessage(TypedDict):
    content: str


class ReplyChoice(TypedDict):
    message: ReplyMessage


class ChatReply(TypedDict):
    """Successful body returned to the browser.

    Shaped like a chat completion so existing frontends can read
    ``choices[0].message.content`` without changes.
    """
    choices: list[ReplyChoice]


class ErrorDetail(TypedDict):
    message: str


class ErrorReply(TypedDict):
    """Failure body returned to the browser."""
    error: ErrorDetail


# =============================================================================
# Gemini Types
# =============================================================================


class GeminiPart(TypedDict, total=False):
    """A part of a Gemini content entry.

    Only text parts are produced by the proxy; responses may carry other
    part types which are ignored.
    """
    text: str


class GeminiContent(TypedDict, total=False):
    """A single conversation turn (Gemini format).

    Attributes:
        role: "user" or "model". Gemini has no system role.
        parts: Ordered parts making up the turn.
    """
    role: str
    parts: list[GeminiPart]


class GeminiCandidate(TypedDict, total=False):
    """A candidate answer in a generateContent response.

    ``content`` is absent when the candidate was blocked by safety filters.
    """
    content: GeminiContent
    finishReason: str
    safetyRatings: list[dict[str, Any]]


class GeminiResponse(TypedDict, total=False):
    """A generateContent response body (success or error)."""
    candidates: list[GeminiCandidate]
    promptFeedback: dict[str, Any]
    error: dict[str, Any]


# =============================================================================
# OpenAI Types
# =============================================================================


class OpenAIChoice(TypedDict, total=False):
    index: int
    message: dict[str, Any]
    finish_reason: str | None


class OpenAIResponse(TypedDict, total=False):
    """A Chat Completions response body (success or error)."""
    id: str
    object: str
    model: str
    choices: list[OpenAIChoice]
    usage: dict[str, Any]
    error: dict[str, Any]

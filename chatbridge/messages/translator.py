"""Canonical chat <-> provider translation.

This module translates between the flat, role-tagged message list the browser
client sends and the request/response shapes of the upstream providers.

Key mappings (Gemini):
- First ``system`` message -> prefix of the first ``user`` turn, blank line separated
- ``user`` -> ``user``, every other role -> ``model``
- ``{role, content}`` -> ``{role, parts: [{text}]}``
- ``candidates[0].content.parts[0].text`` -> reply text

The OpenAI shape already matches the canonical one, so requests pass through
and only the reply text is extracted.

Reference:
- Gemini generateContent: https://ai.google.dev/api/generate-content
- OpenAI Chat Completions: https://platform.openai.com/docs/api-reference/chat
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional

from ..types.chat import ChatMessage, GeminiContent
from ..types.results import (
    GENERIC_UPSTREAM_ERROR,
    ChatResult,
    ContentBlocked,
    Reply,
    UpstreamRejection,
)

logger = logging.getLogger("chatbridge")

SYSTEM_SEPARATOR = "\n\n"


def _system_prefix(messages: Iterable[Mapping[str, Any]]) -> str:
    for message in messages:
        if message.get("role") == "system":
            return f"{message.get('content', '')}{SYSTEM_SEPARATOR}"
    return ""


def to_provider_request(messages: Iterable[Mapping[str, Any]]) -> list[GeminiContent]:
    """Translate canonical messages into Gemini ``contents``.

    Gemini has no system role, so the first system message is folded into the
    text of the first turn when that turn comes from the user. Every system
    message is removed from the output, including ones after the first, and
    the prefix is discarded when the conversation opens with a non-user turn.

    Args:
        messages: Ordered canonical messages (``role``/``content`` mappings).

    Returns:
        The ``contents`` list for a generateContent request body.
    """
    messages = list(messages)
    prefix = _system_prefix(messages)
    conversation = [m for m in messages if m.get("role") != "system"]

    contents: list[GeminiContent] = []
    for index, message in enumerate(conversation):
        is_user = message.get("role") == "user"
        text = message.get("content", "")
        if index == 0 and is_user:
            text = f"{prefix}{text}"
        contents.append({
            "role": "user" if is_user else "model",
            "parts": [{"text": text}],
        })

    dropped = len(messages) - len(conversation)
    if dropped > 1:
        logger.debug("Dropped %d extra system messages during translation", dropped - 1)
    if prefix and (not conversation or conversation[0].get("role") != "user"):
        logger.debug("System prompt discarded: conversation does not open with a user turn")
    return contents


def extract_texts(contents: Iterable[Mapping[str, Any]]) -> list[str]:
    """Return the text of every part in ``contents``, in order."""
    texts: list[str] = []
    for content in contents:
        for part in content.get("parts") or []:
            if isinstance(part, Mapping) and "text" in part:
                texts.append(part["text"])
    return texts


def build_gemini_payload(
    messages: Iterable[Mapping[str, Any]],
    generation_config: Optional[Mapping[str, Any]] = None,
) -> dict[str, Any]:
    """Build a full generateContent request body."""
    payload: dict[str, Any] = {"contents": to_provider_request(messages)}
    if generation_config:
        payload["generationConfig"] = dict(generation_config)
    return payload


def _error_message(body: Any) -> str:
    if isinstance(body, Mapping):
        error = body.get("error")
        if isinstance(error, Mapping):
            message = error.get("message")
            if isinstance(message, str) and message:
                return message
        elif isinstance(error, str) and error:
            return error
    return GENERIC_UPSTREAM_ERROR


def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


def to_canonical_response(status_code: int, body: Any) -> ChatResult:
    """Translate a generateContent response into a chat result.

    Args:
        status_code: HTTP status returned by the upstream.
        body: Decoded JSON body (``None`` if the body was empty).

    Returns:
        ``UpstreamRejection`` for non-2xx statuses, ``ContentBlocked`` when no
        candidate carries text, otherwise ``Reply``.
    """
    if not _is_success(status_code):
        return UpstreamRejection(_error_message(body), status_code)

    candidates = body.get("candidates") if isinstance(body, Mapping) else None
    if not isinstance(candidates, list) or not candidates:
        logger.warning("Upstream returned no candidates; treating as blocked content")
        return ContentBlocked()

    first = candidates[0]
    content = first.get("content") if isinstance(first, Mapping) else None
    if not isinstance(content, Mapping) or not content:
        finish_reason = first.get("finishReason") if isinstance(first, Mapping) else None
        logger.warning(
            "First candidate has no content (finishReason=%s); treating as blocked content",
            finish_reason,
        )
        return ContentBlocked()

    parts = content.get("parts")
    text = None
    if isinstance(parts, list) and parts and isinstance(parts[0], Mapping):
        text = parts[0].get("text")
    if not isinstance(text, str):
        logger.warning("First candidate has no text part; treating as blocked content")
        return ContentBlocked()

    return Reply(text)


# =============================================================================
# OpenAI
# =============================================================================


def to_openai_request(
    messages: Iterable[Mapping[str, Any]],
    model: str,
    response_format: Optional[Mapping[str, Any]] = None,
) -> dict[str, Any]:
    """Build a Chat Completions request body; messages pass through as-is."""
    payload: dict[str, Any] = {
        "model": model,
        "messages": [
            ChatMessage(role=m.get("role", ""), content=m.get("content", ""))
            for m in messages
        ],
    }
    if response_format:
        payload["response_format"] = dict(response_format)
    return payload


def openai_to_canonical_response(status_code: int, body: Any) -> ChatResult:
    """Translate a Chat Completions response into a chat result."""
    if not _is_success(status_code):
        return UpstreamRejection(_error_message(body), status_code)

    choices = body.get("choices") if isinstance(body, Mapping) else None
    if not isinstance(choices, list) or not choices:
        logger.warning("Upstream returned no choices; treating as blocked content")
        return ContentBlocked()

    first = choices[0]
    message = first.get("message") if isinstance(first, Mapping) else None
    content = message.get("content") if isinstance(message, Mapping) else None
    if not isinstance(content, str) or not content:
        finish_reason = first.get("finish_reason") if isinstance(first, Mapping) else None
        logger.warning(
            "First choice has no content (finish_reason=%s); treating as blocked content",
            finish_reason,
        )
        return ContentBlocked()

    return Reply(content)

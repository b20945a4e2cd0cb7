"""Outcome of a single proxied chat call.

Upstream outcomes are values, not exceptions, so callers cannot confuse
"the model produced nothing" with "the request failed".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .chat import ChatReply, ErrorReply

CONTENT_BLOCKED_MESSAGE = (
    "I could not generate a response. The prompt may have been blocked for safety reasons."
)
GENERIC_UPSTREAM_ERROR = "An error occurred with the upstream API."
TRANSPORT_ERROR_MESSAGE = "Failed to communicate with the upstream API."


def to_reply_payload(text: str) -> ChatReply:
    """Wrap reply text in the body the browser client reads."""
    return {"choices": [{"message": {"content": text}}]}


def to_error_payload(message: str) -> ErrorReply:
    return {"error": {"message": message}}


@dataclass(frozen=True)
class Reply:
    """The upstream produced text."""

    text: str
    status_code: int = 200

    def as_canonical(self) -> dict[str, str]:
        return {"reply": self.text}

    def to_payload(self) -> ChatReply:
        return to_reply_payload(self.text)


@dataclass(frozen=True)
class ContentBlocked:
    """The upstream succeeded but returned no usable content.

    Reported with a success status and a fixed explanatory text.
    """

    text: str = CONTENT_BLOCKED_MESSAGE
    status_code: int = 200

    def as_canonical(self) -> dict[str, str]:
        return {"reply": self.text}

    def to_payload(self) -> ChatReply:
        return to_reply_payload(self.text)


@dataclass(frozen=True)
class UpstreamRejection:
    """The upstream was reached and answered with a non-success status."""

    message: str
    status_code: int

    def to_payload(self) -> ErrorReply:
        return to_error_payload(self.message)


@dataclass(frozen=True)
class TransportFailure:
    """The upstream could not be reached.

    ``detail`` is for operator logs only and is never sent to the client.
    """

    detail: str
    status_code: int = 500

    def to_payload(self) -> ErrorReply:
        return to_error_payload(TRANSPORT_ERROR_MESSAGE)


ChatResult = Union[Reply, ContentBlocked, UpstreamRejection, TransportFailure]


def is_success(result: ChatResult) -> bool:
    return isinstance(result, (Reply, ContentBlocked))

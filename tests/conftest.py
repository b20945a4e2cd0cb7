"""Pytest configuration and fixtures for testing."""

from __future__ import annotations

import json
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Deque, Optional

import httpx
import pytest

from chatbridge.config_loader import ProxySettings

TEST_API_KEY = "test-secret-key-123"


# =============================================================================
# Fake Upstream
# =============================================================================


@dataclass
class UpstreamResponse:
    """A queued response to return from the fake upstream.

    Fields:
        status_code: HTTP status code (default 200)
        json_body: JSON response body
        body: Raw bytes/string body, used when json_body is None
        error: Exception class to raise instead of answering
            (for example ``httpx.ConnectError``)
    """

    status_code: int = 200
    json_body: Any = None
    body: bytes | str | None = None
    error: Optional[type[httpx.HTTPError]] = None


@dataclass
class FakeUpstream:
    """Records outbound requests and replays queued responses.

    Use ``transport`` wherever an ``httpx.AsyncBaseTransport`` is accepted.
    """

    responses: Deque[UpstreamResponse] = field(default_factory=deque)
    requests: list[httpx.Request] = field(default_factory=list)

    def enqueue(self, response: UpstreamResponse) -> None:
        self.responses.append(response)

    def enqueue_json(self, json_body: Any, status_code: int = 200) -> None:
        self.enqueue(UpstreamResponse(status_code=status_code, json_body=json_body))

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def last_json(self) -> Any:
        return json.loads(self.requests[-1].content)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"Unexpected upstream call to {request.url}")
        queued = self.responses.popleft()
        if queued.error is not None:
            raise queued.error("simulated failure", request=request)
        if queued.json_body is not None:
            return httpx.Response(queued.status_code, json=queued.json_body)
        return httpx.Response(queued.status_code, content=queued.body or b"")


@pytest.fixture
def fake_upstream() -> FakeUpstream:
    return FakeUpstream()


# =============================================================================
# Settings Builders
# =============================================================================


@pytest.fixture
def make_settings() -> Callable[..., ProxySettings]:
    """Build ProxySettings with a fake key; keyword arguments override fields."""

    def _build(**overrides: Any) -> ProxySettings:
        values: dict[str, Any] = {
            "provider": "gemini",
            "api_key": TEST_API_KEY,
            "api_base": "https://upstream.test/v1beta",
            "model": "gemini-pro",
        }
        values.update(overrides)
        return ProxySettings(**values)

    return _build


# =============================================================================
# Response Builders
# =============================================================================


def build_gemini_response(text: str) -> dict[str, Any]:
    return {
        "candidates": [
            {
                "content": {"role": "model", "parts": [{"text": text}]},
                "finishReason": "STOP",
            }
        ]
    }


def build_gemini_error(message: str, code: int = 400, status: str = "INVALID_ARGUMENT") -> dict[str, Any]:
    return {"error": {"code": code, "message": message, "status": status}}


def build_openai_response(text: str) -> dict[str, Any]:
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "model": "gpt-3.5-turbo",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": text},
                "finish_reason": "stop",
            }
        ],
    }

"""Upstream provider description and request helpers."""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

logger = logging.getLogger("chatbridge")

PROVIDER_GEMINI = "gemini"
PROVIDER_OPENAI = "openai"
SUPPORTED_PROVIDERS = (PROVIDER_GEMINI, PROVIDER_OPENAI)

DEFAULT_API_BASES = {
    PROVIDER_GEMINI: "https://generativelanguage.googleapis.com/v1beta",
    PROVIDER_OPENAI: "https://api.openai.com/v1",
}
DEFAULT_MODELS = {
    PROVIDER_GEMINI: "gemini-pro",
    PROVIDER_OPENAI: "gpt-3.5-turbo",
}

REDACTED = "***"


@dataclass(frozen=True)
class Backend:
    """The single upstream the proxy talks to."""

    provider: str
    base_url: str
    api_key: str
    model: str
    timeout: Optional[float] = None

    def build_url(self) -> str:
        """Build the full URL for an upstream request.

        Gemini takes the key as a ``key`` query parameter; OpenAI takes it
        as a header, see ``build_outbound_headers``.
        """
        base = self.base_url.rstrip("/")
        if self.provider == PROVIDER_OPENAI:
            return f"{base}/chat/completions"
        url = f"{base}/models/{self.model}:generateContent"
        return str(httpx.URL(url, params={"key": self.api_key}))


def build_outbound_headers(backend: Backend) -> dict[str, str]:
    """Build headers for the upstream request."""
    headers = {"Content-Type": "application/json"}
    if backend.provider == PROVIDER_OPENAI and backend.api_key:
        headers["Authorization"] = f"Bearer {backend.api_key}"
    return headers


def redact_secret(text: str, secret: Optional[str]) -> str:
    """Replace every occurrence of ``secret`` in ``text``."""
    if not secret:
        return text
    return text.replace(secret, REDACTED)


def format_httpx_error(exc: Any, backend: Backend, url: Optional[str] = None) -> str:
    """Produce an operator-facing description of an httpx error.

    The API key travels in the Gemini URL, so the result is always redacted.
    """
    parts = [exc.__class__.__name__]
    message = str(exc).strip()
    if message:
        parts.append(message)

    try:
        request = exc.request
    except (AttributeError, RuntimeError):
        request = None
    if request is not None:
        parts.append(f"request={request.method} {request.url}")
    elif url:
        parts.append(f"url={url}")

    if isinstance(exc, httpx.TimeoutException):
        parts.append(f"timeout={backend.timeout}s")

    return redact_secret("; ".join(parts), backend.api_key)

"""Core module initialization."""

from .backend import (
    DEFAULT_API_BASES,
    DEFAULT_MODELS,
    PROVIDER_GEMINI,
    PROVIDER_OPENAI,
    SUPPORTED_PROVIDERS,
    Backend,
    build_outbound_headers,
    format_httpx_error,
    redact_secret,
)
from .exceptions import ConfigurationError, InvalidRequestError, ProxyError
from .forwarder import ChatForwarder

__all__ = [
    "Backend",
    "ChatForwarder",
    "ConfigurationError",
    "DEFAULT_API_BASES",
    "DEFAULT_MODELS",
    "InvalidRequestError",
    "PROVIDER_GEMINI",
    "PROVIDER_OPENAI",
    "ProxyError",
    "SUPPORTED_PROVIDERS",
    "build_outbound_headers",
    "format_httpx_error",
    "redact_secret",
]

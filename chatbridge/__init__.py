"""chatbridge - a keyholding chat proxy

A small proxy that lets a browser talk to a hosted language model without
ever seeing the API key.

This module provides:
- create_app: FastAPI application exposing POST /api/chat and POST /api/forecast
- ChatForwarder: one translated upstream call per request
- Message translation between the canonical message list and Gemini/OpenAI
- Settings loaded from YAML, .env files and environment variables

Example:
    >>> from chatbridge import create_app, load_settings
    >>> import uvicorn
    >>> settings = load_settings()
    >>> uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
"""

from .main import create_app
from .config_loader import ProxySettings, build_settings, load_config, load_settings
from .core import ChatForwarder, ConfigurationError, InvalidRequestError, ProxyError
from .logging import logger, setup_logging
from .messages import to_canonical_response, to_provider_request

__all__ = [
    "ChatForwarder",
    "ConfigurationError",
    "InvalidRequestError",
    "ProxyError",
    "ProxySettings",
    "build_settings",
    "create_app",
    "load_config",
    "load_settings",
    "logger",
    "setup_logging",
    "to_canonical_response",
    "to_provider_request",
]

"""API routes for the proxy."""

from .chat import chat, parse_chat_messages
from .forecast import forecast
from .health import health

__all__ = [
    "chat",
    "forecast",
    "health",
    "parse_chat_messages",
]

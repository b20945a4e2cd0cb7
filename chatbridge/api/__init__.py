"""API module for the proxy."""

from .routes import chat, forecast, health, parse_chat_messages

__all__ = [
    "chat",
    "forecast",
    "health",
    "parse_chat_messages",
]

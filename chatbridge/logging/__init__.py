"""Logging module for the proxy."""

from .setup import SecretRedactingFilter, logger, setup_logging

__all__ = [
    "SecretRedactingFilter",
    "logger",
    "setup_logging",
]

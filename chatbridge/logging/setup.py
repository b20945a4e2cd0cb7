"""Logging configuration for the proxy."""

import logging
import sys
from typing import Iterable, Optional

LOGGER_NAME = "chatbridge"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
REDACTED = "***"


class SecretRedactingFilter(logging.Filter):
    """Mask configured secrets in log records before they are emitted."""

    def __init__(self, secrets: Iterable[Optional[str]] = ()) -> None:
        super().__init__()
        self.secrets = [s for s in secrets if s]

    def filter(self, record: logging.LogRecord) -> bool:
        if not self.secrets:
            return True
        message = record.getMessage()
        redacted = message
        for secret in self.secrets:
            redacted = redacted.replace(secret, REDACTED)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def setup_logging(
    level: str = "INFO", secrets: Iterable[Optional[str]] = ()
) -> logging.Logger:
    """Set up logging with proper handlers and formatters.

    Args:
        level: Log level name for the proxy logger.
        secrets: Values (such as the API key) that must never be logged.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Clear any existing handlers
    logger.handlers.clear()
    for existing in list(logger.filters):
        if isinstance(existing, SecretRedactingFilter):
            logger.removeFilter(existing)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    logger.addHandler(console_handler)

    logger.addFilter(SecretRedactingFilter(secrets))

    # Propagate to the root logger so uvicorn and pytest capture records too
    logger.propagate = True

    return logger


# Global logger instance
logger = setup_logging()

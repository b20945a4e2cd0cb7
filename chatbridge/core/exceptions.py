"""Core exceptions for the proxy."""


class ProxyError(Exception):
    """Base exception for proxy errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(ProxyError):
    """Raised when a required setting (such as the API key) is missing."""
    pass


class InvalidRequestError(ProxyError):
    """Raised when an incoming request body is invalid."""

    def __init__(self, message: str, code: str = "invalid_request") -> None:
        super().__init__(message)
        self.code = code

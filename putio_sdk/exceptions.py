"""
Custom exceptions for the put.io SDK.

Two kinds of failure reach callers: transport failures (``NetworkError``)
and bodies that cannot be decoded into the expected shape (``DecodeError``).
API-level status fields inside a decoded body are never turned into
exceptions.
"""

from typing import Optional


class PutioError(Exception):
    """Base exception for all put.io SDK errors."""

    def __init__(self, message: str, error_code: str = None, details: dict = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self):
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class NetworkError(PutioError):
    """Raised when the HTTP call itself fails (DNS, connect, read)."""

    def __init__(self, message: str = "Network operation failed", error_code: str = "NETWORK_ERROR", **kwargs):
        super().__init__(message, error_code=error_code, **kwargs)


class RequestTimeoutError(NetworkError):
    """Raised when a request exceeds the configured timeout."""

    def __init__(self, message: str = "Request timed out", timeout_seconds: Optional[float] = None, **kwargs):
        super().__init__(message, error_code="TIMEOUT_ERROR", **kwargs)
        self.timeout_seconds = timeout_seconds


class DecodeError(PutioError):
    """
    Raised when a response body is not JSON or does not match the expected shape.

    The undecoded body is kept on ``raw_body`` so callers can inspect
    API error payloads.
    """

    def __init__(
        self,
        message: str = "Could not decode response",
        raw_body: str = "",
        status_code: Optional[int] = None,
        **kwargs
    ):
        super().__init__(message, error_code="DECODE_ERROR", **kwargs)
        self.raw_body = raw_body
        self.status_code = status_code


class AuthenticationError(PutioError):
    """Raised when the OAuth code exchange yields no access token."""

    def __init__(self, message: str = "Authentication failed", **kwargs):
        super().__init__(message, error_code="AUTH_ERROR", **kwargs)


class ConfigurationError(PutioError):
    """Raised when client configuration is invalid."""

    def __init__(self, message: str = "Invalid configuration", config_key: str = None, **kwargs):
        super().__init__(message, error_code="CONFIG_ERROR", **kwargs)
        self.config_key = config_key

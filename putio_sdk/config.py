"""
Client configuration for the put.io SDK.

The access token is part of an explicit ``ClientConfig`` value handed to each
client; nothing is kept in module-level state.
"""

import os
from dataclasses import dataclass, replace
from typing import Optional

from . import __version__
from .exceptions import ConfigurationError

DEFAULT_BASE_URL = "https://api.put.io/v2"
DEFAULT_TIMEOUT = 30.0

ENV_TOKEN = "PUTIO_OAUTH_TOKEN"
ENV_BASE_URL = "PUTIO_BASE_URL"
ENV_TIMEOUT = "PUTIO_TIMEOUT"


def env_base_url() -> str:
    """API root from ``PUTIO_BASE_URL``, or the public endpoint."""
    return (os.getenv(ENV_BASE_URL) or DEFAULT_BASE_URL).rstrip("/")


def env_timeout() -> float:
    """Per-request timeout from ``PUTIO_TIMEOUT``, or the default."""
    timeout = os.getenv(ENV_TIMEOUT)
    try:
        value = float(timeout) if timeout else DEFAULT_TIMEOUT
    except ValueError:
        raise ConfigurationError(f"{ENV_TIMEOUT} must be a number, got {timeout!r}", config_key="timeout")
    if value <= 0:
        raise ConfigurationError("Timeout must be a positive number of seconds", config_key="timeout")
    return value


@dataclass(frozen=True)
class ClientConfig:
    """
    Settings shared by the sync and async clients.

    Args:
        token: OAuth access token sent as ``oauth_token`` on every call
        base_url: API root, without trailing slash
        timeout: Per-request timeout in seconds
        user_agent: Value of the User-Agent header
    """

    token: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = f"putio-sdk-python/{__version__}"

    def __post_init__(self):
        if not self.token:
            raise ConfigurationError(
                f"An access token is required. Provide it as parameter or {ENV_TOKEN} env var.",
                config_key="token",
            )
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError("Timeout must be a positive number of seconds", config_key="timeout")
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def from_env(cls, token: Optional[str] = None) -> "ClientConfig":
        """Build a config from ``PUTIO_*`` environment variables; an explicit token wins."""
        return cls(
            token=token or os.getenv(ENV_TOKEN, ""),
            base_url=env_base_url(),
            timeout=env_timeout(),
        )

    def with_token(self, token: str) -> "ClientConfig":
        return replace(self, token=token)

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

"""
putio-sdk - Python client for the put.io v2 API.

This package provides:
- A synchronous client (requests) and an asynchronous client (aiohttp)
- File management: list, search, create folders, rename, move, delete
- MP4 transcoding requests and download URL resolution
- Transfers, account information and friends
- OAuth authorization-code exchange
- The ``putio`` command line tool
"""

__version__ = "1.0.0"

from .client import PutioClient
from .async_client import AsyncPutioClient
from .config import ClientConfig
from .auth import AuthManager, build_authorization_url, exchange_code
from .models import (
    File,
    FileList,
    SearchResult,
    MP4,
    Transfer,
    TransferList,
    Disk,
    UserInfo,
    Settings,
    Friend,
    FriendList,
    ApiStatus,
)
from .exceptions import (
    PutioError,
    NetworkError,
    RequestTimeoutError,
    DecodeError,
    AuthenticationError,
    ConfigurationError,
)

__all__ = [
    # Main clients
    "PutioClient",
    "AsyncPutioClient",
    "ClientConfig",

    # Authentication
    "AuthManager",
    "build_authorization_url",
    "exchange_code",

    # Data models
    "File",
    "FileList",
    "SearchResult",
    "MP4",
    "Transfer",
    "TransferList",
    "Disk",
    "UserInfo",
    "Settings",
    "Friend",
    "FriendList",
    "ApiStatus",

    # Exceptions
    "PutioError",
    "NetworkError",
    "RequestTimeoutError",
    "DecodeError",
    "AuthenticationError",
    "ConfigurationError",
]

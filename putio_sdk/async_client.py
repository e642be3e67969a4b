"""
Asynchronous put.io client implementation.

Mirrors :class:`putio_sdk.client.PutioClient` endpoint for endpoint on top of
aiohttp, with the same wire format and error taxonomy.
"""

import asyncio
import logging
from typing import Any, Dict, Mapping, NamedTuple, Optional
from urllib.parse import urljoin

import aiohttp

from .auth import AuthManager
from .client import (
    IdList,
    Parser,
    T,
    decode_payload,
    file_path,
    friend_path,
    parse_file_envelope,
    parse_info_envelope,
    parse_mp4_envelope,
    parse_settings_envelope,
    parse_transfer_envelope,
    search_path,
    transfer_path,
)
from .config import ClientConfig
from .exceptions import DecodeError, NetworkError, RequestTimeoutError
from .models import MP4, ApiStatus, File, FileList, FriendList, SearchResult, Settings, Transfer, TransferList, UserInfo
from .utils import encode_params, join_ids

logger = logging.getLogger(__name__)

REDIRECT_STATUSES = (301, 302, 303, 307, 308)


class _Reply(NamedTuple):
    status: int
    headers: Mapping[str, str]  # case-insensitive CIMultiDictProxy from aiohttp
    body: str
    url: str


class AsyncPutioClient:
    """
    Asynchronous client for the put.io v2 API.

    The aiohttp session is created on first use and closed by ``close()``
    or when leaving ``async with``.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        config: Optional[ClientConfig] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """
        Initialize the async client.

        Args:
            token: OAuth access token (can also use PUTIO_OAUTH_TOKEN env var)
            config: Full client configuration; ``token`` overrides its token
            session: Session to send requests with (one is created lazily if omitted)
        """
        if config is None:
            config = ClientConfig.from_env(token)
        elif token:
            config = config.with_token(token)

        self.config = config
        self.auth = AuthManager(config.token)
        self.timeout = aiohttp.ClientTimeout(total=config.timeout)
        self._session = session

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"User-Agent": self.config.user_agent},
                timeout=self.timeout,
            )
        return self._session

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        allow_redirects: bool = True,
    ) -> _Reply:
        """
        Make an authenticated request and read the reply while the connection is open.

        When redirects are not followed, the body of a redirect reply is not read.
        """
        session = await self._get_session()
        url = self.config.url(path)
        signed = self.auth.sign_params(encode_params(params))
        form = encode_params(data) if data is not None else None

        logger.debug("%s %s", method, path)
        try:
            async with session.request(
                method,
                url,
                params=signed,
                data=form,
                allow_redirects=allow_redirects,
            ) as response:
                if not allow_redirects and response.status in REDIRECT_STATUSES:
                    body = ""
                else:
                    body = await response.text()
                return _Reply(response.status, response.headers, body, str(response.url))
        except asyncio.TimeoutError as e:
            raise RequestTimeoutError(f"Request timeout: {e}", timeout_seconds=self.config.timeout)
        except aiohttp.ClientConnectionError as e:
            raise NetworkError(f"Connection error: {e}")
        except aiohttp.ClientError as e:
            raise NetworkError(f"Request failed: {e}")

    async def _get(self, path: str, parser: Parser, params: Optional[Dict[str, Any]] = None) -> T:
        reply = await self._request("GET", path, params=params)
        return decode_payload(reply.body, parser, reply.status)

    async def _post(self, path: str, parser: Parser, data: Optional[Dict[str, Any]] = None) -> T:
        reply = await self._request("POST", path, data=data or {})
        return decode_payload(reply.body, parser, reply.status)

    async def _resolve_redirect(self, path: str, params: Optional[Dict[str, Any]] = None) -> str:
        reply = await self._request("GET", path, params=params, allow_redirects=False)
        location = reply.headers.get("Location")
        if reply.status not in REDIRECT_STATUSES or not location:
            raise DecodeError(
                f"Expected a redirect from {path}, got status {reply.status}",
                raw_body=reply.body,
                status_code=reply.status,
            )
        return urljoin(reply.url, location)

    async def list_files(self, parent_id: Optional[int] = None) -> FileList:
        """List the contents of a folder (the root when ``parent_id`` is omitted)."""
        return await self._get("/files/list", FileList.from_dict, params={"parent_id": parent_id})

    async def search_files(self, query: str, page: int = 1) -> SearchResult:
        """Search files by name; one upstream page per call."""
        return await self._get(search_path(query, page), SearchResult.from_dict)

    async def create_folder(self, name: str, parent_id: int = 0) -> File:
        """Create a folder under ``parent_id`` and return it."""
        return await self._post(
            "/files/create-folder",
            parse_file_envelope,
            data={"name": name, "parent_id": parent_id},
        )

    async def get_file(self, file_id: int) -> File:
        """Get information about a file."""
        return await self._get(file_path(file_id), parse_file_envelope)

    async def delete_file(self, file_id: IdList) -> ApiStatus:
        """Delete one file, or several when given an iterable of ids."""
        return await self._post("/files/delete", ApiStatus.from_dict, data={"file_ids": join_ids(file_id)})

    async def rename_file(self, file_id: int, name: str) -> ApiStatus:
        """Rename a file in place."""
        return await self._post("/files/rename", ApiStatus.from_dict, data={"file_id": file_id, "name": name})

    async def move_file(self, file_id: IdList, parent_id: int) -> ApiStatus:
        """Move one or several files into ``parent_id``."""
        return await self._post(
            "/files/move",
            ApiStatus.from_dict,
            data={"file_ids": join_ids(file_id), "parent_id": parent_id},
        )

    async def convert_to_mp4(self, file_id: int) -> ApiStatus:
        """Ask the server to start transcoding a file to MP4."""
        return await self._post(file_path(file_id, "/mp4"), ApiStatus.from_dict)

    async def get_mp4(self, file_id: int) -> MP4:
        """Get the MP4 transcoding status of a file."""
        return await self._get(file_path(file_id, "/mp4"), parse_mp4_envelope)

    async def get_download_url(self, file_id: int) -> str:
        """Resolve the URL a file's download redirects to."""
        return await self._resolve_redirect(file_path(file_id, "/download"))

    async def get_zip_url(self, file_ids: IdList) -> str:
        """Resolve the URL of a zip archive of the given files."""
        return await self._resolve_redirect("/files/zip", params={"file_ids": join_ids(file_ids)})

    async def list_transfers(self) -> TransferList:
        """List the account's transfers."""
        return await self._get("/transfers/list", TransferList.from_dict)

    async def add_transfer(self, url: str, save_parent_id: int = 0, extract: bool = False) -> Transfer:
        """
        Start a server-side download.

        Args:
            url: Source URL, magnet link or torrent URL
            save_parent_id: Folder the result is saved into
            extract: Whether archives are extracted after download

        Returns:
            The created Transfer
        """
        return await self._post(
            "/transfers/add",
            parse_transfer_envelope,
            data={"url": url, "save_parent_id": save_parent_id, "extract": extract},
        )

    async def cancel_transfer(self, transfer_id: IdList) -> ApiStatus:
        """Cancel one transfer, or several when given an iterable of ids."""
        return await self._post(
            "/transfers/cancel",
            ApiStatus.from_dict,
            data={"transfer_ids": join_ids(transfer_id)},
        )

    async def get_transfer(self, transfer_id: int) -> Transfer:
        """Get a single transfer."""
        return await self._get(transfer_path(transfer_id), parse_transfer_envelope)

    async def account_info(self) -> UserInfo:
        """Get the account's identity and disk quota."""
        return await self._get("/account/info", parse_info_envelope)

    async def account_settings(self) -> Settings:
        """Get the account's preferences."""
        return await self._get("/account/settings", parse_settings_envelope)

    async def list_friends(self) -> FriendList:
        """List the account's friends."""
        return await self._get("/friends/list", FriendList.from_dict)

    async def waiting_friend_requests(self) -> FriendList:
        """List friend requests awaiting an answer."""
        return await self._get("/friends/waiting-requests", FriendList.from_dict)

    async def send_friend_request(self, username: str) -> ApiStatus:
        """Send a friend request to ``username``."""
        return await self._post(friend_path(username, "request"), ApiStatus.from_dict)

    async def deny_friend_request(self, username: str) -> ApiStatus:
        """Deny a pending friend request from ``username``."""
        return await self._post(friend_path(username, "deny"), ApiStatus.from_dict)

    async def close(self):
        """Close the client session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

"""
Synchronous put.io client implementation.

Every endpoint method builds a path, signs the parameters with the access
token, issues one GET or form POST, and decodes the JSON body into a record
from :mod:`putio_sdk.models`.
"""

import json
import logging
from typing import Any, Callable, Dict, Iterable, Optional, TypeVar, Union
from urllib.parse import quote, urljoin

import requests

from .auth import AuthManager, exchange_code
from .config import ClientConfig
from .exceptions import DecodeError, NetworkError, RequestTimeoutError
from .models import (
    MP4,
    ApiStatus,
    File,
    FileList,
    FriendList,
    SearchResult,
    Settings,
    Transfer,
    TransferList,
    UserInfo,
)
from .utils import encode_params, join_ids

logger = logging.getLogger(__name__)

T = TypeVar("T")
Parser = Callable[[Any], T]
IdList = Union[int, str, Iterable[Union[int, str]]]


def segment(value: Union[int, str]) -> str:
    """Percent-encode a value for use as a single path segment."""
    return quote(str(value), safe="")


def file_path(file_id: Union[int, str], suffix: str = "") -> str:
    return f"/files/{segment(file_id)}{suffix}"


def search_path(query: str, page: int) -> str:
    return f"/files/search/{segment(query)}/page/{segment(page)}"


def transfer_path(transfer_id: Union[int, str]) -> str:
    return f"/transfers/{segment(transfer_id)}"


def friend_path(username: str, action: str) -> str:
    return f"/friends/{segment(username)}/{action}"


def parse_file_envelope(payload: Dict[str, Any]) -> File:
    return File.from_dict(payload["file"])


def parse_transfer_envelope(payload: Dict[str, Any]) -> Transfer:
    return Transfer.from_dict(payload["transfer"])


def parse_mp4_envelope(payload: Dict[str, Any]) -> MP4:
    return MP4.from_dict(payload["mp4"])


def parse_info_envelope(payload: Dict[str, Any]) -> UserInfo:
    return UserInfo.from_dict(payload["info"])


def parse_settings_envelope(payload: Dict[str, Any]) -> Settings:
    return Settings.from_dict(payload["settings"])


def decode_payload(body: str, parser: Parser, status_code: Optional[int] = None) -> T:
    """
    Decode a JSON body with ``parser``.

    Raises:
        DecodeError: the body is not JSON or does not have the expected shape
    """
    try:
        payload = json.loads(body)
    except ValueError as e:
        logger.warning("Response body is not JSON (status %s)", status_code)
        raise DecodeError(f"Response is not valid JSON: {e}", raw_body=body, status_code=status_code)

    try:
        return parser(payload)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logger.warning("Response has unexpected shape (status %s): %r", status_code, e)
        raise DecodeError(f"Unexpected response shape: {e!r}", raw_body=body, status_code=status_code)


class PutioClient:
    """
    Synchronous client for the put.io v2 API.

    Holds an immutable configuration (token, base URL, timeout) and a
    ``requests.Session`` used for connection pooling only.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        config: Optional[ClientConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            token: OAuth access token (can also use PUTIO_OAUTH_TOKEN env var)
            config: Full client configuration; ``token`` overrides its token
            session: Session to send requests with (one is created if omitted)
        """
        if config is None:
            config = ClientConfig.from_env(token)
        elif token:
            config = config.with_token(token)

        self.config = config
        self.auth = AuthManager(config.token)
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": config.user_agent})

    @classmethod
    def from_authorization_code(
        cls,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        code: str,
        config: Optional[ClientConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> "PutioClient":
        """Exchange an OAuth authorization code and return a client holding the new token."""
        kwargs = {"session": session}
        if config is not None:
            kwargs.update(base_url=config.base_url, timeout=config.timeout)
        token = exchange_code(client_id, client_secret, redirect_uri, code, **kwargs)
        return cls(token=token, config=config, session=session)

    @property
    def endpoint(self) -> str:
        return self.config.base_url

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        **kwargs
    ) -> requests.Response:
        """Make an authenticated request; the token always travels in the query string."""
        url = self.config.url(path)
        signed = self.auth.sign_params(encode_params(params))
        form = encode_params(data) if data is not None else None

        logger.debug("%s %s", method, path)
        try:
            return self.session.request(
                method=method,
                url=url,
                params=signed,
                data=form,
                timeout=self.config.timeout,
                **kwargs
            )
        except requests.exceptions.Timeout as e:
            raise RequestTimeoutError(f"Request timeout: {e}", timeout_seconds=self.config.timeout)
        except requests.exceptions.ConnectionError as e:
            raise NetworkError(f"Connection error: {e}")
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"Request failed: {e}")

    def _get(self, path: str, parser: Parser, params: Optional[Dict[str, Any]] = None) -> T:
        response = self._request("GET", path, params=params)
        return decode_payload(response.text, parser, response.status_code)

    def _post(self, path: str, parser: Parser, data: Optional[Dict[str, Any]] = None) -> T:
        response = self._request("POST", path, data=data or {})
        return decode_payload(response.text, parser, response.status_code)

    def _resolve_redirect(self, path: str, params: Optional[Dict[str, Any]] = None) -> str:
        """Return the absolute target of a redirect without fetching what it points to."""
        response = self._request("GET", path, params=params, allow_redirects=False, stream=True)
        try:
            location = response.headers.get("Location")
            if not response.is_redirect or not location:
                raise DecodeError(
                    f"Expected a redirect from {path}, got status {response.status_code}",
                    raw_body=response.text,
                    status_code=response.status_code,
                )
            return urljoin(response.url, location)
        finally:
            response.close()

    # Files

    def list_files(self, parent_id: Optional[int] = None) -> FileList:
        """List the contents of a folder (the root when ``parent_id`` is omitted)."""
        return self._get("/files/list", FileList.from_dict, params={"parent_id": parent_id})

    def search_files(self, query: str, page: int = 1) -> SearchResult:
        """Search files by name; one upstream page per call."""
        return self._get(search_path(query, page), SearchResult.from_dict)

    def create_folder(self, name: str, parent_id: int = 0) -> File:
        return self._post(
            "/files/create-folder",
            parse_file_envelope,
            data={"name": name, "parent_id": parent_id},
        )

    def get_file(self, file_id: int) -> File:
        """Get information about a file."""
        return self._get(file_path(file_id), parse_file_envelope)

    def delete_file(self, file_id: IdList) -> ApiStatus:
        """Delete one file, or several when given an iterable of ids."""
        return self._post("/files/delete", ApiStatus.from_dict, data={"file_ids": join_ids(file_id)})

    def rename_file(self, file_id: int, name: str) -> ApiStatus:
        return self._post("/files/rename", ApiStatus.from_dict, data={"file_id": file_id, "name": name})

    def move_file(self, file_id: IdList, parent_id: int) -> ApiStatus:
        return self._post(
            "/files/move",
            ApiStatus.from_dict,
            data={"file_ids": join_ids(file_id), "parent_id": parent_id},
        )

    def convert_to_mp4(self, file_id: int) -> ApiStatus:
        """Ask the server to start transcoding a file to MP4."""
        return self._post(file_path(file_id, "/mp4"), ApiStatus.from_dict)

    def get_mp4(self, file_id: int) -> MP4:
        """Get the MP4 transcoding status of a file."""
        return self._get(file_path(file_id, "/mp4"), parse_mp4_envelope)

    def get_download_url(self, file_id: int) -> str:
        """Resolve the URL a file's download redirects to."""
        return self._resolve_redirect(file_path(file_id, "/download"))

    def get_zip_url(self, file_ids: IdList) -> str:
        """Resolve the URL of a zip archive of the given files."""
        return self._resolve_redirect("/files/zip", params={"file_ids": join_ids(file_ids)})

    # Transfers

    def list_transfers(self) -> TransferList:
        return self._get("/transfers/list", TransferList.from_dict)

    def add_transfer(self, url: str, save_parent_id: int = 0, extract: bool = False) -> Transfer:
        """
        Start a server-side download.

        Args:
            url: Source URL, magnet link or torrent URL
            save_parent_id: Folder the result is saved into
            extract: Whether archives are extracted after download

        Returns:
            The created Transfer
        """
        return self._post(
            "/transfers/add",
            parse_transfer_envelope,
            data={"url": url, "save_parent_id": save_parent_id, "extract": extract},
        )

    def cancel_transfer(self, transfer_id: IdList) -> ApiStatus:
        return self._post("/transfers/cancel", ApiStatus.from_dict, data={"transfer_ids": join_ids(transfer_id)})

    def get_transfer(self, transfer_id: int) -> Transfer:
        return self._get(transfer_path(transfer_id), parse_transfer_envelope)

    # Account

    def account_info(self) -> UserInfo:
        return self._get("/account/info", parse_info_envelope)

    def account_settings(self) -> Settings:
        return self._get("/account/settings", parse_settings_envelope)

    # Friends

    def list_friends(self) -> FriendList:
        return self._get("/friends/list", FriendList.from_dict)

    def waiting_friend_requests(self) -> FriendList:
        return self._get("/friends/waiting-requests", FriendList.from_dict)

    def send_friend_request(self, username: str) -> ApiStatus:
        return self._post(friend_path(username, "request"), ApiStatus.from_dict)

    def deny_friend_request(self, username: str) -> ApiStatus:
        return self._post(friend_path(username, "deny"), ApiStatus.from_dict)

    def close(self):
        self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

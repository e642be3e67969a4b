import json
from typing import Any, Dict, List, Optional
from urllib.parse import parse_qsl, urlsplit

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from putio_sdk import PutioClient
from putio_sdk.config import ClientConfig

TOKEN = "TESTTOKEN"
BASE_URL = "https://api.put.io/v2"

FILE_PAYLOAD = {
    "id": 42,
    "name": "ubuntu.iso",
    "parent_id": 0,
    "size": 1073741824,
    "content_type": "application/x-iso9660-image",
    "is_shared": False,
    "crc32": "a1b2c3d4",
    "opensubtitles_hash": None,
    "created_at": "2013-09-07T21:32:03",
    "first_accessed_at": None,
    "is_mp4_available": False,
    "icon": "https://put.io/images/file_types/iso.png",
    "screenshot": None,
    "file_type": "FILE",
}

FOLDER_PAYLOAD = {
    "id": 0,
    "name": "Your Files",
    "parent_id": None,
    "size": 0,
    "content_type": "application/x-directory",
    "is_shared": False,
    "created_at": "2013-01-01T00:00:00",
    "file_type": "FOLDER",
}

TRANSFER_PAYLOAD = {
    "id": 7,
    "name": "debian.torrent",
    "source": "magnet:?xt=urn:btih:abc",
    "status": "DOWNLOADING",
    "status_message": "Downloading",
    "percent_done": 45,
    "size": 2048,
    "downloaded": 921,
    "uploaded": 10,
    "down_speed": 512,
    "up_speed": 8,
    "peers_connected": 5,
    "peers_getting_from_us": 1,
    "peers_sending_to_us": 4,
    "estimated_time": 120,
    "error_message": None,
    "file_id": None,
    "save_parent_id": 0,
    "extract": False,
    "created_at": "2013-09-07T21:32:03",
    "finished_at": None,
}

INFO_PAYLOAD = {
    "username": "alice",
    "mail": "alice@example.com",
    "user_id": 1001,
    "disk": {"avail": 750, "used": 250, "size": 1000},
    "subtitle_languages": ["eng", "tur"],
    "default_subtitle_language": "eng",
}

SETTINGS_PAYLOAD = {
    "default_download_folder": 0,
    "is_invisible": False,
    "extraction_default": True,
    "routing": "Istanbul",
    "subtitle_languages": ["eng"],
}

MP4_PAYLOAD = {
    "status": "COMPLETED",
    "stream_url": "https://put.io/v2/files/42/mp4/stream",
    "download_url": "https://put.io/v2/files/42/mp4/download",
    "size": 123456,
    "percent_done": 100,
}


class FakeSession:
    """
    Stands in for requests.Session.

    Requests are prepared with requests itself so URLs and bodies are encoded
    exactly as they would be on the wire; replies are real Response objects.
    """

    def __init__(self):
        self.headers = CaseInsensitiveDict()
        self.replies: List[Any] = []
        self.sent: List[requests.PreparedRequest] = []
        self.kwargs: List[Dict[str, Any]] = []
        self.closed = False

    def reply(self, body: Any = None, status: int = 200, headers: Optional[Dict[str, str]] = None):
        if not isinstance(body, str):
            body = json.dumps(body if body is not None else {"status": "OK"})
        self.replies.append((status, body, headers or {}))
        return self

    def fail_with(self, error: Exception):
        self.replies.append(error)
        return self

    def request(self, method, url, params=None, data=None, **kwargs):
        prepared = requests.Request(method, url, params=params, data=data).prepare()
        self.sent.append(prepared)
        self.kwargs.append(kwargs)

        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply

        status, body, headers = reply
        response = requests.Response()
        response.status_code = status
        response._content = body.encode("utf-8")
        response._content_consumed = True
        response.encoding = "utf-8"
        response.headers = CaseInsensitiveDict(headers)
        response.url = prepared.url
        response.request = prepared
        return response

    def close(self):
        self.closed = True

    @property
    def last(self) -> requests.PreparedRequest:
        return self.sent[-1]


def query_of(prepared: requests.PreparedRequest):
    return parse_qsl(urlsplit(prepared.url).query, keep_blank_values=True)


def path_of(prepared: requests.PreparedRequest) -> str:
    return urlsplit(prepared.url).path


def form_of(prepared: requests.PreparedRequest):
    return parse_qsl(prepared.body or "", keep_blank_values=True)


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def client(session):
    return PutioClient(config=ClientConfig(token=TOKEN, base_url=BASE_URL), session=session)

"""
Data models for the put.io SDK.

Every record is an immutable snapshot of one API response. The JSON object a
record was built from is kept on ``raw`` so fields the SDK does not map are
still reachable.

``from_dict`` checks the JSON type of every mapped field: a value of the wrong
type raises ``TypeError`` and a missing required key raises ``KeyError``.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

from .utils import format_timestamp, parse_timestamp

FOLDER_CONTENT_TYPE = "application/x-directory"


def _raw_field() -> Any:
    return field(default_factory=dict, repr=False, compare=False)


def _check(key: str, value: Any, kind: type) -> Any:
    # JSON true/false must not pass as a number
    if (kind is int and isinstance(value, bool)) or not isinstance(value, kind):
        raise TypeError(f"{key!r} should be {kind.__name__}, got {type(value).__name__}")
    return value


def _object(value: Any, key: str) -> Dict[str, Any]:
    return _check(key, value, dict)


def _required(data: Dict[str, Any], key: str, kind: type) -> Any:
    return _check(key, data[key], kind)


def _optional(data: Dict[str, Any], key: str, kind: type, default: Any = None) -> Any:
    value = data.get(key)
    if value is None:
        return default
    return _check(key, value, kind)


def _timestamp(data: Dict[str, Any], key: str) -> Optional[datetime]:
    return parse_timestamp(_optional(data, key, str))


def _strings(data: Dict[str, Any], key: str) -> List[str]:
    return [_check(key, value, str) for value in _optional(data, key, list, [])]


def _records(data: Dict[str, Any], key: str, model) -> List[Any]:
    return [model.from_dict(item) for item in _required(data, key, list)]


@dataclass(frozen=True)
class File:
    """A file or folder stored on put.io."""

    id: int
    name: str
    parent_id: Optional[int] = None
    size: int = 0
    content_type: Optional[str] = None
    is_shared: bool = False
    crc32: Optional[str] = None
    opensubtitles_hash: Optional[str] = None
    created_at: Optional[datetime] = None
    first_accessed_at: Optional[datetime] = None
    is_mp4_available: bool = False
    icon: Optional[str] = None
    screenshot: Optional[str] = None
    file_type: Optional[str] = None
    raw: Dict[str, Any] = _raw_field()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "File":
        """Create File from API response dictionary."""
        data = _object(data, "file")
        return cls(
            id=_required(data, "id", int),
            name=_required(data, "name", str),
            parent_id=_optional(data, "parent_id", int),
            size=_optional(data, "size", int, 0),
            content_type=_optional(data, "content_type", str),
            is_shared=_optional(data, "is_shared", bool, False),
            crc32=_optional(data, "crc32", str),
            opensubtitles_hash=_optional(data, "opensubtitles_hash", str),
            created_at=_timestamp(data, "created_at"),
            first_accessed_at=_timestamp(data, "first_accessed_at"),
            is_mp4_available=_optional(data, "is_mp4_available", bool, False),
            icon=_optional(data, "icon", str),
            screenshot=_optional(data, "screenshot", str),
            file_type=_optional(data, "file_type", str),
            raw=data,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert File to the API's dictionary form."""
        return {
            "id": self.id,
            "name": self.name,
            "parent_id": self.parent_id,
            "size": self.size,
            "content_type": self.content_type,
            "is_shared": self.is_shared,
            "crc32": self.crc32,
            "opensubtitles_hash": self.opensubtitles_hash,
            "created_at": format_timestamp(self.created_at),
            "first_accessed_at": format_timestamp(self.first_accessed_at),
            "is_mp4_available": self.is_mp4_available,
            "icon": self.icon,
            "screenshot": self.screenshot,
            "file_type": self.file_type,
        }

    @property
    def is_folder(self) -> bool:
        return self.content_type == FOLDER_CONTENT_TYPE


@dataclass(frozen=True)
class FileList:
    """Contents of a folder as returned by ``/files/list``."""

    files: List[File]
    parent: Optional[File] = None
    status: Optional[str] = None
    raw: Dict[str, Any] = _raw_field()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FileList":
        data = _object(data, "response")
        parent = data.get("parent")
        return cls(
            files=_records(data, "files", File),
            parent=File.from_dict(parent) if parent is not None else None,
            status=_optional(data, "status", str),
            raw=data,
        )

    def __iter__(self) -> Iterator[File]:
        return iter(self.files)

    def __len__(self) -> int:
        return len(self.files)


@dataclass(frozen=True)
class SearchResult:
    """One page of search results; ``next`` is the upstream URL of the following page."""

    files: List[File]
    next: Optional[str] = None
    raw: Dict[str, Any] = _raw_field()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SearchResult":
        data = _object(data, "response")
        return cls(
            files=_records(data, "files", File),
            next=_optional(data, "next", str),
            raw=data,
        )

    def __iter__(self) -> Iterator[File]:
        return iter(self.files)

    def __len__(self) -> int:
        return len(self.files)


@dataclass(frozen=True)
class MP4:
    """Transcoding state of a file's MP4 version."""

    status: str
    stream_url: Optional[str] = None
    download_url: Optional[str] = None
    size: Optional[int] = None
    percent_done: Optional[int] = None
    raw: Dict[str, Any] = _raw_field()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MP4":
        data = _object(data, "mp4")
        return cls(
            status=_required(data, "status", str),
            stream_url=_optional(data, "stream_url", str),
            download_url=_optional(data, "download_url", str),
            size=_optional(data, "size", int),
            percent_done=_optional(data, "percent_done", int),
            raw=data,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "stream_url": self.stream_url,
            "download_url": self.download_url,
            "size": self.size,
            "percent_done": self.percent_done,
        }

    @property
    def is_ready(self) -> bool:
        return self.status == "COMPLETED"


@dataclass(frozen=True)
class Transfer:
    """A server-side download job."""

    id: int
    name: Optional[str] = None
    source: Optional[str] = None
    status: Optional[str] = None
    status_message: Optional[str] = None
    percent_done: int = 0
    size: int = 0
    downloaded: int = 0
    uploaded: int = 0
    down_speed: int = 0
    up_speed: int = 0
    peers_connected: int = 0
    peers_getting_from_us: int = 0
    peers_sending_to_us: int = 0
    estimated_time: Optional[int] = None
    error_message: Optional[str] = None
    file_id: Optional[int] = None
    save_parent_id: Optional[int] = None
    extract: bool = False
    created_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    raw: Dict[str, Any] = _raw_field()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transfer":
        """Create Transfer from API response dictionary."""
        data = _object(data, "transfer")
        return cls(
            id=_required(data, "id", int),
            name=_optional(data, "name", str),
            source=_optional(data, "source", str),
            status=_optional(data, "status", str),
            status_message=_optional(data, "status_message", str),
            percent_done=_optional(data, "percent_done", int, 0),
            size=_optional(data, "size", int, 0),
            downloaded=_optional(data, "downloaded", int, 0),
            uploaded=_optional(data, "uploaded", int, 0),
            down_speed=_optional(data, "down_speed", int, 0),
            up_speed=_optional(data, "up_speed", int, 0),
            peers_connected=_optional(data, "peers_connected", int, 0),
            peers_getting_from_us=_optional(data, "peers_getting_from_us", int, 0),
            peers_sending_to_us=_optional(data, "peers_sending_to_us", int, 0),
            estimated_time=_optional(data, "estimated_time", int),
            error_message=_optional(data, "error_message", str),
            file_id=_optional(data, "file_id", int),
            save_parent_id=_optional(data, "save_parent_id", int),
            extract=_optional(data, "extract", bool, False),
            created_at=_timestamp(data, "created_at"),
            finished_at=_timestamp(data, "finished_at"),
            raw=data,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert Transfer to the API's dictionary form."""
        return {
            "id": self.id,
            "name": self.name,
            "source": self.source,
            "status": self.status,
            "status_message": self.status_message,
            "percent_done": self.percent_done,
            "size": self.size,
            "downloaded": self.downloaded,
            "uploaded": self.uploaded,
            "down_speed": self.down_speed,
            "up_speed": self.up_speed,
            "peers_connected": self.peers_connected,
            "peers_getting_from_us": self.peers_getting_from_us,
            "peers_sending_to_us": self.peers_sending_to_us,
            "estimated_time": self.estimated_time,
            "error_message": self.error_message,
            "file_id": self.file_id,
            "save_parent_id": self.save_parent_id,
            "extract": self.extract,
            "created_at": format_timestamp(self.created_at),
            "finished_at": format_timestamp(self.finished_at),
        }

    @property
    def is_finished(self) -> bool:
        return self.status in ("COMPLETED", "SEEDING")


@dataclass(frozen=True)
class TransferList:
    transfers: List[Transfer]
    raw: Dict[str, Any] = _raw_field()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TransferList":
        data = _object(data, "response")
        return cls(
            transfers=_records(data, "transfers", Transfer),
            raw=data,
        )

    def __iter__(self) -> Iterator[Transfer]:
        return iter(self.transfers)

    def __len__(self) -> int:
        return len(self.transfers)


@dataclass(frozen=True)
class Disk:
    """Storage quota usage in bytes."""

    avail: int
    used: int
    size: int
    raw: Dict[str, Any] = _raw_field()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Disk":
        data = _object(data, "disk")
        return cls(
            avail=_required(data, "avail", int),
            used=_required(data, "used", int),
            size=_required(data, "size", int),
            raw=data,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"avail": self.avail, "used": self.used, "size": self.size}

    @property
    def usage_percentage(self) -> float:
        """Quota usage as percentage."""
        if not self.size:
            return 0.0
        return (self.used / self.size) * 100


@dataclass(frozen=True)
class UserInfo:
    """Account identity and quota from ``/account/info``."""

    username: str
    mail: Optional[str] = None
    user_id: Optional[int] = None
    disk: Optional[Disk] = None
    subtitle_languages: List[str] = field(default_factory=list)
    default_subtitle_language: Optional[str] = None
    raw: Dict[str, Any] = _raw_field()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserInfo":
        data = _object(data, "info")
        disk = data.get("disk")
        return cls(
            username=_required(data, "username", str),
            mail=_optional(data, "mail", str),
            user_id=_optional(data, "user_id", int),
            disk=Disk.from_dict(disk) if disk is not None else None,
            subtitle_languages=_strings(data, "subtitle_languages"),
            default_subtitle_language=_optional(data, "default_subtitle_language", str),
            raw=data,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "username": self.username,
            "mail": self.mail,
            "user_id": self.user_id,
            "disk": self.disk.to_dict() if self.disk else None,
            "subtitle_languages": list(self.subtitle_languages),
            "default_subtitle_language": self.default_subtitle_language,
        }


@dataclass(frozen=True)
class Settings:
    """Account preferences from ``/account/settings``."""

    default_download_folder: Optional[int] = None
    is_invisible: bool = False
    extraction_default: bool = False
    routing: Optional[str] = None
    subtitle_languages: List[str] = field(default_factory=list)
    raw: Dict[str, Any] = _raw_field()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        data = _object(data, "settings")
        return cls(
            default_download_folder=_optional(data, "default_download_folder", int),
            is_invisible=_optional(data, "is_invisible", bool, False),
            extraction_default=_optional(data, "extraction_default", bool, False),
            routing=_optional(data, "routing", str),
            subtitle_languages=_strings(data, "subtitle_languages"),
            raw=data,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "default_download_folder": self.default_download_folder,
            "is_invisible": self.is_invisible,
            "extraction_default": self.extraction_default,
            "routing": self.routing,
            "subtitle_languages": list(self.subtitle_languages),
        }


@dataclass(frozen=True)
class Friend:
    name: str
    raw: Dict[str, Any] = _raw_field()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Friend":
        data = _object(data, "friend")
        return cls(name=_required(data, "name", str), raw=data)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name}


@dataclass(frozen=True)
class FriendList:
    friends: List[Friend]
    raw: Dict[str, Any] = _raw_field()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FriendList":
        data = _object(data, "response")
        return cls(
            friends=_records(data, "friends", Friend),
            raw=data,
        )

    def __iter__(self) -> Iterator[Friend]:
        return iter(self.friends)

    def __len__(self) -> int:
        return len(self.friends)


@dataclass(frozen=True)
class ApiStatus:
    """
    Outcome reported by a write endpoint.

    ``status`` is passed through as the API sent it ("OK", "ERROR", ...);
    deciding what a failure status means is left to the caller.
    """

    status: str
    raw: Dict[str, Any] = _raw_field()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ApiStatus":
        data = _object(data, "response")
        return cls(status=_required(data, "status", str), raw=data)

    @property
    def ok(self) -> bool:
        return self.status == "OK"

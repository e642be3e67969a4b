"""
Utility functions for the put.io SDK.

Helpers for encoding request values and formatting sizes for display.
"""

import math
from datetime import datetime
from typing import Any, Dict, Iterable, Optional, Union


def format_file_size(size_bytes: Optional[int]) -> str:
    """
    Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 MB")
    """
    if not size_bytes:
        return "0 B"

    size_names = ["B", "KB", "MB", "GB", "TB", "PB"]
    i = int(math.floor(math.log(size_bytes, 1024)))

    if i >= len(size_names):
        i = len(size_names) - 1

    p = math.pow(1024, i)
    size = round(size_bytes / p, 2)

    return f"{size} {size_names[i]}"


def encode_value(value: Any) -> str:
    """Encode a single query or form value the way the API expects it."""
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def encode_params(params: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """Encode a parameter mapping, dropping keys whose value is None."""
    if not params:
        return {}
    return {key: encode_value(value) for key, value in params.items() if value is not None}


def join_ids(ids: Union[int, str, Iterable[Union[int, str]]]) -> str:
    """Join one or more ids into the comma-separated form used by bulk endpoints."""
    if isinstance(ids, (int, str)):
        return str(ids)
    return ",".join(str(i) for i in ids)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp from the API, accepting a trailing 'Z'."""
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat()

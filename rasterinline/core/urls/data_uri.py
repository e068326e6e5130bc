"""
Data URI Helpers
================

Recognize and build ``data:`` URIs. A data URI is already inline and is never fetched.
"""

import base64
import mimetypes
import re

DATA_URI_PREFIX = "data:"

_QUERY_OR_FRAGMENT = re.compile(r"[?#].*$", re.DOTALL)


def is_data_uri(value: str) -> bool:
    """Return True if ``value`` starts with the ``data:`` scheme prefix."""
    return value.startswith(DATA_URI_PREFIX)


def to_data_uri(content: bytes, mime_type: str) -> str:
    """Encode binary content as a base64 data URI."""
    payload = base64.b64encode(content).decode("ascii")
    return f"{DATA_URI_PREFIX}{mime_type};base64,{payload}"


def guess_mime_type(url: str, default: str = "application/octet-stream") -> str:
    """Guess a MIME type from the extension of the URL path."""
    path = _QUERY_OR_FRAGMENT.sub("", url)
    mime_type, _ = mimetypes.guess_type(path, strict=False)
    return mime_type or default

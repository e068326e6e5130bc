"""
URL Utilities
=============

Pure, synchronous string helpers used to locate and rewrite document references.
"""

from .data_uri import is_data_uri, to_data_uri, guess_mime_type
from .css import (
    InvalidUrlError,
    extract_css_url,
    find_css_urls,
    format_css_url,
    substitute_css_urls,
)
from .resolver import join_url

__all__ = [
    "is_data_uri",
    "to_data_uri",
    "guess_mime_type",
    "InvalidUrlError",
    "extract_css_url",
    "find_css_urls",
    "format_css_url",
    "substitute_css_urls",
    "join_url",
]

"""
CSS url() Tokens
================

Extract the URL from a CSS ``url(...)`` token and serialize it back.

Recognized forms are the ones a CSS serializer emits::

    url(path/file.png)
    url("path/file.png")
    url('path/file.png')

Exactly one layer of matching quotes is removed, the inner content is returned
as is (data URI payloads included).
"""

from typing import List, Sequence
import re

_CSS_URL_TOKEN = re.compile(r"""^url\((?P<quote>["']?)(?P<url>.*)(?P=quote)\)$""", re.DOTALL)

_CSS_URL_SEARCH = re.compile(r"""url\((?:"[^"]*"|'[^']*'|[^)"'\s]*)\)""")


class InvalidUrlError(ValueError):
    """Exception raised when a value is not a CSS url() token."""

    pass


def extract_css_url(css_value: str) -> str:
    """
    Return the URL wrapped by a CSS ``url(...)`` token.

    Args:
        css_value: A single url() token, optionally surrounded by whitespace

    Returns:
        The URL with one layer of matching quotes removed

    Raises:
        InvalidUrlError: If the value is not a url() token
    """
    match = _CSS_URL_TOKEN.match(css_value.strip())
    if match is None:
        raise InvalidUrlError(f"Invalid url: {css_value!r}")
    return match.group("url")


def find_css_urls(css_value: str) -> List[str]:
    """Find every url() token in a declaration value, in order of appearance."""
    return [match.group(0) for match in _CSS_URL_SEARCH.finditer(css_value)]


def format_css_url(url: str) -> str:
    """Serialize a URL as a double-quoted url() token."""
    return 'url("{}")'.format(url.replace('"', "%22"))


def substitute_css_urls(css_value: str, replacements: Sequence[str]) -> str:
    """
    Replace the url() tokens of a declaration value, in order of appearance.

    ``replacements`` holds one entry per token returned by ``find_css_urls``.
    """
    if len(replacements) != len(find_css_urls(css_value)):
        raise ValueError("Expected one replacement per url() token")

    remaining = iter(replacements)
    return _CSS_URL_SEARCH.sub(lambda match: next(remaining), css_value)

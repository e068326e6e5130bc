"""
URL Resolution
==============

Resolve a document reference against the document's base URL.

This is string rewriting only: no URL object is built and nothing is looked up
on the network. Resolution follows these rules, first match wins:

1. A reference carrying its own scheme is returned unchanged.
2. A root-relative reference (``/path``) is joined to the ``scheme://host`` of
   the base. A base without a host leaves the reference unchanged.
3. A base without any directory (no ``/``) is ignored.
4. Otherwise the last segment of the base is dropped, the reference appended
   and ``./`` and ``../`` segments collapsed.
"""

import re

_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*:")

_SCHEME_AND_HOST = re.compile(r"^(?P<scheme>[a-zA-Z][a-zA-Z0-9+.\-]*:)//[^/?#]*")

_QUERY_OR_FRAGMENT = re.compile(r"[?#].*$", re.DOTALL)


def join_url(base: str, relative: str) -> str:
    """Resolve ``relative`` against ``base``."""
    if _SCHEME.match(relative):
        return relative

    host_match = _SCHEME_AND_HOST.match(base)

    if relative.startswith("//"):
        # Protocol-relative reference takes the scheme of the base only
        return host_match.group("scheme") + relative if host_match else relative

    if relative.startswith("/"):
        return host_match.group(0) + relative if host_match else relative

    base_path = _QUERY_OR_FRAGMENT.sub("", base)
    if host_match and len(base_path) == host_match.end():
        base_path += "/"

    if "/" not in base_path:
        return relative

    directory = base_path[: base_path.rfind("/") + 1]

    if host_match:
        prefix = host_match.group(0)
        return prefix + _collapse_parent_segments(directory[len(prefix) :] + relative)
    return _collapse_parent_segments(directory + relative)


def _collapse_parent_segments(path: str) -> str:
    """Drop ``./`` segments and remove every ``../`` with the directory preceding it."""
    segments = path.split("/")
    collapsed: list[str] = []

    for position, segment in enumerate(segments):
        # A trailing "." or ".." is a file name, not a directory segment
        is_directory = position < len(segments) - 1
        is_parent = segment == ".." and is_directory

        if segment == "." and is_directory:
            continue
        elif is_parent and collapsed and collapsed[-1] not in ("", ".."):
            collapsed.pop()
        elif is_parent and collapsed == [""]:
            # Already at the root
            continue
        else:
            collapsed.append(segment)

    return "/".join(collapsed)

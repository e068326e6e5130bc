"""
Resource Fetcher
================

Text and binary loading of referenced resources.

The inliner only sees success or ``FetchError``; the cause of a failure is
opaque to it. ``HTTPResourceFetcher`` loads ``http(s)`` URLs with aiohttp and
reads ``file://`` and scheme-less URLs from the local filesystem.
"""

from typing import Any, Callable, Optional, Set, Union
from abc import ABC, abstractmethod
from pathlib import Path
from urllib.parse import unquote, urlparse
import asyncio
import re

import aiohttp

from rasterinline.config.logging import get_logger
from rasterinline.config.settings import Settings, get_settings

logger = get_logger(__name__)

_HTTP_URL = re.compile(r"^https?://", re.IGNORECASE)
_ANY_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*:")
_QUERY_OR_FRAGMENT = re.compile(r"[?#].*$", re.DOTALL)


class FetchError(Exception):
    """Exception raised when a resource cannot be loaded."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class ResourceFetcher(ABC):
    """Abstract base class for resource fetchers."""

    def __init__(self) -> None:
        self._callback_tasks: Set[asyncio.Task] = set()

    @abstractmethod
    async def fetch_text(self, url: str) -> str:
        """Load a text resource, raising FetchError on failure."""
        pass

    @abstractmethod
    async def fetch_binary(self, url: str) -> bytes:
        """Load a binary resource without decoding it, raising FetchError on failure."""
        pass

    async def close(self) -> None:
        """Release any resources held by the fetcher."""
        pass

    def fetch(
        self,
        url: str,
        on_success: Callable[[Union[str, bytes]], None],
        on_error: Callable[[FetchError], None],
        binary: bool = False,
    ) -> None:
        """
        Callback form of fetch_text/fetch_binary.

        Exactly one of ``on_success`` or ``on_error`` is called, always from a
        later iteration of the running event loop.
        """
        loop = asyncio.get_running_loop()
        task = loop.create_task(self.fetch_binary(url) if binary else self.fetch_text(url))
        self._callback_tasks.add(task)

        def report(finished: asyncio.Task) -> None:
            self._callback_tasks.discard(finished)
            if finished.cancelled():
                on_error(FetchError(url, "cancelled"))
                return
            error = finished.exception()
            if error is None:
                on_success(finished.result())
            elif isinstance(error, FetchError):
                on_error(error)
            else:
                on_error(FetchError(url, str(error) or type(error).__name__))

        task.add_done_callback(report)


class HTTPResourceFetcher(ResourceFetcher):
    """aiohttp-based fetcher with local file support."""

    def __init__(self, settings: Optional[Settings] = None, root: Optional[Path] = None):
        super().__init__()
        self.settings = settings or get_settings()
        self.root = root if root is not None else self.settings.local_root
        self.logger: Any = logger.bind(component="http_resource_fetcher")  # structlog.BoundLoggerBase
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(
                total=self.settings.fetch_timeout, connect=self.settings.fetch_connect_timeout
            )
            self._session = aiohttp.ClientSession(
                timeout=timeout, headers={"User-Agent": self.settings.user_agent}
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def fetch_text(self, url: str) -> str:
        if _HTTP_URL.match(url):
            return await self._request(url, binary=False)

        content = await self._read_local(url)
        try:
            return content.decode("utf-8")
        except UnicodeDecodeError as e:
            self.logger.error("Local resource is not UTF-8 text", url=url)
            raise FetchError(url, f"not UTF-8 text: {e}") from e

    async def fetch_binary(self, url: str) -> bytes:
        if _HTTP_URL.match(url):
            return await self._request(url, binary=True)
        return await self._read_local(url)

    async def _request(self, url: str, binary: bool) -> Any:
        """GET a URL over HTTP."""
        try:
            session = await self._get_session()
            async with session.get(url) as response:
                if response.status != 200:
                    self.logger.warning("Resource request failed", url=url, status=response.status)
                    raise FetchError(url, f"HTTP {response.status}")
                content = await response.read() if binary else await response.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            reason = str(e) or type(e).__name__
            self.logger.error("Resource request error", url=url, error=reason)
            raise FetchError(url, reason) from e

        self.logger.debug("Resource fetched", url=url, size=len(content), binary=binary)
        return content

    def _local_path(self, url: str) -> Path:
        """Map a file:// or scheme-less URL onto the filesystem."""
        if url.lower().startswith("file://"):
            return Path(unquote(urlparse(url).path))

        if _ANY_SCHEME.match(url):
            raise FetchError(url, "unsupported URL scheme")

        path = Path(unquote(_QUERY_OR_FRAGMENT.sub("", url)))
        if not path.is_absolute() and self.root is not None:
            path = self.root / path
        return path

    async def _read_local(self, url: str) -> bytes:
        """Read a local resource in a worker thread."""
        path = self._local_path(url)
        try:
            content = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            self.logger.warning("Local resource read failed", url=url, path=str(path), error=str(e))
            raise FetchError(url, e.strerror or str(e)) from e

        self.logger.debug("Local resource read", url=url, size=len(content))
        return content

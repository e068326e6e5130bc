"""
Test Mocks
===========

In-memory fetch collaborator for inliner and fetcher tests.
"""

import asyncio
from typing import Dict, List, Optional, Union

from rasterinline.core.fetching.fetcher import FetchError, ResourceFetcher

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR"


class MockResourceFetcher(ResourceFetcher):
    """Serves resources from a dict, optionally after a per-URL delay."""

    def __init__(
        self,
        resources: Optional[Dict[str, Union[str, bytes]]] = None,
        delays: Optional[Dict[str, float]] = None,
    ):
        super().__init__()
        self.resources: Dict[str, Union[str, bytes]] = dict(resources or {})
        self.delays: Dict[str, float] = dict(delays or {})
        self.requested: List[str] = []
        self.completed: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    async def _load(self, url: str) -> Union[str, bytes]:
        self.requested.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(url, 0))
            if url not in self.resources:
                raise FetchError(url, "HTTP 404")
            return self.resources[url]
        finally:
            self.in_flight -= 1
            self.completed.append(url)

    async def fetch_text(self, url: str) -> str:
        content = await self._load(url)
        return content.decode("utf-8") if isinstance(content, bytes) else content

    async def fetch_binary(self, url: str) -> bytes:
        content = await self._load(url)
        return content.encode("utf-8") if isinstance(content, str) else content

    async def close(self) -> None:
        self.closed = True

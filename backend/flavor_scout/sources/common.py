"""
Common plumbing for content sources.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

import httpx

from flavor_scout.config import HTTP_HEADERS, HTTP_TIMEOUT_SECONDS
from flavor_scout.models import ContentBatch
from flavor_scout.sources.fetch_cache import FetchCache, FetchCacheInfo

logger = logging.getLogger(__name__)

# NewsAPI cuts `content` and appends e.g. "[+2345 chars]"
_TRUNCATION_SUFFIX = re.compile(r"\s*\[\+\d+ chars?\]$")


def strip_truncation_suffix(text: str) -> str:
    return _TRUNCATION_SUFFIX.sub("", text or "")


@dataclass(frozen=True)
class FetchResult:
    batch: ContentBatch
    from_cache: bool


class ContentSource:
    """
    Base class for upstream content sources.

    Subclasses implement ``_fetch_upstream``; this class adds the fetch cache
    and the force refresh bypass. One upstream attempt per call, no retries.
    """

    label = "Content"

    def __init__(
        self,
        cache: Optional[FetchCache] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = HTTP_TIMEOUT_SECONDS,
    ):
        self.cache = cache or FetchCache()
        self._transport = transport
        self._timeout = timeout

    def _client(self, **kwargs) -> httpx.AsyncClient:
        headers = {**HTTP_HEADERS, **kwargs.pop("headers", {})}
        return httpx.AsyncClient(
            headers=headers, timeout=self._timeout, transport=self._transport, **kwargs
        )

    def cache_info(self) -> FetchCacheInfo:
        return self.cache.info()

    async def fetch(self, force_refresh: bool = False) -> FetchResult:
        """
        Return the cached batch when fresh, otherwise fetch from upstream.

        Raises:
            UpstreamFetchError: The upstream call failed
        """
        if not force_refresh:
            cached = self.cache.get()
            if cached is not None:
                logger.info("%s: serving cached batch (%d items)", self.label, len(cached.items))
                return FetchResult(batch=cached, from_cache=True)

        batch = await self._fetch_upstream()
        if batch.items:
            self.cache.put(batch)
        logger.info(
            "%s: fetched %d items and %d excerpts", self.label, len(batch.items), len(batch.excerpts)
        )
        return FetchResult(batch=batch, from_cache=False)

    async def _fetch_upstream(self) -> ContentBatch:
        raise NotImplementedError

"""
Time-bounded cache over the last batch a content source fetched.
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

from flavor_scout.config import FETCH_CACHE_TTL_SECONDS
from flavor_scout.models import ContentBatch


@dataclass(frozen=True)
class FetchCacheInfo:
    is_cached: bool
    age_seconds: int
    fetch_count: int


class FetchCache:
    """Keeps one batch for ``ttl_seconds`` and counts real upstream fetches."""

    def __init__(self, ttl_seconds: int = FETCH_CACHE_TTL_SECONDS, clock: Callable[[], float] = time.time):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._batch: Optional[ContentBatch] = None
        self._stored_at = 0.0
        self.fetch_count = 0

    def get(self) -> Optional[ContentBatch]:
        """Return the cached batch while it is fresh, else None."""
        if self._batch is None:
            return None
        if self._clock() - self._stored_at >= self.ttl_seconds:
            return None
        return self._batch

    def put(self, batch: ContentBatch) -> None:
        self._batch = batch
        self._stored_at = self._clock()
        self.fetch_count += 1

    def info(self) -> FetchCacheInfo:
        if self._batch is None:
            return FetchCacheInfo(is_cached=False, age_seconds=0, fetch_count=self.fetch_count)
        return FetchCacheInfo(
            is_cached=self.get() is not None,
            age_seconds=int(self._clock() - self._stored_at),
            fetch_count=self.fetch_count,
        )

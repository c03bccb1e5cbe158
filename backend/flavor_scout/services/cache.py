"""
Last-known-good analysis cache.

A single slot that any successful analysis overwrites. Entries never expire;
their age is reported to the caller instead. There is no lock: two
concurrent successful requests race and the last writer wins.
"""
from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from flavor_scout.schemas import AnalysisResult, CacheInfo

logger = logging.getLogger(__name__)


class StaleResponseCache:
    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._value: Optional[AnalysisResult] = None
        self._stored_at_millis = 0

    @property
    def is_empty(self) -> bool:
        return self._value is None

    def put(self, result: AnalysisResult) -> None:
        """Overwrite the slot and its timestamp."""
        self._value = result.model_copy(deep=True)
        self._stored_at_millis = int(self._clock() * 1000)
        logger.info("Updated fallback cache with fresh data")

    def get(self, reason: str) -> Optional[AnalysisResult]:
        """
        Return a copy of the stored result marked as a fallback.

        Args:
            reason: Why the fallback is being served; surfaced as fallbackReason

        Returns:
            AnalysisResult with overridden cache info, or None if nothing is stored
        """
        if self._value is None:
            return None

        age_seconds = max(0, (int(self._clock() * 1000) - self._stored_at_millis) // 1000)
        cache_info = CacheInfo(
            used_cache=True,
            cache_age_seconds=age_seconds,
            total_api_fetches=self._value.cache_info.total_api_fetches,
            is_fallback=True,
            fallback_reason=reason,
        )
        return self._value.model_copy(update={"cache_info": cache_info}, deep=True)

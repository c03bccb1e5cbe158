"""
File: flavor_scout/models.py
Internal data structures produced by the content sources.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict, List


JsonDict = Dict[str, Any]


@dataclass(frozen=True)
class ContentItem:
    """Unified representation of a fetched article or post.

    Identity is the origin key (see ``origin_key``); two items sharing it are
    the same entity.
    """

    id: str
    title: str
    body: str
    source_name: str
    author_name: str
    published_at_epoch_seconds: float
    origin_url: str
    engagement_score: float = 0.0
    comment_count: int = 0

    @property
    def origin_key(self) -> str:
        # Tracking parameters differ between syndications of the same URL
        key = (self.origin_url or "").split("?")[0]
        return key or self.id

    def to_dict(self) -> JsonDict:
        return asdict(self)


@dataclass(frozen=True)
class ContentExcerpt:
    """Supplementary text fragment: an article excerpt or a comment."""

    id: str
    body: str
    author_name: str
    published_at_epoch_seconds: float
    engagement_score: float = 0.0

    def to_dict(self) -> JsonDict:
        return asdict(self)


@dataclass(frozen=True)
class ContentBatch:
    """Everything one fetch from a content source returned."""

    items: List[ContentItem]
    excerpts: List[ContentExcerpt]
    fetched_at: datetime
    source_label: str = "News Articles"


__all__ = ["ContentItem", "ContentExcerpt", "ContentBatch", "JsonDict"]

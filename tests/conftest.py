"""
Shared test fixtures for flavor scout.

Provides:
- ContentItem / ContentExcerpt factories
- A sample model reply
- Fake content source and model client for the orchestrator
- A controllable clock
"""

from datetime import datetime, timezone
from typing import Any, List, Optional

import pytest

from flavor_scout.errors import ModelCallError, UpstreamFetchError
from flavor_scout.models import ContentBatch, ContentExcerpt, ContentItem
from flavor_scout.settings import Settings
from flavor_scout.sources.common import ContentSource
from flavor_scout.sources.fetch_cache import FetchCache


def make_item(
    item_id: str = "a1",
    title: str = "Mango whey launches",
    body: str = "A new mango flavored whey is coming.",
    url: Optional[str] = None,
    engagement: float = 50.0,
    source: str = "Example News",
) -> ContentItem:
    return ContentItem(
        id=item_id,
        title=title,
        body=body,
        source_name=source,
        author_name="Reporter",
        published_at_epoch_seconds=1_700_000_000,
        origin_url=url if url is not None else f"https://example.com/{item_id}",
        engagement_score=engagement,
    )


def make_excerpt(excerpt_id: str = "e1", body: str = "Kesar pista would be amazing.") -> ContentExcerpt:
    return ContentExcerpt(
        id=excerpt_id,
        body=body,
        author_name="reader",
        published_at_epoch_seconds=1_700_000_000,
    )


SAMPLE_REPLY = {
    "analysisInsights": "Indian flavors are trending.",
    "trendKeywords": [
        {"text": "Kesar Pista", "value": 18, "sentiment": "positive", "context": "Festive demand"},
        {"text": "Rich Chocolate", "value": 9, "sentiment": "negative"},
        {"text": "Mango Lassi", "value": 12, "sentiment": "positive"},
    ],
    "negativeMentions": [
        {"flavor": "Strawberry Shake", "complaint": "Tastes artificial", "frequency": 4, "source": "Reviews"},
    ],
    "recommendations": [
        {
            "id": "rec-1",
            "flavorName": "Kesar Pista",
            "productType": "Biozyme Whey",
            "targetBrand": "MuscleBlaze",
            "confidence": 88,
            "whyItWorks": "Premium Indian flavor with festive pull.",
            "supportingData": ["Saffron pistachio is beloved"],
            "status": "selected",
        },
        {
            "id": "rec-2",
            "flavorName": "Aam Panna",
            "productType": "Electrolytes",
            "targetBrand": "HK Vitals",
            "confidence": 75,
            "status": "selected",
        },
    ],
    "goldenCandidate": {
        "recommendationId": "rec-1",
        "totalMentions": 25,
        "sentimentScore": 0.92,
        "negativeMentions": 3,
        "marketGap": "No saffron whey on the market",
        "competitiveAdvantage": "Local flavor expertise",
    },
    "dataQuality": {"postsAnalyzed": 2, "commentsAnalyzed": 1, "relevantDiscussions": 7},
}


class Clock:
    """Manually advanced time source."""

    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSource(ContentSource):
    """Content source whose next upstream result is set by the test."""

    label = "News Articles"

    def __init__(self, items: Optional[List[ContentItem]] = None, error: Optional[str] = None, clock=None):
        super().__init__(cache=FetchCache(ttl_seconds=600, clock=clock or Clock()))
        self.items = items if items is not None else [make_item()]
        self.error = error
        self.upstream_calls = 0

    async def _fetch_upstream(self) -> ContentBatch:
        self.upstream_calls += 1
        if self.error:
            raise UpstreamFetchError(self.error)
        return ContentBatch(
            items=list(self.items),
            excerpts=[make_excerpt()],
            fetched_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
            source_label=self.label,
        )


class FakeModelClient:
    """Model client returning a canned reply or raising ModelCallError."""

    def __init__(self, reply: Any = None, error: Optional[str] = None):
        self.reply = SAMPLE_REPLY if reply is None else reply
        self.error = error
        self.prompts: List[str] = []
        self.closed = False

    async def complete(self, prompt_text: str) -> Any:
        self.prompts.append(prompt_text)
        if self.error:
            raise ModelCallError(self.error)
        return self.reply

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def settings():
    return Settings(_env_file=None, NEWS_API_KEY="news-key", GROQ_API_KEY="groq-key", CONTENT_SOURCE="news")


@pytest.fixture
def missing_settings():
    return Settings(_env_file=None, NEWS_API_KEY="", GROQ_API_KEY="", CONTENT_SOURCE="news")

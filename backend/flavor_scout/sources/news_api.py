"""
NewsAPI fetcher for supplement and flavor coverage.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import httpx

from flavor_scout.config import (
    FETCH_LIMIT,
    NEWS_QUERY_COUNT,
    SEARCH_QUERIES,
    SUPPLEMENTARY_PAGE_SIZE,
    SUPPLEMENTARY_QUERIES,
)
from flavor_scout.core.weighting import article_engagement_score
from flavor_scout.errors import UpstreamFetchError
from flavor_scout.models import ContentBatch, ContentExcerpt, ContentItem
from flavor_scout.sources.common import ContentSource, strip_truncation_suffix
from flavor_scout.utils import extract_domain_from_url, make_content_id, normalize_text, now_utc, parse_epoch_seconds

logger = logging.getLogger(__name__)

MIN_CONTENT_EXCERPT_CHARS = 100
MIN_DESCRIPTION_EXCERPT_CHARS = 50


def article_to_item(article: dict) -> Optional[ContentItem]:
    """
    Convert a NewsAPI article to a ContentItem.

    Returns:
        ContentItem, or None when the article has no title or no text
    """
    title = normalize_text(article.get("title"))
    description = normalize_text(article.get("description"))
    content = normalize_text(strip_truncation_suffix(article.get("content") or ""))
    url = (article.get("url") or "").strip()

    if not title or not (description or content):
        return None

    source = article.get("source") or {}
    source_name = normalize_text(source.get("name") if isinstance(source, dict) else "")
    source_name = source_name or extract_domain_from_url(url) or "News"
    published_at = parse_epoch_seconds(article.get("publishedAt"))

    return ContentItem(
        id=make_content_id("news", url or title),
        title=title,
        body=description or content,
        source_name=source_name,
        author_name=normalize_text(article.get("author")) or source_name or "Unknown",
        published_at_epoch_seconds=published_at,
        origin_url=url,
        engagement_score=article_engagement_score(published_at),
    )


def article_to_excerpts(article: dict, item: ContentItem) -> List[ContentExcerpt]:
    """Split an article's content and description into analysis excerpts."""
    excerpts: List[ContentExcerpt] = []
    content = normalize_text(strip_truncation_suffix(article.get("content") or ""))
    description = normalize_text(article.get("description"))

    if len(content) > MIN_CONTENT_EXCERPT_CHARS:
        excerpts.append(
            ContentExcerpt(
                id=f"excerpt-{item.id}",
                body=content,
                author_name=item.source_name or "Article Content",
                published_at_epoch_seconds=item.published_at_epoch_seconds,
                engagement_score=50,
            )
        )
    if len(description) > MIN_DESCRIPTION_EXCERPT_CHARS:
        excerpts.append(
            ContentExcerpt(
                id=f"desc-{item.id}",
                body=description,
                author_name=item.source_name or "Article Summary",
                published_at_epoch_seconds=item.published_at_epoch_seconds,
                engagement_score=60,
            )
        )
    return excerpts


class NewsApiSource(ContentSource):
    """Fetches articles from the NewsAPI `everything` endpoint."""

    BASE_URL = "https://newsapi.org/v2/everything"
    label = "News Articles"

    def __init__(
        self,
        api_key: str,
        queries: Optional[Sequence[str]] = None,
        limit: int = FETCH_LIMIT,
        supplementary_queries: Optional[Sequence[str]] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.api_key = api_key
        self.queries = list(queries if queries is not None else SEARCH_QUERIES[:NEWS_QUERY_COUNT])
        self.supplementary_queries = list(
            supplementary_queries if supplementary_queries is not None else SUPPLEMENTARY_QUERIES
        )
        self.limit = limit

    @property
    def page_size(self) -> int:
        return max(1, min(20, self.limit // max(1, len(self.queries))))

    async def _fetch_upstream(self) -> ContentBatch:
        """
        Run every configured query once and merge the results.

        A 401 aborts the whole fetch; a 429 stops querying and keeps what was
        collected; any other per-query failure skips that query. The
        supplementary queries run afterwards and only add items.

        Raises:
            UpstreamFetchError: Invalid key, or nothing collected because every query failed
        """
        items: List[ContentItem] = []
        excerpts: List[ContentExcerpt] = []
        seen_urls: set[str] = set()
        last_error: Optional[str] = None

        async with self._client() as client:
            for query in self.queries:
                params = {
                    "q": query,
                    "language": "en",
                    "sortBy": "relevancy",
                    "pageSize": self.page_size,
                    "apiKey": self.api_key,
                }
                try:
                    response = await client.get(self.BASE_URL, params=params)
                except httpx.HTTPError as e:
                    logger.warning("NewsAPI request failed for %r: %s", query, e)
                    last_error = f"{type(e).__name__}: {e}" if str(e) else type(e).__name__
                    continue

                if response.status_code == 401:
                    raise UpstreamFetchError("Invalid NewsAPI key. Please check your API key.")
                if response.status_code == 429:
                    logger.warning("NewsAPI rate limit reached, using collected results")
                    last_error = "NewsAPI rate limit reached (429 Too Many Requests)"
                    break
                if response.is_error:
                    last_error = f"HTTP {response.status_code}: {_error_message(response)}"
                    logger.warning("NewsAPI error for %r: %s", query, last_error)
                    continue

                for article in _articles(response):
                    item = _new_item(article, seen_urls)
                    if item is None:
                        continue
                    items.append(item)
                    excerpts.extend(article_to_excerpts(article, item))

            items.extend(await self._fetch_supplementary(client, seen_urls))

        if not items and last_error:
            raise UpstreamFetchError(f"NewsAPI error: {last_error}")

        return ContentBatch(items=items, excerpts=excerpts, fetched_at=now_utc(), source_label=self.label)

    async def _fetch_supplementary(self, client: httpx.AsyncClient, seen_urls: set[str]) -> List[ContentItem]:
        """Newest articles for the broader boolean queries. Any failure just skips the query."""
        items: List[ContentItem] = []
        for query in self.supplementary_queries:
            params = {
                "q": query,
                "language": "en",
                "sortBy": "publishedAt",
                "pageSize": SUPPLEMENTARY_PAGE_SIZE,
                "apiKey": self.api_key,
            }
            try:
                response = await client.get(self.BASE_URL, params=params)
            except httpx.HTTPError as e:
                logger.debug("Supplementary NewsAPI query %r failed: %s", query, e)
                continue
            if response.is_error:
                logger.debug("Supplementary NewsAPI query %r returned HTTP %d", query, response.status_code)
                continue

            for article in _articles(response):
                item = _new_item(article, seen_urls)
                if item is not None:
                    items.append(item)
        return items


def _new_item(article: dict, seen_urls: set[str]) -> Optional[ContentItem]:
    """Convert an article unless its URL was already collected in this fetch."""
    url = (article.get("url") or "").strip()
    if url and url in seen_urls:
        return None
    seen_urls.add(url)
    return article_to_item(article)


def _articles(response: httpx.Response) -> List[dict]:
    try:
        data = response.json()
    except ValueError:
        return []
    articles = data.get("articles") if isinstance(data, dict) else None
    return [a for a in articles if isinstance(a, dict)] if isinstance(articles, list) else []


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return response.text[:200]

"""
Analysis pipeline orchestration.

One request runs CHECK_CREDENTIALS -> FETCHING -> NORMALIZING -> CALLING_MODEL
-> PARSING -> SELECTING -> DONE strictly in sequence. A failure in the
credentials, fetch or model stage serves the last good result from the
StaleResponseCache when there is one; only without it does the request end
in an error response. Each external call is attempted exactly once.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple, Union

from flavor_scout.config import MAX_FLAVOR_MENTIONS, MAX_INPUT_CHARS
from flavor_scout.core.golden import select_golden_candidate
from flavor_scout.core.normalizer import normalize
from flavor_scout.core.parser import ParsedAnalysis, parse_model_response
from flavor_scout.errors import ConfigurationError, ModelCallError, UpstreamFetchError, failure_response
from flavor_scout.schemas import (
    AnalysisResult,
    CacheInfo,
    DataQuality,
    ErrorBody,
    FlavorMention,
    TrendKeyword,
)
from flavor_scout.services.cache import StaleResponseCache
from flavor_scout.services.credentials import Credentials, check_credentials
from flavor_scout.services.llm import GroqModelClient
from flavor_scout.settings import Settings
from flavor_scout.sources.common import ContentSource, FetchResult
from flavor_scout.sources.news_api import NewsApiSource
from flavor_scout.sources.reddit import RedditSource
from flavor_scout.utils import now_utc

logger = logging.getLogger(__name__)

CREDENTIALS_HINT = (
    "Get a free NewsAPI key at https://newsapi.org/register and a Groq key at "
    "https://console.groq.com/keys"
)


@dataclass(frozen=True)
class ErrorResponse:
    status_code: int
    body: ErrorBody


AnalysisOutcome = Union[AnalysisResult, ErrorResponse]


def build_source(credentials: Credentials) -> ContentSource:
    if credentials.content_source == "reddit":
        return RedditSource(
            client_id=credentials.reddit_client_id,
            client_secret=credentials.reddit_client_secret,
            username=credentials.reddit_username,
            password=credentials.reddit_password,
        )
    return NewsApiSource(api_key=credentials.news_api_key)


def build_model_client(credentials: Credentials, model: str) -> GroqModelClient:
    return GroqModelClient(api_key=credentials.groq_api_key, model=model)


def summarize_flavor_mentions(keywords: List[TrendKeyword], source_label: str) -> List[FlavorMention]:
    """Top positive keywords, in the model's order."""
    return [
        FlavorMention(flavor=kw.text, count=kw.value, sentiment=kw.sentiment, sources=[source_label])
        for kw in keywords
        if kw.sentiment == "positive"
    ][:MAX_FLAVOR_MENTIONS]


class AnalysisOrchestrator:
    def __init__(
        self,
        settings: Settings,
        cache: StaleResponseCache,
        source_factory: Callable[[Credentials], ContentSource] = build_source,
        model_factory: Callable[[Credentials, str], GroqModelClient] = build_model_client,
        char_budget: int = MAX_INPUT_CHARS,
    ):
        self.settings = settings
        self.cache = cache
        self._source_factory = source_factory
        self._model_factory = model_factory
        self._char_budget = char_budget
        # One source (with its fetch cache) and one model client, replaced when credentials change
        self._source: Optional[Tuple[Credentials, ContentSource]] = None
        self._model: Optional[Tuple[Tuple[Credentials, str], GroqModelClient]] = None

    def source_for(self, credentials: Credentials) -> ContentSource:
        if self._source is None or self._source[0] != credentials:
            self._source = (credentials, self._source_factory(credentials))
        return self._source[1]

    async def model_for(self, credentials: Credentials) -> GroqModelClient:
        key = (credentials, self.settings.GROQ_MODEL)
        if self._model is not None and self._model[0] == key:
            return self._model[1]

        previous = self._model
        self._model = (key, self._model_factory(credentials, self.settings.GROQ_MODEL))
        if previous is not None:
            await previous[1].aclose()
        return self._model[1]

    async def aclose(self) -> None:
        """Close the cached model client, if any."""
        if self._model is not None:
            _, client = self._model
            self._model = None
            await client.aclose()

    def _fallback_or(self, reason: str, error: ErrorResponse) -> AnalysisOutcome:
        fallback = self.cache.get(reason)
        if fallback is not None:
            logger.warning("Serving fallback analysis: %s", reason)
            return fallback
        logger.error("No fallback available: %s", reason)
        return error

    @staticmethod
    def _classified_error(message: str) -> ErrorResponse:
        status_code, title, hint = failure_response(message)
        return ErrorResponse(status_code, ErrorBody(error=title, message=message, hint=hint))

    async def run(self, force_refresh: bool = False) -> AnalysisOutcome:
        """
        Run one analysis cycle.

        Args:
            force_refresh: Bypass the content source's fetch cache

        Returns:
            AnalysisResult (fresh or fallback) or an ErrorResponse
        """
        # CHECK_CREDENTIALS
        credentials = check_credentials(self.settings)
        if isinstance(credentials, ConfigurationError):
            return self._fallback_or(
                credentials.message,
                ErrorResponse(
                    503,
                    ErrorBody(
                        error="Missing API credentials",
                        message=(
                            "Please configure the following environment variables: "
                            + ", ".join(credentials.missing_vars)
                        ),
                        missing_vars=credentials.missing_vars,
                        hint=CREDENTIALS_HINT,
                    ),
                ),
            )

        # FETCHING
        source = self.source_for(credentials)
        logger.info("Fetching content from %s (force_refresh=%s)", source.label, force_refresh)
        try:
            fetched = await source.fetch(force_refresh=force_refresh)
        except UpstreamFetchError as e:
            logger.error("Content fetch failed: %s", e)
            return self._fallback_or(e.message, self._classified_error(e.message))

        batch = fetched.batch
        if not batch.items:
            reason = f"No articles found from {source.label}"
            return self._fallback_or(
                reason,
                ErrorResponse(
                    404,
                    ErrorBody(
                        error="No data found",
                        message="Could not fetch any relevant content. Please try again later.",
                    ),
                ),
            )

        # NORMALIZING
        prompt_text = normalize(batch.items, batch.excerpts, self._char_budget)

        # CALLING_MODEL
        model_client = await self.model_for(credentials)
        logger.info("Analyzing %d items with %s", len(batch.items), self.settings.GROQ_MODEL)
        try:
            raw = await model_client.complete(prompt_text)
        except ModelCallError as e:
            logger.error("Model call failed: %s", e)
            return self._fallback_or(e.message, self._classified_error(e.message))

        # PARSING, SELECTING
        parsed = parse_model_response(raw)
        golden = select_golden_candidate(parsed.golden_candidate, parsed.recommendations)

        # DONE
        result = self.build_result(parsed, golden, fetched, source)
        self.cache.put(result)
        logger.info("Generated %d recommendations", len(result.recommendations))
        return result

    @staticmethod
    def build_result(parsed: ParsedAnalysis, golden, fetched: FetchResult, source: ContentSource) -> AnalysisResult:
        batch = fetched.batch
        fetch_info = source.cache_info()
        relevant = parsed.relevant_discussions
        return AnalysisResult(
            trend_keywords=parsed.trend_keywords,
            flavor_mentions=summarize_flavor_mentions(parsed.trend_keywords, batch.source_label),
            recommendations=parsed.recommendations,
            golden_candidate=golden,
            negative_mentions=parsed.negative_mentions,
            raw_post_count=len(batch.items),
            analyzed_at=now_utc().isoformat(),
            analysis_insights=parsed.analysis_insights,
            data_quality=DataQuality(
                posts_analyzed=len(batch.items),
                comments_analyzed=len(batch.excerpts),
                relevant_discussions=relevant if relevant is not None else min(len(batch.items), 20),
            ),
            cache_info=CacheInfo(
                used_cache=fetched.from_cache,
                cache_age_seconds=fetch_info.age_seconds,
                total_api_fetches=fetch_info.fetch_count,
                is_fallback=False,
            ),
        )

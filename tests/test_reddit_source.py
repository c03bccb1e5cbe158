"""Tests for flavor_scout/sources/reddit.py."""

import httpx
import pytest

from flavor_scout.errors import UpstreamFetchError
from flavor_scout.services.cache import StaleResponseCache
from flavor_scout.services.orchestrator import AnalysisOrchestrator, ErrorResponse
from flavor_scout.settings import Settings
from flavor_scout.sources.reddit import RedditSource, comment_to_excerpt, post_to_item

from conftest import FakeModelClient


POST = {
    "id": "abc123",
    "title": "Anyone tried a kesar pista whey?",
    "selftext": "Looking for  Indian flavors.",
    "subreddit": "Fitness_India",
    "author": "lifter42",
    "created_utc": 1767261600,
    "permalink": "/r/Fitness_India/comments/abc123/kesar/",
    "score": 120,
    "num_comments": 14,
}

COMMENTS = [
    {"kind": "Listing", "data": {"children": [{"kind": "t3", "data": POST}]}},
    {
        "kind": "Listing",
        "data": {
            "children": [
                {"kind": "t1", "data": {"id": "c1", "body": "Yes, it tastes like festive sweets!", "author": "a", "score": 9}},
                {"kind": "t1", "data": {"id": "c2", "body": "meh", "author": "b", "score": 1}},
                {"kind": "more", "data": {"children": ["c9"]}},
                {"kind": "t1", "data": {"id": "c3", "body": "Would buy mango lassi flavor too.", "author": "c", "score": 4}},
            ]
        },
    },
]


def make_source(handler) -> RedditSource:
    return RedditSource(
        client_id="id",
        client_secret="secret",
        username="scout",
        password="pw",
        keywords=["kesar"],
        subreddits=["Fitness_India", "Supplements"],
        transport=httpx.MockTransport(handler),
    )


def reddit_handler(token_status: int = 200, search_status: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/v1/access_token":
            if token_status != 200:
                return httpx.Response(token_status, json={"error": token_status})
            return httpx.Response(200, json={"access_token": "tok", "expires_in": 3600})
        assert request.headers["Authorization"] == "Bearer tok"
        if request.url.path.endswith("/search"):
            if search_status != 200:
                return httpx.Response(search_status)
            return httpx.Response(200, json={"data": {"children": [{"kind": "t3", "data": POST}]}})
        if request.url.path == "/comments/abc123":
            return httpx.Response(200, json=COMMENTS)
        return httpx.Response(404)

    return handler


class TestConversion:
    def test_post_to_item(self):
        item = post_to_item(POST)

        assert item.id == "abc123"
        assert item.body == "Looking for Indian flavors."
        assert item.source_name == "r/Fitness_India"
        assert item.origin_url == "https://www.reddit.com/r/Fitness_India/comments/abc123/kesar/"
        assert item.comment_count == 14
        assert 0 < item.engagement_score <= 100

    def test_post_without_title_is_skipped(self):
        assert post_to_item({"id": "x", "title": "  "}) is None

    def test_short_comments_are_skipped(self):
        assert comment_to_excerpt({"id": "c", "body": "too short"}) is None


class TestRedditSource:
    @pytest.mark.asyncio
    async def test_fetches_posts_and_top_comments(self):
        result = await make_source(reddit_handler()).fetch()

        assert [item.id for item in result.batch.items] == ["abc123"]
        assert [excerpt.id for excerpt in result.batch.excerpts] == ["c1", "c3"]
        assert result.batch.source_label == "Reddit Discussions"

    @pytest.mark.asyncio
    async def test_searches_all_subreddits_at_once(self):
        paths = []
        inner = reddit_handler()

        def handler(request):
            paths.append(request.url.path)
            return inner(request)

        await make_source(handler).fetch()

        assert "/r/Fitness_India+Supplements/search" in paths

    @pytest.mark.asyncio
    async def test_token_is_reused(self):
        token_calls = []
        inner = reddit_handler()

        def handler(request):
            if request.url.path == "/api/v1/access_token":
                token_calls.append(request)
            return inner(request)

        source = make_source(handler)
        await source.fetch()
        await source.fetch(force_refresh=True)

        assert len(token_calls) == 1

    @pytest.mark.asyncio
    async def test_unauthorized_credentials(self):
        with pytest.raises(UpstreamFetchError, match="unauthorized"):
            await make_source(reddit_handler(token_status=401)).fetch()

    @pytest.mark.asyncio
    async def test_search_failure_is_wrapped(self):
        with pytest.raises(UpstreamFetchError, match="HTTP 503"):
            await make_source(reddit_handler(search_status=503)).fetch()


class TestMalformedReplies:
    @staticmethod
    def html_search_handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/v1/access_token":
            return httpx.Response(200, json={"access_token": "tok", "expires_in": 3600})
        return httpx.Response(200, text="<html><body>Blocked</body></html>", headers={"Content-Type": "text/html"})

    @pytest.mark.asyncio
    async def test_non_json_search_reply_is_a_fetch_error(self):
        with pytest.raises(UpstreamFetchError, match="Reddit API error: malformed response"):
            await make_source(self.html_search_handler).fetch()

    @pytest.mark.asyncio
    async def test_non_object_token_reply(self):
        def handler(request):
            return httpx.Response(200, json=["not", "a", "token"])

        with pytest.raises(UpstreamFetchError, match="no token"):
            await make_source(handler).fetch()

    @pytest.mark.asyncio
    async def test_unexpected_listing_shape_reads_as_empty(self):
        def handler(request):
            if request.url.path == "/api/v1/access_token":
                return httpx.Response(200, json={"access_token": "tok", "expires_in": 3600})
            return httpx.Response(200, json=[{"data": "nope"}])

        result = await make_source(handler).fetch()

        assert result.batch.items == []

    @pytest.mark.asyncio
    async def test_orchestrator_turns_non_json_reply_into_error_response(self):
        settings = Settings(
            _env_file=None,
            GROQ_API_KEY="groq",
            CONTENT_SOURCE="reddit",
            REDDIT_CLIENT_ID="id",
            REDDIT_CLIENT_SECRET="secret",
            REDDIT_USERNAME="scout",
            REDDIT_PASSWORD="pw",
        )
        model = FakeModelClient()
        orchestrator = AnalysisOrchestrator(
            settings=settings,
            cache=StaleResponseCache(),
            source_factory=lambda credentials: make_source(self.html_search_handler),
            model_factory=lambda credentials, model_name: model,
        )

        outcome = await orchestrator.run()

        assert isinstance(outcome, ErrorResponse)
        assert outcome.status_code == 500
        assert outcome.body.message.startswith("Reddit API error: malformed response")
        assert model.prompts == []

"""
File: flavor_scout/sources/reddit.py
Reddit OAuth search fetcher for flavor discussions.
"""

from __future__ import annotations

import logging
import time
from typing import List, Optional, Sequence, Tuple

import httpx

from flavor_scout.config import (
    FETCH_LIMIT,
    FLAVOR_KEYWORDS,
    REDDIT_COMMENTS_PER_POST,
    TARGET_SUBREDDITS,
    USER_AGENT,
)
from flavor_scout.core.weighting import post_engagement_score
from flavor_scout.errors import UpstreamFetchError
from flavor_scout.models import ContentBatch, ContentExcerpt, ContentItem
from flavor_scout.sources.common import ContentSource
from flavor_scout.utils import normalize_text, now_utc

logger = logging.getLogger(__name__)

REDDIT_AUTH_URL = "https://www.reddit.com/api/v1/access_token"
REDDIT_API_URL = "https://oauth.reddit.com"
MIN_COMMENT_CHARS = 10


def post_to_item(post: dict) -> Optional[ContentItem]:
    title = normalize_text(post.get("title"))
    if not title:
        return None
    permalink = post.get("permalink") or ""
    upvotes = int(post.get("score") or post.get("ups") or 0)
    comments = int(post.get("num_comments") or 0)
    return ContentItem(
        id=str(post.get("id") or permalink or title),
        title=title,
        body=normalize_text(post.get("selftext")),
        source_name=f"r/{post.get('subreddit') or 'reddit'}",
        author_name=post.get("author") or "[deleted]",
        published_at_epoch_seconds=float(post.get("created_utc") or now_utc().timestamp()),
        origin_url=f"https://www.reddit.com{permalink}" if permalink else (post.get("url") or ""),
        engagement_score=post_engagement_score(upvotes, comments),
        comment_count=comments,
    )


def comment_to_excerpt(comment: dict) -> Optional[ContentExcerpt]:
    body = normalize_text(comment.get("body"))
    if len(body) <= MIN_COMMENT_CHARS:
        return None
    return ContentExcerpt(
        id=str(comment.get("id") or ""),
        body=body,
        author_name=comment.get("author") or "[deleted]",
        published_at_epoch_seconds=float(comment.get("created_utc") or now_utc().timestamp()),
        engagement_score=float(comment.get("score") or 0),
    )


class RedditSource(ContentSource):
    """Searches flavor keywords across target subreddits with script-app OAuth."""

    label = "Reddit Discussions"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        username: str,
        password: str,
        keywords: Optional[Sequence[str]] = None,
        subreddits: Optional[Sequence[str]] = None,
        limit: int = 50,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.client_id = client_id
        self.client_secret = client_secret
        self.username = username
        self.password = password
        self.keywords = list(keywords if keywords is not None else FLAVOR_KEYWORDS)
        self.subreddits = list(subreddits if subreddits is not None else TARGET_SUBREDDITS)
        self.limit = min(limit, FETCH_LIMIT)
        # simple in-memory cache for the bearer token
        self._token: Tuple[Optional[str], float] = (None, 0.0)

    @property
    def user_agent(self) -> str:
        return f"{USER_AGENT} (by /u/{self.username})"

    async def _access_token(self, client: httpx.AsyncClient) -> str:
        """Get (and cache) a password-grant bearer token."""
        value, expires_at = self._token
        now = time.time()
        if value and expires_at - now > 60:
            return value

        response = await client.post(
            REDDIT_AUTH_URL,
            data={"grant_type": "password", "username": self.username, "password": self.password},
            auth=(self.client_id, self.client_secret),
        )
        if response.status_code == 401:
            raise UpstreamFetchError("Reddit rejected the API credentials (unauthorized)")
        response.raise_for_status()
        token = response.json()
        if not isinstance(token, dict) or "access_token" not in token:
            error = token.get("error", "no token") if isinstance(token, dict) else "no token"
            raise UpstreamFetchError(f"Reddit auth failed: invalid credentials ({error})")
        self._token = (token["access_token"], now + float(token.get("expires_in", 3600)))
        return token["access_token"]

    async def _fetch_upstream(self) -> ContentBatch:
        items: List[ContentItem] = []
        excerpts: List[ContentExcerpt] = []
        per_keyword = max(1, self.limit // max(1, len(self.keywords)))

        try:
            async with self._client(headers={"User-Agent": self.user_agent}) as client:
                token = await self._access_token(client)
                headers = {"Authorization": f"Bearer {token}"}

                for keyword in self.keywords:
                    response = await client.get(
                        f"{REDDIT_API_URL}/r/{'+'.join(self.subreddits)}/search",
                        params={
                            "q": keyword,
                            "restrict_sr": "true",
                            "sort": "relevance",
                            "t": "month",
                            "limit": per_keyword,
                        },
                        headers=headers,
                    )
                    response.raise_for_status()

                    for child in _children(response.json()):
                        post = child.get("data", {})
                        item = post_to_item(post)
                        if item is None:
                            continue
                        items.append(item)
                        excerpts.extend(await self._top_comments(client, headers, post.get("id")))
        except httpx.HTTPStatusError as e:
            raise UpstreamFetchError(
                f"Reddit API error: HTTP {e.response.status_code} {e.response.reason_phrase}"
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamFetchError(f"Reddit API error: {type(e).__name__}: {e}") from e
        except ValueError as e:
            raise UpstreamFetchError(f"Reddit API error: malformed response ({e})") from e

        return ContentBatch(items=items, excerpts=excerpts, fetched_at=now_utc(), source_label=self.label)

    async def _top_comments(self, client: httpx.AsyncClient, headers: dict, post_id: Optional[str]) -> List[ContentExcerpt]:
        if not post_id:
            return []
        response = await client.get(
            f"{REDDIT_API_URL}/comments/{post_id}",
            params={"limit": REDDIT_COMMENTS_PER_POST * 2, "sort": "top"},
            headers=headers,
        )
        response.raise_for_status()
        listings = response.json()
        if not isinstance(listings, list) or len(listings) < 2:
            return []

        excerpts: List[ContentExcerpt] = []
        for child in _children(listings[1]):
            if child.get("kind") != "t1":
                continue
            excerpt = comment_to_excerpt(child.get("data", {}))
            if excerpt is not None:
                excerpts.append(excerpt)
            if len(excerpts) >= REDDIT_COMMENTS_PER_POST:
                break
        return excerpts


def _children(listing) -> List[dict]:
    """Child entries of a Reddit listing; anything unexpected reads as empty."""
    data = listing.get("data") if isinstance(listing, dict) else None
    children = data.get("children") if isinstance(data, dict) else None
    return [child for child in children if isinstance(child, dict)] if isinstance(children, list) else []

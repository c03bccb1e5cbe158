"""
Wholesale credential presence check, done before any network call.

The check returns either a Credentials value or a ConfigurationError value
instead of raising, so callers branch on the result.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Union

from flavor_scout.errors import ConfigurationError
from flavor_scout.settings import Settings

REDDIT_VARS = ["REDDIT_CLIENT_ID", "REDDIT_CLIENT_SECRET", "REDDIT_USERNAME", "REDDIT_PASSWORD"]


@dataclass(frozen=True)
class Credentials:
    content_source: str
    groq_api_key: str
    news_api_key: str = ""
    reddit_client_id: str = ""
    reddit_client_secret: str = ""
    reddit_username: str = ""
    reddit_password: str = ""


def required_vars(content_source: str) -> List[str]:
    """Environment variables the given content source needs, LLM key last."""
    source_vars = REDDIT_VARS if content_source == "reddit" else ["NEWS_API_KEY"]
    return [*source_vars, "GROQ_API_KEY"]


def check_credentials(settings: Settings) -> Union[Credentials, ConfigurationError]:
    source = (settings.CONTENT_SOURCE or "news").strip().lower()
    missing = [name for name in required_vars(source) if not getattr(settings, name, "").strip()]
    if missing:
        return ConfigurationError(missing)

    return Credentials(
        content_source=source,
        groq_api_key=settings.GROQ_API_KEY,
        news_api_key=settings.NEWS_API_KEY,
        reddit_client_id=settings.REDDIT_CLIENT_ID,
        reddit_client_secret=settings.REDDIT_CLIENT_SECRET,
        reddit_username=settings.REDDIT_USERNAME,
        reddit_password=settings.REDDIT_PASSWORD,
    )

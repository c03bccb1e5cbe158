"""Tests for flavor_scout/services/credentials.py."""

from flavor_scout.errors import ConfigurationError
from flavor_scout.services.credentials import Credentials, check_credentials, required_vars
from flavor_scout.settings import Settings


def make_settings(**values) -> Settings:
    base = {"NEWS_API_KEY": "", "GROQ_API_KEY": "", "CONTENT_SOURCE": "news"}
    base.update(values)
    return Settings(_env_file=None, **base)


def test_news_source_needs_news_and_groq_keys():
    assert required_vars("news") == ["NEWS_API_KEY", "GROQ_API_KEY"]


def test_reddit_source_needs_reddit_vars_then_groq():
    assert required_vars("reddit") == [
        "REDDIT_CLIENT_ID",
        "REDDIT_CLIENT_SECRET",
        "REDDIT_USERNAME",
        "REDDIT_PASSWORD",
        "GROQ_API_KEY",
    ]


def test_all_missing_reported_together():
    outcome = check_credentials(make_settings())

    assert isinstance(outcome, ConfigurationError)
    assert outcome.missing_vars == ["NEWS_API_KEY", "GROQ_API_KEY"]
    assert outcome.message == "Missing credentials: NEWS_API_KEY, GROQ_API_KEY"


def test_blank_values_count_as_missing():
    outcome = check_credentials(make_settings(NEWS_API_KEY="   ", GROQ_API_KEY="groq"))
    assert outcome.missing_vars == ["NEWS_API_KEY"]


def test_present_credentials():
    outcome = check_credentials(make_settings(NEWS_API_KEY="news", GROQ_API_KEY="groq"))

    assert isinstance(outcome, Credentials)
    assert outcome.content_source == "news"
    assert outcome.news_api_key == "news"
    assert outcome.groq_api_key == "groq"


def test_content_source_is_case_insensitive():
    outcome = check_credentials(make_settings(CONTENT_SOURCE=" Reddit ", GROQ_API_KEY="groq"))
    assert "REDDIT_CLIENT_ID" in outcome.missing_vars


def test_credentials_are_hashable():
    first = check_credentials(make_settings(NEWS_API_KEY="news", GROQ_API_KEY="groq"))
    second = check_credentials(make_settings(NEWS_API_KEY="news", GROQ_API_KEY="groq"))
    assert {first: 1}[second] == 1

"""Tests for flavor_scout/errors.py."""

import pytest

from flavor_scout.errors import classify_failure, failure_response


@pytest.mark.parametrize(
    "message, kind",
    [
        ("Invalid NewsAPI key. Please check your API key.", "auth"),
        ("Reddit rejected the API credentials (unauthorized)", "auth"),
        ("AI analysis failed: Error code: 401 - Invalid API Key", "auth"),
        ("NewsAPI error: NewsAPI rate limit reached (429 Too Many Requests)", "rate_limit"),
        ("Too many requests, slow down", "rate_limit"),
        ("Empty response from model", "generic"),
        ("", "generic"),
    ],
)
def test_classify_failure(message, kind):
    assert classify_failure(message) == kind


def test_auth_wins_over_rate_limit():
    assert classify_failure("Invalid API key after 429 retries") == "auth"


def test_failure_response():
    status, title, hint = failure_response("Too many requests")
    assert (status, title) == (429, "Rate limit exceeded")
    assert hint
    assert failure_response("boom")[0] == 500

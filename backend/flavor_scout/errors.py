"""
Failure taxonomy for the analysis pipeline.

Only these three kinds can end a request with a non-200 status, and only
when no cached fallback exists. Malformed model output is never an error:
the parser defaults it field by field.
"""
from __future__ import annotations

from typing import List, Tuple


class FlavorScoutError(Exception):
    """Base class for pipeline failures."""

    @property
    def message(self) -> str:
        return str(self)


class ConfigurationError(FlavorScoutError):
    """Required credentials are absent. Not transient, never retried."""

    def __init__(self, missing_vars: List[str]):
        self.missing_vars = list(missing_vars)
        super().__init__(f"Missing credentials: {', '.join(self.missing_vars)}")


class UpstreamFetchError(FlavorScoutError):
    """The content source failed or returned nothing usable."""


class ModelCallError(FlavorScoutError):
    """The LLM call failed, or its reply was empty or not JSON."""


AUTH_MARKERS = ("api key", "unauthorized", "invalid")
RATE_LIMIT_MARKERS = ("rate limit", "too many", "429")

# kind -> (status, error title, hint)
FAILURE_RESPONSES = {
    "auth": (
        401,
        "Authentication failed",
        "Please verify your NewsAPI and Groq API keys are correct.",
    ),
    "rate_limit": (
        429,
        "Rate limit exceeded",
        "API rate limit reached. Please wait a few minutes and try again.",
    ),
    "generic": (
        500,
        "Analysis failed",
        "Please try again. If the problem persists, check your API credentials.",
    ),
}


def classify_failure(message: str) -> str:
    """
    Classify an upstream failure message for presentation.

    Returns:
        "auth", "rate_limit" or "generic"
    """
    lowered = (message or "").lower()
    if any(marker in lowered for marker in AUTH_MARKERS):
        return "auth"
    if any(marker in lowered for marker in RATE_LIMIT_MARKERS):
        return "rate_limit"
    return "generic"


def failure_response(message: str) -> Tuple[int, str, str]:
    """Map a failure message to (status code, error title, hint)."""
    return FAILURE_RESPONSES[classify_failure(message)]

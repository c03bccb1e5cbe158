"""
Application tunables with environment variable support.
"""
from __future__ import annotations

import os
from typing import Dict, List


def _get_env_float(key: str, default: float) -> float:
    """Get float value from environment variable with fallback."""
    try:
        return float(os.getenv(key, default))
    except (ValueError, TypeError):
        return default


def _get_env_int(key: str, default: int) -> int:
    """Get integer value from environment variable with fallback."""
    try:
        return int(os.getenv(key, default))
    except (ValueError, TypeError):
        return default


def _get_env_list(key: str, default: list[str], separator: str = ",") -> list[str]:
    """Get list value from environment variable with fallback."""
    value = os.getenv(key)
    if not value:
        return default
    return [item.strip() for item in value.split(separator) if item.strip()]


# Prompt budgeting
MAX_INPUT_CHARS: int = _get_env_int("MAX_INPUT_CHARS", 25000)  # ~6000 tokens
PROMPT_SAFETY_MARGIN: int = _get_env_int("PROMPT_SAFETY_MARGIN", 5000)
MAX_PROMPT_ITEMS: int = 40
MAX_PROMPT_EXCERPTS: int = 30
ITEM_BODY_CHARS: int = 150
EXCERPT_BODY_CHARS: int = 200
TRUNCATION_MARKER: str = "\n\n[Content truncated for analysis]"

# Content fetching
FETCH_LIMIT: int = _get_env_int("FETCH_LIMIT", 200)
FETCH_CACHE_TTL_SECONDS: int = _get_env_int("FETCH_CACHE_TTL_SECONDS", 600)
NEWS_QUERY_COUNT: int = _get_env_int("NEWS_QUERY_COUNT", 15)
HTTP_TIMEOUT_SECONDS: float = _get_env_float("HTTP_TIMEOUT_SECONDS", 15.0)
HALF_LIFE_HOURS: float = _get_env_float("HALF_LIFE_HOURS", 72.0)

# Model call
GROQ_BASE_URL: str = os.getenv("GROQ_BASE_URL", "https://api.groq.com/openai/v1")
MODEL_TIMEOUT_SECONDS: float = _get_env_float("MODEL_TIMEOUT_SECONDS", 60.0)
MODEL_TEMPERATURE: float = 0.4
MODEL_MAX_TOKENS: int = 4096

# Response shaping
MAX_FLAVOR_MENTIONS: int = 10

# Brands, in default order: the first one is the fallback target segment
BRANDS: List[str] = ["MuscleBlaze", "HK Vitals", "TrueBasics"]

BRAND_PROFILES: Dict[str, Dict[str, str]] = {
    "MuscleBlaze": {
        "description": "Hardcore gym performance",
        "target_audience": "Serious fitness enthusiasts and bodybuilders",
        "flavor_style": "Bold, intense flavors",
    },
    "HK Vitals": {
        "description": "Wellness lifestyle",
        "target_audience": "Health-conscious everyday consumers",
        "flavor_style": "Refreshing, light flavors",
    },
    "TrueBasics": {
        "description": "Premium health supplements",
        "target_audience": "Premium segment seeking quality",
        "flavor_style": "Sophisticated, unique flavors",
    },
}

# NewsAPI search queries, most specific first
SEARCH_QUERIES: List[str] = [
    # Brand specific
    "HealthKart products India",
    "MuscleBlaze protein flavor",
    "MuscleBlaze new product launch",
    "HK Vitals supplements",
    "TrueBasics health products",
    "HealthKart whey protein review",
    # Protein and supplement flavors
    "protein powder flavors India",
    "best tasting whey protein",
    "chocolate protein powder",
    "vanilla whey protein",
    "protein shake flavors",
    # Indian market
    "Indian supplement market",
    "fitness supplements India",
    "gym nutrition India",
    "health supplements trends India",
    # Competitors
    "Optimum Nutrition India",
    "MyProtein India flavors",
    "Dymatize protein India",
    # Flavor trends
    "mango protein powder",
    "coffee flavored protein",
    "peanut butter protein",
    "electrolyte drinks India",
    "BCAA supplements flavor",
    "pre workout flavors",
]

# Broader boolean queries run after SEARCH_QUERIES, newest first; failures ignored
SUPPLEMENTARY_QUERIES: List[str] = [
    "(protein OR supplement OR fitness) AND India",
    "(whey OR BCAA OR preworkout) AND (flavor OR taste)",
    'HealthKart OR MuscleBlaze OR "HK Vitals"',
]
SUPPLEMENTARY_PAGE_SIZE: int = _get_env_int("SUPPLEMENTARY_PAGE_SIZE", 30)

TARGET_SOURCES: List[str] = [
    "Health & Fitness News",
    "Supplement Industry Publications",
    "India Business News",
    "Wellness & Nutrition Articles",
    "Product Review Sites",
]

# Reddit search
TARGET_SUBREDDITS: List[str] = _get_env_list(
    "TARGET_SUBREDDITS",
    ["Supplements", "fitness", "indianfitness", "gainit", "nutrition", "bodybuilding"],
)
FLAVOR_KEYWORDS: List[str] = [
    "protein flavor",
    "whey flavor",
    "best tasting",
    "worst flavor",
    "new flavor",
]
REDDIT_COMMENTS_PER_POST: int = 5

# HTTP Client Configuration
USER_AGENT = "FlavorScout/1.0"
HTTP_HEADERS = {"User-Agent": USER_AGENT}

# CORS Configuration
CORS_ALLOW_ORIGINS: list[str] = _get_env_list("CORS_ALLOW_ORIGINS", ["*"])

# Logging Configuration
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT: str = os.getenv(
    "LOG_FORMAT",
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

"""
Shared utility functions for the flavor scout service.
"""
from __future__ import annotations

import hashlib
import math
import re
from datetime import datetime, timezone
from typing import Any, Optional

import tldextract
from dateutil import parser as dateparser

# Bundled public suffix snapshot only; no network fetch at first use
_extract_domain = tldextract.TLDExtract(suffix_list_urls=())


def now_utc() -> datetime:
    """
    Get current UTC datetime with timezone information.

    Returns:
        Current UTC datetime
    """
    return datetime.now(timezone.utc)


def normalize_text(text: str | None) -> str:
    """
    Normalize whitespace in text content.

    Args:
        text: Input text string (can be None)

    Returns:
        Normalized text with single spaces and trimmed edges
    """
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip()


def truncate(text: str, max_len: int) -> str:
    """Cut text to max_len characters, marking the cut with an ellipsis."""
    if len(text) <= max_len:
        return text
    return text[:max_len] + "..."


def parse_epoch_seconds(date_string: Optional[str]) -> float:
    """
    Parse a date string into UTC epoch seconds.

    Args:
        date_string: Date string in various formats, or None

    Returns:
        Epoch seconds, or the current time if the input is missing or unparseable
    """
    if not date_string:
        return now_utc().timestamp()
    try:
        parsed = dateparser.parse(date_string)
    except (ValueError, OverflowError, TypeError):
        return now_utc().timestamp()
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


def extract_domain_from_url(url: str) -> str:
    """
    Extract the main domain from a URL.

    Args:
        url: Full URL string

    Returns:
        Normalized domain name in lowercase, empty string if none
    """
    if not url:
        return ""
    extracted = _extract_domain(url)
    domain = f"{extracted.domain}.{extracted.suffix}" if extracted.suffix else extracted.domain
    return domain.lower()


def make_content_id(prefix: str, *parts: str) -> str:
    """
    Generate a deterministic short ID from multiple string parts.

    Returns:
        prefix followed by a 16-character hexadecimal digest
    """
    key = "|".join(parts).encode("utf-8", "ignore")
    return f"{prefix}-{hashlib.blake2b(key, digest_size=8).hexdigest()}"


def clamp_to_unit_range(value: float) -> float:
    """
    Clamp a float value to the range [0.0, 1.0].
    """
    return max(0.0, min(1.0, value))


def as_number(value: Any) -> Optional[float]:
    """
    Coerce an untrusted JSON value to a finite float.

    Numeric strings are accepted; booleans, NaN and infinities are not.

    Returns:
        The number, or None when the value is not numeric
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None

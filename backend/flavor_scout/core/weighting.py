"""
Engagement scoring for fetched content.

NewsAPI exposes no engagement data, so articles are scored by recency with an
exponential half-life decay. Reddit posts use log-scaled upvotes and comments.
Both scores land in [0, 100].
"""
from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Optional

from flavor_scout.config import HALF_LIFE_HOURS
from flavor_scout.utils import clamp_to_unit_range


def calculate_recency_weight(published_at_epoch_seconds: float, now: Optional[datetime] = None) -> float:
    """
    Calculate recency weight using exponential decay.

    Args:
        published_at_epoch_seconds: Publication time
        now: Reference time, defaults to the current UTC time

    Returns:
        Weight between 0.0 and 1.0 (1.0 for content published now)
    """
    reference = (now or datetime.now(timezone.utc)).timestamp()
    age_hours = max(0.0, (reference - published_at_epoch_seconds) / 3600.0)
    decay_factor = 2 ** (-(age_hours / max(1e-6, HALF_LIFE_HOURS)))
    return clamp_to_unit_range(decay_factor)


def calculate_social_weight(upvotes: int, comments: int) -> float:
    """
    Calculate engagement weight from user interaction.

    Logarithmic scaling keeps viral posts from drowning everything else.
    """
    raw_score = math.log1p(max(0, upvotes)) + 0.5 * math.log1p(max(0, comments))
    return clamp_to_unit_range(raw_score / 10.0)


def article_engagement_score(published_at_epoch_seconds: float, now: Optional[datetime] = None) -> float:
    return round(100 * calculate_recency_weight(published_at_epoch_seconds, now), 2)


def post_engagement_score(upvotes: int, comments: int) -> float:
    return round(100 * calculate_social_weight(upvotes, comments), 2)

"""
Golden candidate selection.
"""
from __future__ import annotations

import math
from typing import List, Optional

from flavor_scout.schemas import FlavorRecommendation, GoldenCandidate
from flavor_scout.utils import clamp_to_unit_range


def synthesize_golden_candidate(recommendation: FlavorRecommendation) -> GoldenCandidate:
    """
    Derive golden candidate metrics from a recommendation's confidence.

    Args:
        recommendation: The winning recommendation

    Returns:
        GoldenCandidate with templated descriptions
    """
    confidence = recommendation.confidence
    return GoldenCandidate(
        recommendation=recommendation,
        rank=1,
        total_mentions=max(0, math.floor(confidence / 4 + 0.5)),  # half-up
        sentiment_score=clamp_to_unit_range(confidence / 100),
        negative_mention_count=0,
        market_gap=(
            f"Strong demand identified for {recommendation.name} "
            f"in the {recommendation.category} category"
        ),
        competitive_advantage=(
            f"First-mover advantage for {recommendation.name} "
            f"in the {recommendation.category} flavor segment"
        ),
    )


def select_golden_candidate(
    parsed_golden: Optional[GoldenCandidate],
    recommendations: List[FlavorRecommendation],
) -> Optional[GoldenCandidate]:
    """
    Pick the golden candidate for an analysis cycle.

    The model's own pick wins once it has been resolved by the parser.
    Otherwise the selected recommendation with the highest confidence is
    used; on ties the earliest one in list order.

    Returns:
        GoldenCandidate, or None when no recommendation is selected
    """
    if parsed_golden is not None:
        return parsed_golden

    selected = [rec for rec in recommendations if rec.status == "selected"]
    if not selected:
        return None

    # max() keeps the first of equal keys
    winner = max(selected, key=lambda rec: rec.confidence)
    return synthesize_golden_candidate(winner)

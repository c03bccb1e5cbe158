"""
Total mapping from the model's untrusted JSON reply to typed records.

Every field access tolerates bad input: wrong types, missing keys and null values
fall back to per-field defaults, and a malformed section never affects the
others. Nothing in this module raises on bad input.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

from flavor_scout.config import BRANDS
from flavor_scout.schemas import (
    FlavorAnalysis,
    FlavorRecommendation,
    GoldenCandidate,
    NegativeMention,
    TrendKeyword,
)
from flavor_scout.utils import as_number, clamp_to_unit_range

DEFAULT_INSIGHTS = "Analysis completed based on current market trends and consumer discussions."
DEFAULT_MARKET_GAP = "Strong market opportunity identified"
DEFAULT_COMPETITIVE_ADVANTAGE = "First-mover advantage in emerging flavor segment"

SENTIMENTS = ("positive", "negative", "neutral")
STATUSES = ("selected", "rejected")
_BRANDS_BY_LOWER = {brand.lower(): brand for brand in BRANDS}


@dataclass(frozen=True)
class ParsedAnalysis:
    """The part of an AnalysisResult that comes from the model."""

    trend_keywords: List[TrendKeyword] = field(default_factory=list)
    negative_mentions: List[NegativeMention] = field(default_factory=list)
    recommendations: List[FlavorRecommendation] = field(default_factory=list)
    golden_candidate: Optional[GoldenCandidate] = None
    analysis_insights: str = DEFAULT_INSIGHTS
    relevant_discussions: Optional[int] = None


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _text(value: Any, default: str = "") -> str:
    """Stringify a scalar; containers and null give the default."""
    if value is None or isinstance(value, (dict, list)):
        return default
    text = str(value).strip()
    return text or default


def _optional_text(value: Any) -> Optional[str]:
    return _text(value) or None


def _int(value: Any, default: int, minimum: Optional[int] = None) -> int:
    number = as_number(value)
    if number is None:
        return default
    result = int(round(number))
    if minimum is not None and result < minimum:
        return minimum
    return result


def _strings(value: Any) -> List[str]:
    return [text for text in (_text(entry) for entry in _as_list(value)) if text]


def _first(raw: dict, *keys: str) -> Any:
    """Value of the first key present with a non-null value."""
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


def parse_trend_keywords(value: Any) -> List[TrendKeyword]:
    keywords: List[TrendKeyword] = []
    for entry in _as_list(value):
        raw = _as_dict(entry)
        text = _text(raw.get("text"))
        if not text:
            continue
        sentiment = raw.get("sentiment")
        keywords.append(
            TrendKeyword(
                text=text,
                value=_int(raw.get("value"), default=1, minimum=0),
                sentiment=sentiment if sentiment in SENTIMENTS else "neutral",
                context=_optional_text(raw.get("context")),
            )
        )
    return keywords


def parse_negative_mentions(value: Any) -> List[NegativeMention]:
    mentions: List[NegativeMention] = []
    for entry in _as_list(value):
        raw = _as_dict(entry)
        flavor = _text(_first(raw, "flavor", "flavorOrSubject", "subject"))
        if not flavor:
            continue
        mentions.append(
            NegativeMention(
                flavor=flavor,
                complaint=_text(raw.get("complaint")),
                frequency=_int(raw.get("frequency"), default=1, minimum=1),
                source=_text(raw.get("source"), default="Unknown"),
            )
        )
    return mentions


def parse_analysis_block(value: Any) -> Optional[FlavorAnalysis]:
    if not isinstance(value, dict):
        return None
    return FlavorAnalysis(
        market_demand=_text(value.get("marketDemand")),
        competitor_gap=_text(value.get("competitorGap")),
        consumer_pain_point=_text(value.get("consumerPainPoint")),
        seasonal_relevance=_optional_text(value.get("seasonalRelevance")),
        risk_factors=_strings(value.get("riskFactors")),
    )


def parse_target_segment(value: Any) -> str:
    return _BRANDS_BY_LOWER.get(_text(value).lower(), BRANDS[0])


def parse_recommendation(entry: Any, index: int) -> FlavorRecommendation:
    raw = _as_dict(entry)
    status = raw.get("status")
    negative_feedback = raw.get("negativeFeedback")
    return FlavorRecommendation(
        id=_text(raw.get("id"), default=f"rec-{index + 1}"),
        name=_text(_first(raw, "flavorName", "name"), default="Unknown Flavor"),
        category=_text(_first(raw, "productType", "category"), default="Supplement"),
        target_segment=parse_target_segment(_first(raw, "targetBrand", "targetSegment")),
        confidence=_int(raw.get("confidence"), default=50),
        rationale=_text(_first(raw, "whyItWorks", "rationale"), default="Based on user discussions"),
        supporting_quotes=_strings(_first(raw, "supportingData", "supportingQuotes")),
        status=status if status in STATUSES else "selected",
        rejection_reason=_optional_text(raw.get("rejectionReason")),
        analysis=parse_analysis_block(raw.get("analysis")),
        negative_feedback=_strings(negative_feedback) if isinstance(negative_feedback, list) else None,
        existing_comparison=_optional_text(raw.get("existingComparison")),
        promotion_opportunity=_optional_text(raw.get("promotionOpportunity")),
    )


def parse_recommendations(value: Any) -> List[FlavorRecommendation]:
    return [parse_recommendation(entry, index) for index, entry in enumerate(_as_list(value))]


def parse_golden_candidate(
    value: Any, recommendations: List[FlavorRecommendation]
) -> Optional[GoldenCandidate]:
    """
    Build the model's golden pick if its recommendation reference resolves.

    Unresolvable or missing references yield None; choosing a replacement is
    left to the golden candidate selector.
    """
    raw = _as_dict(value)
    ref = _text(raw.get("recommendationId"))
    if not ref:
        return None

    recommendation = next((rec for rec in recommendations if rec.id == ref), None)
    if recommendation is None:
        return None

    sentiment = as_number(raw.get("sentimentScore"))
    return GoldenCandidate(
        recommendation=recommendation,
        rank=1,
        total_mentions=_int(raw.get("totalMentions"), default=10, minimum=0),
        sentiment_score=clamp_to_unit_range(sentiment) if sentiment is not None else 0.8,
        negative_mention_count=_int(
            _first(raw, "negativeMentions", "negativeMentionCount"), default=0, minimum=0
        ),
        market_gap=_text(raw.get("marketGap"), default=DEFAULT_MARKET_GAP),
        competitive_advantage=_text(
            raw.get("competitiveAdvantage"), default=DEFAULT_COMPETITIVE_ADVANTAGE
        ),
    )


def parse_model_response(raw: Any) -> ParsedAnalysis:
    """
    Map the model's reply to typed records with safe defaults.

    Args:
        raw: Decoded JSON of any shape

    Returns:
        ParsedAnalysis; empty lists where the reply had nothing usable
    """
    payload = _as_dict(raw)
    recommendations = parse_recommendations(payload.get("recommendations"))
    relevant = as_number(_as_dict(payload.get("dataQuality")).get("relevantDiscussions"))

    return ParsedAnalysis(
        trend_keywords=parse_trend_keywords(payload.get("trendKeywords")),
        negative_mentions=parse_negative_mentions(payload.get("negativeMentions")),
        recommendations=recommendations,
        golden_candidate=parse_golden_candidate(payload.get("goldenCandidate"), recommendations),
        analysis_insights=_text(payload.get("analysisInsights"), default=DEFAULT_INSIGHTS),
        relevant_discussions=max(0, int(round(relevant))) if relevant is not None else None,
    )

# flavor_scout/schemas.py
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Sentiment = Literal["positive", "negative", "neutral"]
RecommendationStatus = Literal["selected", "rejected"]
Brand = Literal["MuscleBlaze", "HK Vitals", "TrueBasics"]


class Schema(BaseModel):
    """Immutable response record serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class TrendKeyword(Schema):
    text: str
    value: int = 1
    sentiment: Sentiment = "neutral"
    context: Optional[str] = None


class NegativeMention(Schema):
    flavor: str
    complaint: str = ""
    frequency: int = 1
    source: str = "Unknown"


class FlavorAnalysis(Schema):
    market_demand: str = ""
    competitor_gap: str = ""
    consumer_pain_point: str = ""
    seasonal_relevance: Optional[str] = None
    risk_factors: List[str] = Field(default_factory=list)


class FlavorRecommendation(Schema):
    id: str
    name: str
    category: str
    target_segment: Brand
    confidence: int = 50                      # not clamped here; display concern
    rationale: str = ""
    supporting_quotes: List[str] = Field(default_factory=list)
    status: RecommendationStatus = "selected"
    rejection_reason: Optional[str] = None
    analysis: Optional[FlavorAnalysis] = None
    negative_feedback: Optional[List[str]] = None
    existing_comparison: Optional[str] = None
    promotion_opportunity: Optional[str] = None


class GoldenCandidate(Schema):
    recommendation: FlavorRecommendation      # by value, never a dangling id
    rank: int = 1
    total_mentions: int = 0
    sentiment_score: float = 0.0
    negative_mention_count: int = 0
    market_gap: str = ""
    competitive_advantage: str = ""


class FlavorMention(Schema):
    flavor: str
    count: int
    sentiment: Sentiment
    sources: List[str] = Field(default_factory=list)


class DataQuality(Schema):
    posts_analyzed: int = 0
    comments_analyzed: int = 0
    relevant_discussions: int = 0


class CacheInfo(Schema):
    used_cache: bool = False
    cache_age_seconds: int = 0
    total_api_fetches: int = 0
    is_fallback: bool = False
    fallback_reason: Optional[str] = None


class AnalysisResult(Schema):
    trend_keywords: List[TrendKeyword] = Field(default_factory=list)
    flavor_mentions: List[FlavorMention] = Field(default_factory=list)
    recommendations: List[FlavorRecommendation] = Field(default_factory=list)
    golden_candidate: Optional[GoldenCandidate] = None
    negative_mentions: List[NegativeMention] = Field(default_factory=list)
    raw_post_count: int = 0
    analyzed_at: str
    analysis_insights: Optional[str] = None
    data_quality: DataQuality = Field(default_factory=DataQuality)
    cache_info: CacheInfo = Field(default_factory=CacheInfo)


class ErrorBody(Schema):
    error: str
    message: str
    hint: Optional[str] = None
    missing_vars: Optional[List[str]] = None

    def to_json(self) -> dict:
        # Only the keys that apply to this failure kind
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

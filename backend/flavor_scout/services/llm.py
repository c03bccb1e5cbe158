"""
Flavor trend analysis through Groq's OpenAI-compatible chat completions API.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

from openai import APIError, AsyncOpenAI

from flavor_scout.config import (
    BRAND_PROFILES,
    GROQ_BASE_URL,
    MODEL_MAX_TOKENS,
    MODEL_TEMPERATURE,
    MODEL_TIMEOUT_SECONDS,
)
from flavor_scout.errors import ModelCallError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert product analyst for the Indian health and fitness market. "
    "Respond with valid JSON only: no markdown, no code fences, just raw JSON."
)


def _brand_lines() -> str:
    return "\n".join(
        f"- {name}: {profile['description']}; audience: {profile['target_audience']}; "
        f"style: {profile['flavor_style']}"
        for name, profile in BRAND_PROFILES.items()
    )


ANALYSIS_PROMPT = f"""You are a senior product analyst at HealthKart. Read the news below and find flavor opportunities for these brands:
{_brand_lines()}

Tasks:
1. trendKeywords: SPECIFIC flavor names that are trending (e.g. "Kesar Pista", "Masala Chai", "Salted Caramel"), never categories like "plant-based".
2. negativeMentions: real complaints about current flavors (sweetness, artificial taste, texture).
3. recommendations: at least 6, at least 2 per brand, each selected or rejected with a reason.
4. goldenCandidate: the single best opportunity, referencing a recommendation id.

Return JSON with exactly this shape:
{{
  "analysisInsights": "executive summary",
  "trendKeywords": [{{"text": "Flavor", "value": 15, "sentiment": "positive|negative|neutral", "context": "why"}}],
  "negativeMentions": [{{"flavor": "Flavor", "complaint": "complaint", "frequency": 5, "source": "where"}}],
  "recommendations": [{{
    "id": "rec-1", "flavorName": "Flavor", "productType": "e.g. Biozyme Whey",
    "targetBrand": "MuscleBlaze|HK Vitals|TrueBasics", "confidence": 85,
    "whyItWorks": "1-2 sentences", "supportingData": ["quote"], "status": "selected|rejected",
    "rejectionReason": "only if rejected", "existingComparison": "vs current flavors",
    "promotionOpportunity": "optional",
    "analysis": {{"marketDemand": "", "competitorGap": "", "consumerPainPoint": "", "seasonalRelevance": "", "riskFactors": [""]}},
    "negativeFeedback": ["complaint this addresses"]
  }}],
  "goldenCandidate": {{"recommendationId": "rec-1", "totalMentions": 25, "sentimentScore": 0.92,
    "negativeMentions": 8, "marketGap": "", "competitiveAdvantage": ""}},
  "dataQuality": {{"postsAnalyzed": 0, "commentsAnalyzed": 0, "relevantDiscussions": 0}}
}}

NEWS ARTICLES TO ANALYZE:

"""


def _strip_code_fences(s: str) -> str:
    s = s.strip()
    return re.sub(r"^```(?:json)?|```$", "", s, flags=re.IGNORECASE | re.MULTILINE).strip()


def decode_reply(content: Optional[str]) -> Any:
    """
    Decode the model's reply text into JSON.

    Raises:
        ModelCallError: The reply was empty or not JSON
    """
    if not content or not content.strip():
        raise ModelCallError("Empty response from model")
    try:
        return json.loads(_strip_code_fences(content))
    except json.JSONDecodeError as e:
        raise ModelCallError(f"Model returned invalid JSON: {e.msg}") from e


class GroqModelClient:
    """Single-shot chat completion client. Retries are disabled."""

    def __init__(self, api_key: str, model: str, client: Optional[AsyncOpenAI] = None):
        self.model = model
        self._client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=GROQ_BASE_URL,
            max_retries=0,
            timeout=MODEL_TIMEOUT_SECONDS,
        )

    async def complete(self, prompt_text: str) -> Any:
        """
        Send the prepared content to the model and decode its JSON reply.

        Args:
            prompt_text: Normalized content appended to the analysis prompt

        Returns:
            Decoded JSON of whatever shape the model produced

        Raises:
            ModelCallError: Transport/API failure, empty reply or non-JSON reply
        """
        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": ANALYSIS_PROMPT + prompt_text},
                ],
                temperature=MODEL_TEMPERATURE,
                max_tokens=MODEL_MAX_TOKENS,
                response_format={"type": "json_object"},
            )
        except APIError as e:
            raise ModelCallError(f"AI analysis failed: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        return decode_reply(content)

    async def aclose(self) -> None:
        """Release the underlying HTTP connection pool."""
        await self._client.close()

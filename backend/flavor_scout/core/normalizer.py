"""
Prompt text preparation: dedupe, rank and size-budget fetched content.
"""
from __future__ import annotations

import logging
from typing import Iterable, List

from flavor_scout.config import (
    EXCERPT_BODY_CHARS,
    ITEM_BODY_CHARS,
    MAX_INPUT_CHARS,
    MAX_PROMPT_EXCERPTS,
    MAX_PROMPT_ITEMS,
    PROMPT_SAFETY_MARGIN,
    TRUNCATION_MARKER,
)
from flavor_scout.models import ContentExcerpt, ContentItem
from flavor_scout.utils import truncate

logger = logging.getLogger(__name__)


def deduplicate_items(items: Iterable[ContentItem]) -> List[ContentItem]:
    """
    Remove duplicate items by origin key, keeping the first occurrence.

    Args:
        items: Iterable of ContentItem objects in input order

    Returns:
        List of unique ContentItem objects, input order preserved
    """
    seen_keys: set[str] = set()
    unique_items: List[ContentItem] = []

    for item in items:
        key = item.origin_key
        if key in seen_keys:
            continue
        seen_keys.add(key)
        unique_items.append(item)

    return unique_items


def has_usable_text(item: ContentItem) -> bool:
    """An item needs at least a title or a body to be worth analyzing."""
    return bool((item.title or "").strip() or (item.body or "").strip())


def rank_items(items: List[ContentItem], limit: int = MAX_PROMPT_ITEMS) -> List[ContentItem]:
    """
    Keep the most engaging items.

    The sort is stable, so items with equal engagement keep their input order.
    """
    ranked = sorted(items, key=lambda item: item.engagement_score, reverse=True)
    return ranked[:limit]


def format_item(item: ContentItem) -> str:
    return f"[{item.source_name}] {item.title}\n{truncate(item.body or '', ITEM_BODY_CHARS)}"


def format_excerpt(excerpt: ContentExcerpt) -> str:
    return f"[{excerpt.author_name}] {truncate(excerpt.body or '', EXCERPT_BODY_CHARS)}"


def normalize(
    items: List[ContentItem],
    excerpts: List[ContentExcerpt],
    char_budget: int = MAX_INPUT_CHARS,
) -> str:
    """
    Build the text block handed to the model.

    Items are deduplicated, filtered and ranked; excerpts are only included
    as a whole section when it fits under the budget minus the safety margin.
    The result never exceeds char_budget characters.

    Args:
        items: Fetched articles or posts
        excerpts: Supplementary text fragments
        char_budget: Maximum length of the returned string

    Returns:
        Prompt text, empty when there is nothing to analyze
    """
    if char_budget <= 0:
        return ""

    top_items = rank_items([item for item in deduplicate_items(items) if has_usable_text(item)])
    top_excerpts = [e for e in excerpts[:MAX_PROMPT_EXCERPTS] if (e.body or "").strip()]

    if not top_items and not top_excerpts:
        return ""

    item_texts = "\n\n".join(format_item(item) for item in top_items)
    result = f"=== NEWS HEADLINES & SUMMARIES ({len(top_items)} articles) ===\n{item_texts}"

    if top_excerpts:
        excerpt_texts = "\n\n".join(format_excerpt(e) for e in top_excerpts)
        excerpt_section = f"\n\n=== ARTICLE EXCERPTS ===\n{excerpt_texts}"
        if len(result) + len(excerpt_section) <= char_budget - PROMPT_SAFETY_MARGIN:
            result += excerpt_section
        else:
            logger.debug("Excerpt section omitted to stay within %d chars", char_budget)

    if len(result) > char_budget:
        keep = char_budget - len(TRUNCATION_MARKER)
        result = result[:keep] + TRUNCATION_MARKER if keep > 0 else result[:char_budget]

    logger.info(
        "Prepared %d chars for analysis (%d articles, %d excerpts)",
        len(result), len(top_items), len(top_excerpts),
    )
    return result

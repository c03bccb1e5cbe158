"""
Canned Reddit-style discussions served by /social when Reddit credentials are
not configured, so the dashboard can be demoed without an account.
"""
from __future__ import annotations

import time
from typing import List, Tuple

from flavor_scout.core.weighting import post_engagement_score
from flavor_scout.models import ContentExcerpt, ContentItem

DAY = 86400

_POSTS = [
    # (id, subreddit, author, title, body, upvotes, comments, age_days)
    ("demo1", "Supplements", "fitnessenthusiast",
     "Best protein powder flavors this year? Looking for something not too sweet",
     "Gold Standard chocolate is way too sweet for me. Thinking about dark chocolate or coffee.",
     156, 45, 1),
    ("demo2", "indianfitness", "desilifter",
     "Why doesn't anyone make a Masala Chai whey?",
     "We drink chai every day. A real masala chai protein with cardamom and ginger would sell out.",
     234, 67, 2),
    ("demo3", "fitness", "marathonrunner",
     "Watermelon electrolytes are a game changer",
     "Tried watermelon electrolytes on long runs. Far more refreshing than the artificial orange ones.",
     189, 34, 3),
    ("demo4", "indianfitness", "supplementgeek",
     "Kesar Pista protein, would you try it?",
     "Saffron pistachio is such a loved combo here and it would feel premium.",
     312, 89, 4),
    ("demo5", "fitness", "smoothie_king",
     "Mango lassi protein shake recipe",
     "Vanilla whey plus frozen mango plus curd. Wish there was a dedicated mango lassi flavor.",
     278, 41, 6),
    ("demo6", "indianfitness", "paan_lover",
     "Paan flavored BCAA: crazy idea or genius?",
     "Mint and fennel would be really refreshing intra-workout.",
     445, 112, 9),
]

_COMMENTS = [
    # (id, author, body, score, age_days)
    ("dc1", "gym_rat", "The dark chocolate variant I bought was still too sweet. Make it actually bitter.", 45, 1),
    ("dc2", "chai_lover", "Masala chai protein would be an instant buy, especially with real spices.", 89, 2),
    ("dc3", "indian_bodybuilder", "Kesar Pista is my favourite ice cream. A protein version would be unique.", 123, 2),
    ("dc4", "hydration_expert", "Watermelon tastes natural, unlike most fruit flavors.", 67, 3),
    ("dc5", "natural_athlete", "Most protein flavors are way too artificial. We need less sweet options.", 189, 8),
    ("dc6", "dessert_protein", "Coconut with a hint of cardamom would taste like a healthy kheer.", 112, 9),
]


def demo_content(now: float | None = None) -> Tuple[List[ContentItem], List[ContentExcerpt]]:
    """Build the demo posts and comments with timestamps relative to now."""
    now = time.time() if now is None else now
    posts = [
        ContentItem(
            id=post_id,
            title=title,
            body=body,
            source_name=f"r/{subreddit}",
            author_name=author,
            published_at_epoch_seconds=now - age * DAY,
            origin_url=f"https://www.reddit.com/r/{subreddit}/comments/{post_id}",
            engagement_score=post_engagement_score(upvotes, comments),
            comment_count=comments,
        )
        for post_id, subreddit, author, title, body, upvotes, comments, age in _POSTS
    ]
    comments = [
        ContentExcerpt(
            id=comment_id,
            body=body,
            author_name=author,
            published_at_epoch_seconds=now - age * DAY,
            engagement_score=score,
        )
        for comment_id, author, body, score, age in _COMMENTS
    ]
    return posts, comments

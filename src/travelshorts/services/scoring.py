"""Composite relevance scoring and ranking of judged candidates."""

import logging
import math
from datetime import datetime, timezone
from typing import List, Optional

from travelshorts.models.video import JudgedCandidate, RankedResult

logger = logging.getLogger(__name__)

TRAVEL_KEYWORDS = [
    'travel',
    'hotel',
    'food',
    'view',
    'amazing',
    'visit',
    'city',
    'guide',
    'trip',
    'vacation',
]

SPAM_TERMS = [
    'prank',
    'challenge',
    'reaction',
    'storytime',
    'grwm',
    'ootd',
    'unboxing',
    'haul',
    'tiktok',
    'meme',
    'compilation',
    'funny',
    'exposed',
    'drama',
    'tea',
    'gossip',
]

JUDGE_WEIGHT = 0.70
KEYWORD_WEIGHT = 0.15
ENGAGEMENT_WEIGHT = 0.15

POPULARITY_WEIGHT = 0.6
VELOCITY_WEIGHT = 0.2
RECENCY_WEIGHT = 0.2
RECENCY_DECAY_DAYS = 60.0

SPAM_MULTIPLIER = 0.3

DEFAULT_MAX_RESULTS = 12


def keyword_match(title: str) -> int:
    """1 if the title mentions any travel keyword, else 0."""
    title_lower = title.lower()
    return 1 if any(keyword in title_lower for keyword in TRAVEL_KEYWORDS) else 0


def spam_penalty(title: str, description: str) -> float:
    """0.3 if the title or description contains a spam term, else 1.0."""
    text = f"{title}\n{description}".lower()
    return SPAM_MULTIPLIER if any(term in text for term in SPAM_TERMS) else 1.0


def days_since_upload(published_at: Optional[datetime], now: datetime) -> Optional[float]:
    if published_at is None:
        return None
    if published_at.tzinfo is None:
        published_at = published_at.replace(tzinfo=timezone.utc)
    return max((now - published_at).total_seconds() / 86400.0, 0.0)


def engagement_score(views: int, days: Optional[float]) -> float:
    """Blend raw popularity, view velocity and upload recency into [0, 1].

    Args:
        views: Total view count
        days: Days since upload, or None when the upload date is unknown

    Returns:
        0.6 * popularity + 0.2 * velocity + 0.2 * recency
    """
    views = max(views, 0)
    popularity = min(math.log10(views + 1) / 7, 1.0)

    if days is None:
        velocity = 0.0
        recency = 0.0
    else:
        views_per_day = views / max(days, 1.0)
        velocity = min(math.log10(views_per_day + 1) / 5, 1.0)
        recency = min(math.exp(-days / RECENCY_DECAY_DAYS), 1.0)

    return POPULARITY_WEIGHT * popularity + VELOCITY_WEIGHT * velocity + RECENCY_WEIGHT * recency


def compose_score(judge_score: float, keyword: int, engagement: float, penalty: float) -> float:
    """Final score: (0.70 judge + 0.15 keyword + 0.15 engagement) * spam penalty."""
    return (
        JUDGE_WEIGHT * judge_score
        + KEYWORD_WEIGHT * keyword
        + ENGAGEMENT_WEIGHT * engagement
    ) * penalty


def score_candidate(judged: JudgedCandidate, now: Optional[datetime] = None) -> RankedResult:
    """Compute the composite score for one judged candidate."""
    now = now or datetime.now(timezone.utc)
    enriched = judged.enriched
    candidate = enriched.candidate

    keyword = keyword_match(candidate.title)
    penalty = spam_penalty(candidate.title, candidate.description)
    engagement = engagement_score(enriched.view_count, days_since_upload(enriched.published_at, now))
    final_score = compose_score(judged.judge_score, keyword, engagement, penalty)

    return RankedResult(
        id=candidate.video_id,
        title=candidate.title,
        thumbnail=candidate.thumbnail_url,
        channel_title=candidate.channel_title,
        view_count=enriched.view_count,
        duration=enriched.duration_seconds,
        channel_avatar_url=enriched.channel_avatar_url,
        relevance_score=final_score,
        relevance_reason=(
            f"Judge: {judged.judge_score:g}, Keyword: {keyword}, Views: {enriched.view_count}, "
            f"Engagement: {engagement:.2f}, Spam: {penalty:g}"
        ),
    )


def rank_candidates(
    judged: List[JudgedCandidate],
    limit: int = DEFAULT_MAX_RESULTS,
    now: Optional[datetime] = None,
) -> List[RankedResult]:
    """Score, sort descending and truncate.

    Equal scores keep their input order.
    """
    now = now or datetime.now(timezone.utc)
    results = [score_candidate(candidate, now) for candidate in judged]
    results.sort(key=lambda result: result.relevance_score, reverse=True)

    logger.debug(f"Ranked {len(results)} candidates, returning top {min(limit, len(results))}")
    return results[:limit]

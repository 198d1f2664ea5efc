"""Video-related data models."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class SearchCandidate:
    """Represents a YouTube search result, one per unique video."""

    video_id: str
    title: str
    description: str
    channel_id: str
    channel_title: str
    thumbnail_url: str
    published_at: Optional[datetime] = None


@dataclass
class VideoStats:
    """Statistics returned by the videos endpoint for one video."""

    view_count: int = 0
    duration_seconds: Optional[int] = None
    channel_id: Optional[str] = None
    published_at: Optional[datetime] = None


@dataclass
class EnrichedCandidate:
    """Search candidate with statistics and channel avatar attached."""

    candidate: SearchCandidate
    view_count: int = 0
    duration_seconds: Optional[int] = None  # absent when unparseable
    published_at: Optional[datetime] = None
    channel_avatar_url: Optional[str] = None

    @property
    def video_id(self) -> str:
        return self.candidate.video_id


@dataclass
class JudgedCandidate:
    """Enriched candidate with the relevance judge's score (0-1)."""

    enriched: EnrichedCandidate
    judge_score: float

    @property
    def video_id(self) -> str:
        return self.enriched.video_id


@dataclass(frozen=True)
class RankedResult:
    """Final ranked video handed to the UI layer."""

    id: str
    title: str
    thumbnail: str
    channel_title: str
    view_count: int
    duration: Optional[int]
    channel_avatar_url: Optional[str]
    relevance_score: float
    relevance_reason: str

    def to_dict(self) -> dict:
        """Convert to the camelCase shape consumed by the UI."""
        return {
            'id': self.id,
            'title': self.title,
            'thumbnail': self.thumbnail,
            'channelTitle': self.channel_title,
            'viewCount': self.view_count,
            'duration': self.duration,
            'channelAvatarUrl': self.channel_avatar_url,
            'relevanceScore': self.relevance_score,
            'relevanceReason': self.relevance_reason,
        }

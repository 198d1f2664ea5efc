"""YouTube Data API service for finding and enriching travel shorts."""

import logging
import re
from datetime import datetime
from typing import Dict, Iterable, List, Optional

import httplib2
from googleapiclient.discovery import build

from travelshorts.models.video import EnrichedCandidate, SearchCandidate, VideoStats

logger = logging.getLogger(__name__)

# Channel and video list endpoints accept at most 50 ids per request
MAX_IDS_PER_REQUEST = 50

SHORTS_QUALIFIER = "#shorts"

DURATION_PATTERN = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?")


def parse_duration(duration: Optional[str]) -> Optional[int]:
    """Convert an ISO 8601 duration token (PT1H2M10S) to seconds.

    Missing hour, minute or second parts count as zero. Returns None for an
    empty or unparseable token.
    """
    if not duration:
        return None

    match = DURATION_PATTERN.search(duration)
    if not match:
        return None

    hours, minutes, seconds = (int(part or 0) for part in match.groups())
    return hours * 3600 + minutes * 60 + seconds


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an RFC 3339 timestamp as returned by the API."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug(f"Unparseable timestamp: {value}")
        return None


def chunked(items: List[str], size: int) -> Iterable[List[str]]:
    """Yield consecutive slices of at most ``size`` items."""
    for start in range(0, len(items), size):
        yield items[start:start + size]


def dedupe_candidates(candidates: Iterable[SearchCandidate]) -> List[SearchCandidate]:
    """Keep one candidate per video id.

    A later occurrence replaces an earlier one; output order follows the
    first time each id was seen.
    """
    unique: Dict[str, SearchCandidate] = {}
    for candidate in candidates:
        unique[candidate.video_id] = candidate
    return list(unique.values())


def _pick_thumbnail(thumbnails: Dict, order=("high", "medium", "default")) -> Optional[str]:
    for size in order:
        url = (thumbnails.get(size) or {}).get("url")
        if url:
            return url
    return None


class YouTubeService:
    """Service for searching and enriching YouTube shorts via the Data API."""

    def __init__(
        self,
        api_key: str,
        results_per_query: int = 5,
        timeout_seconds: float = 10.0,
        resource=None,
    ):
        """Initialize YouTube Data API client.

        Args:
            api_key: YouTube Data API key
            results_per_query: Maximum results requested per search query
            timeout_seconds: Socket deadline applied to every request
            resource: Prebuilt API resource, mainly for tests
        """
        self.results_per_query = results_per_query
        self.timeout_seconds = timeout_seconds
        self.resource = resource or build(
            "youtube", "v3", developerKey=api_key, cache_discovery=False
        )

    def _execute(self, request) -> Dict:
        """Execute a request over a fresh connection with a deadline.

        A new ``httplib2.Http`` per call keeps requests independent of each
        other and aborts the call once the socket timeout elapses.
        """
        return request.execute(http=httplib2.Http(timeout=self.timeout_seconds))

    def search_shorts(self, query: str) -> List[SearchCandidate]:
        """Search for short-form videos matching one query."""
        request = self.resource.search().list(
            part="snippet",
            q=f"{query} {SHORTS_QUALIFIER}",
            type="video",
            videoDuration="short",
            maxResults=self.results_per_query,
        )
        response = self._execute(request)

        candidates = []
        for item in response.get("items", []):
            candidate = self._parse_search_item(item)
            if candidate:
                candidates.append(candidate)
        return candidates

    def retrieve_candidates(self, queries: List[str]) -> List[SearchCandidate]:
        """Run one search per query and concatenate the results.

        A failing query is logged and skipped; duplicates are kept.
        """
        all_candidates: List[SearchCandidate] = []
        for query in queries:
            try:
                results = self.search_shorts(query)
            except Exception as e:
                logger.warning(f"YouTube search failed for '{query}': {e}")
                continue

            logger.info(f"Found {len(results)} shorts for: '{query}'")
            all_candidates.extend(results)
        return all_candidates

    def fetch_video_stats(self, video_ids: List[str]) -> Dict[str, VideoStats]:
        """Bulk-fetch view counts, durations and channel ids.

        A failed request leaves its videos out of the returned map.
        """
        stats: Dict[str, VideoStats] = {}
        for chunk in chunked(video_ids, MAX_IDS_PER_REQUEST):
            request = self.resource.videos().list(
                part="statistics,contentDetails,snippet",
                id=",".join(chunk),
            )
            try:
                response = self._execute(request)
            except Exception as e:
                logger.warning(f"Failed to fetch stats for {len(chunk)} videos: {e}")
                continue

            for item in response.get("items", []):
                video_id = item.get("id")
                if video_id:
                    stats[video_id] = self._parse_stats_item(item)
        return stats

    def fetch_channel_avatars(self, channel_ids: List[str]) -> Dict[str, str]:
        """Bulk-fetch channel avatar URLs, 50 channels per request.

        Prefers the high-resolution thumbnail, then medium. A failed chunk is
        skipped and its channels have no avatar.
        """
        avatars: Dict[str, str] = {}
        for chunk in chunked(channel_ids, MAX_IDS_PER_REQUEST):
            request = self.resource.channels().list(part="snippet", id=",".join(chunk))
            try:
                response = self._execute(request)
            except Exception as e:
                logger.warning(f"Failed to fetch avatars for {len(chunk)} channels: {e}")
                continue

            for item in response.get("items", []):
                thumbnails = (item.get("snippet") or {}).get("thumbnails") or {}
                avatar = _pick_thumbnail(thumbnails, order=("high", "medium"))
                if item.get("id") and avatar:
                    avatars[item["id"]] = avatar
        return avatars

    def enrich(self, candidates: List[SearchCandidate]) -> List[EnrichedCandidate]:
        """Attach statistics and channel avatars to deduplicated candidates."""
        stats = self.fetch_video_stats([c.video_id for c in candidates])

        channel_ids = list(dict.fromkeys(s.channel_id for s in stats.values() if s.channel_id))
        avatars = self.fetch_channel_avatars(channel_ids) if channel_ids else {}

        enriched = []
        for candidate in candidates:
            video_stats = stats.get(candidate.video_id, VideoStats())
            enriched.append(
                EnrichedCandidate(
                    candidate=candidate,
                    view_count=video_stats.view_count,
                    duration_seconds=video_stats.duration_seconds,
                    published_at=video_stats.published_at or candidate.published_at,
                    channel_avatar_url=avatars.get(video_stats.channel_id or ""),
                )
            )

        logger.info(
            f"Enriched {len(enriched)} candidates: {len(stats)} with stats, "
            f"{len(avatars)} channel avatars"
        )
        return enriched

    def _parse_search_item(self, item: Dict) -> Optional[SearchCandidate]:
        """Parse a search result item into a SearchCandidate."""
        video_id = (item.get("id") or {}).get("videoId")
        if not video_id:
            return None

        snippet = item.get("snippet") or {}
        return SearchCandidate(
            video_id=video_id,
            title=snippet.get("title", ""),
            description=snippet.get("description", ""),
            channel_id=snippet.get("channelId", ""),
            channel_title=snippet.get("channelTitle", ""),
            thumbnail_url=_pick_thumbnail(snippet.get("thumbnails") or {}) or "",
            published_at=parse_timestamp(snippet.get("publishedAt")),
        )

    def _parse_stats_item(self, item: Dict) -> VideoStats:
        """Parse a videos.list item, defaulting anything missing."""
        statistics = item.get("statistics") or {}
        content_details = item.get("contentDetails") or {}
        snippet = item.get("snippet") or {}

        try:
            view_count = max(int(statistics.get("viewCount", 0)), 0)
        except (TypeError, ValueError):
            view_count = 0

        return VideoStats(
            view_count=view_count,
            duration_seconds=parse_duration(content_details.get("duration")),
            channel_id=snippet.get("channelId"),
            published_at=parse_timestamp(snippet.get("publishedAt")),
        )

"""Shared pytest fixtures and fakes for the travel-shorts test suite."""

import socket
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Dict, List, Optional

import pytest

from travelshorts.models.video import EnrichedCandidate, JudgedCandidate, SearchCandidate
from travelshorts.services.ai_service import AIService
from travelshorts.services.youtube_service import YouTubeService
from travelshorts.utils.cache import NullCache

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


# ============================================================================
# Fake Gemini client
# ============================================================================


class FakeModels:
    def __init__(self, responses: List):
        self.responses = list(responses)
        self.calls: List[Dict] = []

    def generate_content(self, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if not self.responses:
            raise RuntimeError("no scripted response left")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return SimpleNamespace(text=response)


class FakeGenAIClient:
    """Stands in for google.genai.Client; replies with scripted texts or errors."""

    def __init__(self, *responses):
        self.models = FakeModels(list(responses))


def make_ai_service(*responses, config: Optional[Dict] = None) -> AIService:
    client = FakeGenAIClient(*responses)
    return AIService("test-key", config=config or {}, client=client, sleep=lambda _: None)


# ============================================================================
# Fake YouTube Data API resource
# ============================================================================


class FakeRequest:
    def __init__(self, result):
        self.result = result

    def execute(self, http=None):
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


class FakeCollection:
    def __init__(self, handler, log: List[Dict]):
        self.handler = handler
        self.log = log

    def list(self, **kwargs):
        self.log.append(kwargs)
        return FakeRequest(self.handler(kwargs))


class FakeYouTubeResource:
    """Serves search, videos and channels endpoints from in-memory data.

    ``searches`` maps the bare query (without the shorts qualifier) to a list
    of search items or an exception to raise.
    """

    def __init__(
        self,
        searches: Dict,
        videos: Optional[Dict[str, Dict]] = None,
        channels: Optional[Dict[str, Dict]] = None,
        videos_error: Optional[Exception] = None,
        channels_error: Optional[Exception] = None,
    ):
        self.searches = searches
        self.videos_data = videos or {}
        self.channels_data = channels or {}
        self.videos_error = videos_error
        self.channels_error = channels_error
        self.search_calls: List[Dict] = []
        self.video_calls: List[Dict] = []
        self.channel_calls: List[Dict] = []

    def search(self):
        def handler(kwargs):
            query = kwargs["q"].replace(" #shorts", "")
            result = self.searches.get(query, [])
            if isinstance(result, Exception):
                return result
            return {"items": result}

        return FakeCollection(handler, self.search_calls)

    def videos(self):
        def handler(kwargs):
            if self.videos_error:
                return self.videos_error
            ids = kwargs["id"].split(",")
            return {"items": [self.videos_data[i] for i in ids if i in self.videos_data]}

        return FakeCollection(handler, self.video_calls)

    def channels(self):
        def handler(kwargs):
            if self.channels_error:
                return self.channels_error
            ids = kwargs["id"].split(",")
            return {"items": [self.channels_data[i] for i in ids if i in self.channels_data]}

        return FakeCollection(handler, self.channel_calls)


def search_item(video_id: str, title: str, channel_id: str = "UC1", description: str = "",
                published_at: str = "2026-10-01T00:00:00Z") -> Dict:
    return {
        "id": {"kind": "youtube#video", "videoId": video_id},
        "snippet": {
            "title": title,
            "description": description,
            "channelId": channel_id,
            "channelTitle": f"Channel {channel_id}",
            "publishedAt": published_at,
            "thumbnails": {
                "default": {"url": f"https://i.ytimg.com/vi/{video_id}/default.jpg"},
                "high": {"url": f"https://i.ytimg.com/vi/{video_id}/hqdefault.jpg"},
            },
        },
    }


def video_item(video_id: str, views: str = "1000", duration: str = "PT45S", channel_id: str = "UC1") -> Dict:
    return {
        "id": video_id,
        "statistics": {"viewCount": views},
        "contentDetails": {"duration": duration},
        "snippet": {"channelId": channel_id, "publishedAt": "2026-10-01T00:00:00Z"},
    }


def channel_item(channel_id: str, high: Optional[str] = None, medium: Optional[str] = None) -> Dict:
    thumbnails = {}
    if high:
        thumbnails["high"] = {"url": high}
    if medium:
        thumbnails["medium"] = {"url": medium}
    return {"id": channel_id, "snippet": {"thumbnails": thumbnails}}


def make_youtube_service(resource: FakeYouTubeResource) -> YouTubeService:
    return YouTubeService("test-key", results_per_query=5, timeout_seconds=10.0, resource=resource)


def search_timeout() -> Exception:
    return socket.timeout("timed out")


# ============================================================================
# Fake transcript service
# ============================================================================


class FakeTranscriptService:
    def __init__(self, transcripts: Optional[Dict[str, str]] = None):
        self.transcripts = transcripts or {}
        self.requested: List[str] = []

    async def fetch_transcript(self, video_id: str, on_settled=None) -> str:
        self.requested.append(video_id)
        if on_settled is not None:
            on_settled()
        return self.transcripts.get(video_id, "")


# ============================================================================
# Sample data
# ============================================================================


def make_judged(
    video_id: str,
    title: str = "Paris travel guide",
    judge_score: float = 0.5,
    views: int = 0,
    description: str = "",
    published_at: Optional[datetime] = None,
) -> JudgedCandidate:
    candidate = SearchCandidate(
        video_id=video_id,
        title=title,
        description=description,
        channel_id="UC1",
        channel_title="Channel UC1",
        thumbnail_url=f"https://i.ytimg.com/vi/{video_id}/hqdefault.jpg",
    )
    enriched = EnrichedCandidate(candidate=candidate, view_count=views, duration_seconds=30,
                                 published_at=published_at)
    return JudgedCandidate(enriched=enriched, judge_score=judge_score)


@pytest.fixture
def base_config() -> Dict:
    return {
        "youtube_api_key": "test-youtube-key",
        "gemini_api_key": "test-gemini-key",
        "max_expanded_queries": 5,
        "results_per_query": 5,
        "transcript_concurrency": 5,
        "transcript_max_chars": 1000,
        "max_results": 12,
        "pipeline_timeout_seconds": 30.0,
        "cache_enabled": False,
    }


@pytest.fixture
def null_cache() -> NullCache:
    return NullCache()


@pytest.fixture
def recent_upload() -> datetime:
    return NOW - timedelta(days=3)

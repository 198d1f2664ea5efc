"""Best-effort caption retrieval using youtube-transcript-api."""

import asyncio
import logging
from typing import Callable, Optional

import requests
from requests.adapters import HTTPAdapter
from youtube_transcript_api import YouTubeTranscriptApi

logger = logging.getLogger(__name__)


class TimeoutHTTPAdapter(HTTPAdapter):
    """Adapter that applies a default socket timeout to every request."""

    def __init__(self, timeout: float, *args, **kwargs):
        self.timeout = timeout
        super().__init__(*args, **kwargs)

    def send(self, request, **kwargs):
        if kwargs.get('timeout') is None:
            kwargs['timeout'] = self.timeout
        return super().send(request, **kwargs)


def build_http_session(timeout_seconds: float) -> requests.Session:
    """Create a requests session whose calls all carry ``timeout_seconds``."""
    session = requests.Session()
    adapter = TimeoutHTTPAdapter(timeout_seconds)
    session.mount('https://', adapter)
    session.mount('http://', adapter)
    return session


def _consume_result(worker: asyncio.Future) -> None:
    # Abandoned workers still settle; read the outcome so it is never reported as unhandled
    if not worker.cancelled():
        worker.exception()


class TranscriptService:
    """Service for fetching a video's caption text.

    Failures never propagate: a video without usable captions simply has an
    empty transcript.
    """

    def __init__(
        self,
        timeout_seconds: float = 8.0,
        api_factory: Optional[Callable[[], YouTubeTranscriptApi]] = None,
    ):
        self.timeout_seconds = timeout_seconds
        self._api_factory = api_factory or self._default_api

    def _default_api(self) -> YouTubeTranscriptApi:
        return YouTubeTranscriptApi(http_client=build_http_session(self.timeout_seconds))

    def _fetch_text(self, video_id: str) -> str:
        # One API instance per call so timed-out fetches never share a session
        transcript = self._api_factory().fetch(video_id)
        return " ".join(snippet.text for snippet in transcript).lower()

    async def fetch_transcript(
        self,
        video_id: str,
        on_settled: Optional[Callable[[], None]] = None,
    ) -> str:
        """Fetch the lowercased caption text for a video.

        Args:
            video_id: YouTube video ID
            on_settled: Called once the worker thread has finished, which can
                be after this coroutine already gave up on it

        Returns:
            Concatenated caption text, or an empty string on any failure
        """
        worker = asyncio.ensure_future(asyncio.to_thread(self._fetch_text, video_id))
        worker.add_done_callback(_consume_result)
        if on_settled is not None:
            worker.add_done_callback(lambda _: on_settled())

        try:
            return await asyncio.wait_for(asyncio.shield(worker), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.debug(f"Transcript fetch timed out for {video_id}")
        except Exception as e:
            logger.debug(f"Transcript unavailable for {video_id}: {e}")
        return ""

"""Pipeline orchestrator: expand, retrieve, enrich, judge and rank travel shorts."""

import asyncio
import logging
import time
from typing import Dict, List, Optional

from travelshorts.models.mock import mock_results
from travelshorts.models.video import RankedResult
from travelshorts.services.ai_service import AIService
from travelshorts.services.scoring import rank_candidates
from travelshorts.services.transcript_service import TranscriptService
from travelshorts.services.youtube_service import YouTubeService, dedupe_candidates
from travelshorts.utils.cache import ResultCache, build_cache
from travelshorts.utils.config import load_config, validate_config

logger = logging.getLogger(__name__)


class ShortsPipeline:
    """Central orchestrator for travel shorts discovery."""

    def __init__(
        self,
        config: Optional[Dict] = None,
        youtube_service: Optional[YouTubeService] = None,
        ai_service: Optional[AIService] = None,
        transcript_service: Optional[TranscriptService] = None,
        cache: Optional[ResultCache] = None,
    ):
        """Initialize the pipeline and any services not passed in.

        Without a YouTube service or YOUTUBE_API_KEY the pipeline runs in
        mock mode and returns the static fixture. The YouTube client is
        built on first search, inside the same guard as the rest of the run.
        """
        self.config = config or load_config()

        for warning in validate_config(self.config):
            logger.warning(warning)

        self.youtube_service = youtube_service

        self.ai_service = ai_service or AIService(
            self.config.get("gemini_api_key"),
            self.config.get("gemini_model", "gemini-2.0-flash-001"),
            config=self.config,
        )
        self.transcript_service = transcript_service or TranscriptService(
            timeout_seconds=self.config.get("transcript_timeout_seconds", 8.0)
        )
        self.cache = cache if cache is not None else build_cache(self.config)

        logger.info("Shorts pipeline initialized")

    async def search(self, query: str) -> List[RankedResult]:
        """Return up to ``max_results`` ranked shorts for a destination query.

        Never raises for upstream faults: they surface as fewer or no results.
        """
        if not query or not query.strip():
            return []

        if self.youtube_service is None and not self.config.get("youtube_api_key"):
            logger.warning("No YOUTUBE_API_KEY provided. Returning mock data.")
            return mock_results(query.strip())

        cached = self.cache.get(query)
        if cached is not None:
            logger.info(f"Returning cached results for: '{query}'")
            return cached

        start_time = time.time()
        try:
            results = await asyncio.wait_for(
                self._execute_pipeline(query),
                timeout=self.config.get("pipeline_timeout_seconds", 120.0),
            )
        except asyncio.TimeoutError:
            logger.error(f"Search timed out for '{query}'")
            return []
        except Exception as e:
            logger.error(f"Search failed for '{query}': {e}", exc_info=True)
            return []

        logger.info(f"Search for '{query}' returned {len(results)} results in {time.time() - start_time:.1f}s")
        self.cache.set(query, results)
        return results

    def _get_youtube_service(self) -> YouTubeService:
        if self.youtube_service is None:
            self.youtube_service = YouTubeService(
                self.config["youtube_api_key"],
                results_per_query=self.config.get("results_per_query", 5),
                timeout_seconds=self.config.get("search_timeout_seconds", 10.0),
            )
        return self.youtube_service

    async def _execute_pipeline(self, query: str) -> List[RankedResult]:
        """Execute the complete search pipeline for a query."""
        youtube_service = self._get_youtube_service()
        expanded_queries = await asyncio.to_thread(self.ai_service.expand_query, query)
        queries_to_run = expanded_queries[: self.config.get("max_expanded_queries", 5)]
        logger.info(f"Running {len(queries_to_run)} searches: {queries_to_run}")

        raw_candidates = await asyncio.to_thread(youtube_service.retrieve_candidates, queries_to_run)
        unique_candidates = dedupe_candidates(raw_candidates)
        logger.info(f"Collected {len(raw_candidates)} candidates, {len(unique_candidates)} unique")

        if not unique_candidates:
            return []

        enriched = await asyncio.to_thread(youtube_service.enrich, unique_candidates)

        transcripts = await self.fetch_transcripts([c.video_id for c in enriched])

        judged = await asyncio.to_thread(self.ai_service.judge_candidates, query, enriched, transcripts)

        return rank_candidates(judged, limit=self.config.get("max_results", 12))

    async def fetch_transcripts(self, video_ids: List[str]) -> Dict[str, str]:
        """Fetch transcripts with at most ``transcript_concurrency`` in flight."""
        semaphore = asyncio.Semaphore(self.config.get("transcript_concurrency", 5))

        async def fetch_one(video_id: str) -> str:
            # The permit comes back when the worker thread finishes, not when
            # the wait times out, so abandoned fetches still count against the cap
            await semaphore.acquire()
            return await self.transcript_service.fetch_transcript(video_id, on_settled=semaphore.release)

        texts = await asyncio.gather(*(fetch_one(video_id) for video_id in video_ids))

        found = sum(1 for text in texts if text)
        logger.info(f"Fetched transcripts for {found} of {len(video_ids)} videos")
        return dict(zip(video_ids, texts))


_default_pipeline: Optional[ShortsPipeline] = None


def get_pipeline() -> ShortsPipeline:
    """Return the process-wide pipeline built from environment configuration."""
    global _default_pipeline
    if _default_pipeline is None:
        _default_pipeline = ShortsPipeline()
    return _default_pipeline


async def search_travel_shorts(query: str, pipeline: Optional[ShortsPipeline] = None) -> List[RankedResult]:
    """Search travel shorts for a destination query."""
    return await (pipeline or get_pipeline()).search(query)

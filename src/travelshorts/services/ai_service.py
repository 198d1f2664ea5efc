"""AI service for query expansion and relevance judging using Google GenAI."""

import logging
import time
from typing import Callable, Dict, List, Optional, Tuple

from google.genai import Client
from google.genai import errors
from google.genai import types

from travelshorts.models.video import EnrichedCandidate, JudgedCandidate
from travelshorts.utils.json_extract import Malformed, extract_json
from travelshorts.utils.retry import (
    APIRateLimitError,
    NetworkError,
    TemporaryServiceError,
    retry_api_call,
)

logger = logging.getLogger(__name__)

MAX_EXPANDED_QUERIES = 10
DEFAULT_JUDGE_SCORE = 0.5

EXPANSION_PROMPT = """You are a JSON API that generates YouTube search queries. You ONLY respond with valid JSON, no explanations or markdown.

Task: Generate 10 alternative YouTube search queries for travel shorts about "{query}".

Requirements:
- ALL queries MUST include the location "{query}" or be directly about {query}
- Queries must be useful for YouTube search
- Keep queries short: 3-6 words each
- Focus on travel content specific to {query}: itineraries, places, food, guides, vlogs
- Example good queries: "{query} travel guide", "best places {query}", "{query} food tour", "things to do {query}"
- DO NOT generate generic queries without the location

Respond with ONLY this exact JSON structure, nothing else:
{{"queries": ["query1", "query2", "query3", "query4", "query5", "query6", "query7", "query8", "query9", "query10"]}}"""

JUDGE_PROMPT = """You are a JSON API that scores video relevance. You ONLY respond with valid JSON, no explanations or markdown.

Task: Score each video's travel relevance to the query "{query}".

Scoring Examples:
- "3 Days in Paris Itinerary | Best Places" -> 1.0 (itinerary for Paris, helpful for planning)
- "What I Ate in Tokyo | Street Food Tour" -> 1.0 (food travel guide for Tokyo)
- "Best Hotels in Bali | Where to Stay" -> 0.9 (accommodation guide for Bali)
- "Paris Cafe Aesthetic | Vlog Vibes" -> 0.5 (lifestyle content about Paris, partial travel)
- "I Got LOST in Paris | Storytime" -> 0.3 (entertainment about Paris, not useful)
- "Indian Street Food in Delhi #shorts" when query is "Paris" -> 0.0 (WRONG LOCATION, not about Paris at all)
- "Tokyo Ramen Tour" when query is "Paris" -> 0.0 (WRONG LOCATION, about Tokyo, not Paris)
- "Paris Meme Compilation" -> 0.0 (not travel content)

CRITICAL RULE - Geographic Relevance:
- If the video is clearly about a DIFFERENT location than "{query}", score it 0.0
- The video MUST be about "{query}" or directly related to traveling to/in "{query}"
- Check video title, description, and transcript for location mentions
- A video about "Indian food" is NOT relevant for "Paris" unless it's "Indian food IN Paris"

Scoring:
- 1.0 = highly relevant to {query} (itinerary, places, food guide, travel tips for {query})
- 0.5 = partially relevant to {query} (vibes, lifestyle, tangential travel content about {query})
- 0.0 = not relevant (pranks, memes, pure entertainment, OR WRONG GEOGRAPHIC LOCATION)

Videos:
{videos}

Respond with ONLY this exact JSON structure, nothing else:
{{"scores": [{{"id": "VIDEO_ID", "score": SCORE}}, ...]}}"""


def compose_video_text(enriched: EnrichedCandidate, transcript: str, max_transcript_chars: int = 1000) -> str:
    """Build the text blob the judge sees for one video."""
    candidate = enriched.candidate
    return (
        f"Title: {candidate.title}\n"
        f"Description: {candidate.description}\n"
        f"Transcript: {transcript[:max_transcript_chars]}"
    ).strip()


def _coerce_score(value) -> Optional[float]:
    """Return a score clamped into [0, 1], or None if it is not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return None
    if not isinstance(value, (int, float)) or value != value:
        return None
    return min(max(float(value), 0.0), 1.0)


def _classify_provider_error(error: Exception) -> Exception:
    """Map a provider failure to a retryable error where a retry can help."""
    if isinstance(error, errors.APIError):
        code = getattr(error, "code", None) or 0
        if code == 429:
            return APIRateLimitError(f"Rate limit hit: {error}")
        if code >= 500:
            return TemporaryServiceError(f"Gemini unavailable: {error}")
        return error

    message = str(error).lower()
    if isinstance(error, (TimeoutError, ConnectionError)) or any(
        marker in message for marker in ("timeout", "timed out", "network", "connection")
    ):
        return NetworkError(f"Network error: {error}")
    return error


class AIService:
    """Service for query expansion and batch relevance judging using Gemini."""

    def __init__(
        self,
        api_key: Optional[str],
        model_name: str = "gemini-2.0-flash-001",
        config: Optional[Dict] = None,
        client=None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize Google GenAI client.

        Args:
            api_key: Google GenAI API key; without one every call falls back
            model_name: Gemini model to use
            config: Loaded configuration with temperatures, token limits,
                timeouts and retry settings
            client: Prebuilt client, mainly for tests
            sleep: Sleep function used between retries
        """
        settings = config or {}
        self.model_name = model_name
        self.client = client or (Client(api_key=api_key) if api_key else None)

        self.expansion_temperature = settings.get("expansion_temperature", 0.2)
        self.expansion_max_tokens = settings.get("expansion_max_tokens", 300)
        self.expansion_timeout = settings.get("expansion_timeout_seconds", 30.0)
        self.judge_temperature = settings.get("judge_temperature", 0.0)
        self.judge_max_tokens = settings.get("judge_max_tokens", 600)
        self.judge_timeout = settings.get("judge_timeout_seconds", 60.0)
        self.transcript_max_chars = settings.get("transcript_max_chars", 1000)

        self._generate = retry_api_call(
            max_attempts=settings.get("retry_max_attempts", 3),
            base_delay=settings.get("retry_base_delay", 2.0),
            max_delay=settings.get("retry_max_delay", 10.0),
            sleep=sleep,
        )(self._generate_once)

        if self.client is None:
            logger.warning("No Gemini API key configured; AI calls will use fallbacks")
        else:
            logger.info(f"Initialized AI service with model: {model_name}")

    def _generate_once(self, prompt: str, temperature: float, max_tokens: int, timeout_seconds: float) -> str:
        try:
            response = self.client.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config=types.GenerateContentConfig(
                    temperature=temperature,
                    max_output_tokens=max_tokens,
                    http_options=types.HttpOptions(timeout=int(timeout_seconds * 1000)),
                ),
            )
        except Exception as e:
            mapped = _classify_provider_error(e)
            if mapped is e:
                raise
            raise mapped from e
        return response.text or ""

    def expand_query(self, query: str) -> List[str]:
        """Expand a destination query into related search phrases.

        Never raises: every failure resolves to ``[query]``.

        Args:
            query: Raw user query

        Returns:
            Between 1 and 10 search phrases
        """
        if not query or not query.strip():
            return [query]
        if self.client is None:
            return [query]

        try:
            text = self._generate(
                EXPANSION_PROMPT.format(query=query.strip()),
                self.expansion_temperature,
                self.expansion_max_tokens,
                self.expansion_timeout,
            )
        except Exception as e:
            logger.warning(f"Query expansion failed, using original query: {e}")
            return [query]

        result = extract_json(text)
        if isinstance(result, Malformed):
            logger.warning(f"Failed to parse query expansion response ({result.reason}), using original query")
            logger.debug(f"Raw AI response: {text}")
            return [query]

        parsed = result.value
        if isinstance(parsed, dict):
            parsed = parsed.get("queries")
        if not isinstance(parsed, list):
            logger.warning(f"Unexpected query expansion structure: {result.value}")
            return [query]

        queries = [q.strip() for q in parsed if isinstance(q, str) and q.strip()]
        if not queries:
            return [query]

        final_queries = queries[:MAX_EXPANDED_QUERIES]
        logger.info(f"Expanded '{query}' into {len(final_queries)} queries")
        return final_queries

    def score_batch(self, query: str, videos: List[Tuple[str, str]]) -> List[Tuple[str, float]]:
        """Score every video's relevance to the query in one request.

        Every submitted id gets exactly one score, in input order. Ids the
        response omits, or whose score is not numeric, get 0.5; a failed or
        unparseable response gives every video 0.5.

        Args:
            query: The user's destination query
            videos: (video_id, text) pairs

        Returns:
            (video_id, score) pairs with scores in [0, 1]
        """
        if not videos:
            return []

        def defaults() -> List[Tuple[str, float]]:
            return [(video_id, DEFAULT_JUDGE_SCORE) for video_id, _ in videos]

        if self.client is None:
            return defaults()

        videos_text = "\n---\n".join(f"ID: {video_id}\nContent: {text}" for video_id, text in videos)

        try:
            text = self._generate(
                JUDGE_PROMPT.format(query=query.strip(), videos=videos_text),
                self.judge_temperature,
                self.judge_max_tokens,
                self.judge_timeout,
            )
        except Exception as e:
            logger.warning(f"Relevance judging failed for '{query}', using default scores: {e}")
            return defaults()

        result = extract_json(text)
        if isinstance(result, Malformed):
            logger.warning(f"Failed to parse relevance response ({result.reason}), using default scores")
            logger.debug(f"Raw AI response: {text}")
            return defaults()

        entries = result.value
        if isinstance(entries, dict):
            entries = entries.get("scores")
        if not isinstance(entries, list):
            logger.warning(f"Unexpected relevance response structure: {result.value}")
            return defaults()

        score_map: Dict[str, float] = {}
        for entry in entries:
            if not isinstance(entry, dict) or "id" not in entry or "score" not in entry:
                continue
            score = _coerce_score(entry["score"])
            if score is not None:
                score_map[str(entry["id"])] = score

        missing = sum(1 for video_id, _ in videos if video_id not in score_map)
        if missing:
            logger.warning(f"Judge response omitted {missing} of {len(videos)} videos; defaulting to {DEFAULT_JUDGE_SCORE}")

        return [(video_id, score_map.get(video_id, DEFAULT_JUDGE_SCORE)) for video_id, _ in videos]

    def judge_candidates(
        self,
        query: str,
        candidates: List[EnrichedCandidate],
        transcripts: Dict[str, str],
    ) -> List[JudgedCandidate]:
        """Attach a judge score to every enriched candidate."""
        videos = [
            (c.video_id, compose_video_text(c, transcripts.get(c.video_id, ""), self.transcript_max_chars))
            for c in candidates
        ]
        scores = self.score_batch(query, videos)
        return [
            JudgedCandidate(enriched=candidate, judge_score=score)
            for candidate, (_, score) in zip(candidates, scores)
        ]

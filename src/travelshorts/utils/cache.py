"""Result cache keyed by the literal query string."""

import time
import logging
from typing import Callable, Dict, List, Optional, Protocol, Tuple

from travelshorts.models.video import RankedResult

logger = logging.getLogger(__name__)


class ResultCache(Protocol):
    """Port the pipeline uses to memoize ranked results."""

    def get(self, query: str) -> Optional[List[RankedResult]]:
        ...

    def set(self, query: str, results: List[RankedResult]) -> None:
        ...


class NullCache:
    """Cache that never stores anything."""

    def get(self, query: str) -> Optional[List[RankedResult]]:
        return None

    def set(self, query: str, results: List[RankedResult]) -> None:
        pass


class TTLResultCache:
    """In-memory cache whose entries expire after a rolling window."""

    def __init__(self, ttl_seconds: float = 3600.0, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[float, List[RankedResult]]] = {}

    def get(self, query: str) -> Optional[List[RankedResult]]:
        entry = self._entries.get(query)
        if entry is None:
            return None

        stored_at, results = entry
        if self._clock() - stored_at >= self.ttl_seconds:
            del self._entries[query]
            return None

        logger.debug(f"Cache hit for query: '{query}'")
        return list(results)

    def set(self, query: str, results: List[RankedResult]) -> None:
        now = self._clock()
        self._purge_expired(now)
        self._entries[query] = (now, list(results))

    def _purge_expired(self, now: float) -> None:
        expired = [q for q, (stored_at, _) in self._entries.items() if now - stored_at >= self.ttl_seconds]
        for query in expired:
            del self._entries[query]

    def __len__(self) -> int:
        return len(self._entries)


def build_cache(config: Dict) -> ResultCache:
    """Select the cache implementation from configuration."""
    if config.get('cache_enabled'):
        return TTLResultCache(config.get('cache_ttl_seconds', 3600.0))
    return NullCache()

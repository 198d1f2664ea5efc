"""Discover and rank short-form travel videos for a destination query."""

from travelshorts.models.video import RankedResult
from travelshorts.shorts_pipeline import ShortsPipeline, search_travel_shorts

__all__ = ["RankedResult", "ShortsPipeline", "search_travel_shorts"]

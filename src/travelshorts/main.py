"""Command-line entry point for travel-shorts."""

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from travelshorts.models.video import RankedResult
from travelshorts.shorts_pipeline import ShortsPipeline
from travelshorts.utils.config import load_config, setup_logging

logger = logging.getLogger(__name__)


def _format_duration(seconds: Optional[int]) -> str:
    if seconds is None:
        return "-"
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}:{secs:02d}"


def render_table(query: str, results: List[RankedResult]) -> Table:
    """Build a Rich table of ranked results."""
    table = Table(title=f"Travel shorts for '{query}'")
    table.add_column("#", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Title")
    table.add_column("Channel")
    table.add_column("Views", justify="right")
    table.add_column("Length", justify="right")
    table.add_column("URL")

    for position, result in enumerate(results, start=1):
        table.add_row(
            str(position),
            f"{result.relevance_score:.3f}",
            result.title,
            result.channel_title,
            f"{result.view_count:,}",
            _format_duration(result.duration),
            f"https://www.youtube.com/shorts/{result.id}",
        )
    return table


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="travel-shorts",
        description="Find and rank short travel videos for a destination.",
    )
    parser.add_argument("query", nargs="+", help="Destination to search for")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    query = " ".join(args.query)

    config = load_config()
    setup_logging(config.get("log_level", "INFO"))

    try:
        results = asyncio.run(ShortsPipeline(config).search(query))
    except KeyboardInterrupt:
        logger.info("Search interrupted by user")
        return 130

    if args.json:
        print(json.dumps([result.to_dict() for result in results], indent=2))
    elif results:
        Console().print(render_table(query, results))
    else:
        Console().print(f"No travel shorts found for '{query}'")
    return 0


if __name__ == "__main__":
    sys.exit(main())

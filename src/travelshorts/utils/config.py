"""Configuration loading and validation for travel-shorts."""

import os
import logging
from typing import Dict, List
from pathlib import Path
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

# Project root directory (parent of src)
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent

load_dotenv(PROJECT_ROOT / '.env')


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def load_config() -> Dict:
    """Load configuration from environment variables."""
    app_env = os.getenv('APP_ENV', 'production').lower()

    config = {
        # API keys (both optional: missing YouTube key switches to mock data)
        'youtube_api_key': os.getenv('YOUTUBE_API_KEY'),
        'gemini_api_key': os.getenv('GEMINI_API_KEY'),

        # Text generation
        'gemini_model': os.getenv('GEMINI_MODEL', 'gemini-2.0-flash-001'),
        'expansion_temperature': float(os.getenv('EXPANSION_TEMPERATURE', '0.2')),
        'expansion_max_tokens': int(os.getenv('EXPANSION_MAX_TOKENS', '300')),
        'expansion_timeout_seconds': float(os.getenv('EXPANSION_TIMEOUT_SECONDS', '30')),
        'judge_temperature': float(os.getenv('JUDGE_TEMPERATURE', '0')),
        'judge_max_tokens': int(os.getenv('JUDGE_MAX_TOKENS', '600')),
        'judge_timeout_seconds': float(os.getenv('JUDGE_TIMEOUT_SECONDS', '60')),
        'retry_max_attempts': int(os.getenv('RETRY_MAX_ATTEMPTS', '3')),
        'retry_base_delay': float(os.getenv('RETRY_BASE_DELAY', '2')),
        'retry_max_delay': float(os.getenv('RETRY_MAX_DELAY', '10')),

        # Retrieval
        'max_expanded_queries': int(os.getenv('MAX_EXPANDED_QUERIES', '5')),
        'results_per_query': int(os.getenv('RESULTS_PER_QUERY', '5')),
        'search_timeout_seconds': float(os.getenv('SEARCH_TIMEOUT_SECONDS', '10')),

        # Transcripts
        'transcript_timeout_seconds': float(os.getenv('TRANSCRIPT_TIMEOUT_SECONDS', '8')),
        'transcript_concurrency': int(os.getenv('TRANSCRIPT_CONCURRENCY', '5')),
        'transcript_max_chars': int(os.getenv('TRANSCRIPT_MAX_CHARS', '1000')),

        # Ranking and pipeline
        'max_results': int(os.getenv('MAX_RESULTS', '12')),
        'pipeline_timeout_seconds': float(os.getenv('PIPELINE_TIMEOUT_SECONDS', '120')),

        # Result cache (disabled by default in development)
        'cache_enabled': _env_bool('CACHE_ENABLED', app_env != 'development'),
        'cache_ttl_seconds': float(os.getenv('CACHE_TTL_SECONDS', '3600')),

        'log_level': os.getenv('LOG_LEVEL', 'INFO'),
    }

    return config


def validate_config(config: Dict) -> List[str]:
    """Validate configuration and return a list of warnings.

    Nothing here is fatal: missing credentials degrade the pipeline instead
    of stopping it.
    """
    warnings = []

    if not config.get('youtube_api_key'):
        warnings.append("YOUTUBE_API_KEY is not set; searches return mock data")

    if not config.get('gemini_api_key'):
        warnings.append(
            "GEMINI_API_KEY is not set; query expansion and relevance judging fall back to defaults"
        )

    positive_keys = [
        'max_expanded_queries',
        'results_per_query',
        'search_timeout_seconds',
        'transcript_timeout_seconds',
        'transcript_concurrency',
        'max_results',
        'retry_max_attempts',
    ]
    for key in positive_keys:
        value = config.get(key)
        if value is not None and value <= 0:
            warnings.append(f"{key} must be positive, got {value}")

    return warnings


def setup_logging(log_level: str = "INFO") -> None:
    """Set up logging configuration with Rich for terminal output."""
    logging.root.handlers.clear()

    rich_handler = RichHandler(
        show_time=True,
        show_level=True,
        show_path=False,
        rich_tracebacks=True,
        markup=False,
        console=Console(stderr=True),
    )

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        handlers=[rich_handler],
        format="%(message)s"
    )

    # Suppress noisy third-party loggers
    noisy_loggers = [
        'httpx',
        'google_genai',
        'google_genai.models',
        'googleapiclient.discovery_cache',
        'googleapiclient.discovery',
        'urllib3.connectionpool',
    ]

    for logger_name in noisy_loggers:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

"""Retry logic and exponential backoff for text-generation calls."""

import time
import random
import logging
from functools import wraps
from typing import Callable, Any

logger = logging.getLogger(__name__)


def exponential_backoff(attempt: int, base_delay: float = 2.0, max_delay: float = 10.0) -> float:
    """Calculate exponential backoff delay with jitter, never above max_delay."""
    delay = min(base_delay * (2 ** attempt), max_delay)
    jitter = random.uniform(0, delay * 0.1)
    return min(delay + jitter, max_delay)


class RetryableError(Exception):
    """Base class for errors that should trigger retries."""
    pass


class APIRateLimitError(RetryableError):
    """Raised when API rate limit is hit."""
    pass


class NetworkError(RetryableError):
    """Raised for network-related errors."""
    pass


class TemporaryServiceError(RetryableError):
    """Raised for temporary service unavailability."""
    pass


def retry_with_backoff(
    max_attempts: int = 3,
    base_delay: float = 2.0,
    max_delay: float = 10.0,
    exceptions: tuple = (RetryableError,),
    sleep: Callable[[float], None] = time.sleep,
):
    """Decorator for exponential backoff retry logic.

    Args:
        max_attempts: Total number of calls, including the first one
        base_delay: Delay before the second attempt, doubled afterwards
        max_delay: Ceiling for any single delay
        exceptions: Exception types that trigger another attempt
        sleep: Sleep function, replaceable in tests
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            for attempt in range(max_attempts):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    if attempt == max_attempts - 1:
                        logger.error(f"Function {func.__name__} failed after {max_attempts} attempts: {e}")
                        raise

                    delay = exponential_backoff(attempt, base_delay, max_delay)
                    logger.warning(
                        f"Attempt {attempt + 1} of {func.__name__} failed: {e}. "
                        f"Retrying in {delay:.2f}s..."
                    )
                    sleep(delay)

        return wrapper
    return decorator



def retry_api_call(
    max_attempts: int = 3,
    base_delay: float = 2.0,
    max_delay: float = 10.0,
    sleep: Callable[[float], None] = time.sleep,
):
    """Retry decorator for text-generation API calls."""
    return retry_with_backoff(
        max_attempts=max_attempts,
        base_delay=base_delay,
        max_delay=max_delay,
        exceptions=(APIRateLimitError, NetworkError, TemporaryServiceError),
        sleep=sleep,
    )

"""
Retry decorators with exponential backoff using tenacity.

Provides pre-configured retry decorators for remote data sources.
"""

import logging
from typing import Callable, Tuple, Type, TypeVar

import requests
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

# Type variable for generic function decoration
F = TypeVar("F", bound=Callable)

DEFAULT_RETRY_EXCEPTIONS: Tuple[Type[Exception], ...] = (
    requests.exceptions.Timeout,
    requests.exceptions.ConnectionError,
)


def is_retryable_error(exception: BaseException) -> bool:
    """Network failures, rate limiting (429) and server errors (5xx) are retried."""
    if isinstance(exception, requests.HTTPError):
        response = exception.response
        return response is not None and (
            response.status_code == 429 or response.status_code >= 500
        )
    return isinstance(exception, DEFAULT_RETRY_EXCEPTIONS)


def create_retry_decorator(
    max_attempts: int = 5,
    min_wait: float = 1.0,
    max_wait: float = 60.0,
    predicate: Callable[[BaseException], bool] = is_retryable_error,
) -> Callable[[F], F]:
    """
    Create a retry decorator with exponential backoff.

    Args:
        max_attempts: Maximum number of retry attempts
        min_wait: Minimum wait time between retries (seconds)
        max_wait: Maximum wait time between retries (seconds)
        predicate: Returns True for exceptions worth another attempt

    Returns:
        Decorator function
    """
    return retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=1, min=min_wait, max=max_wait),
        retry=retry_if_exception(predicate),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )


# BoM climate data - 3 attempts, 2-30s exponential backoff
bom_retry = create_retry_decorator(
    max_attempts=3,
    min_wait=2.0,
    max_wait=30.0,
)

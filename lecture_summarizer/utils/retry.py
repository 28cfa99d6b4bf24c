"""
Retry helper for rate-limited calls to the generative AI service.
"""

from typing import Callable, Optional, TypeVar

from retry.api import retry_call

from lecture_summarizer.utils.logger import logging

T = TypeVar("T")

RATE_LIMIT_MARKERS = ("429", "Resource has been exhausted", "quota")


class RateLimitExceeded(Exception):
    """Wraps a rate limit error so only those are retried."""

    def __init__(self, error: Exception):
        super().__init__(str(error))
        self.error = error


def is_rate_limit_error(error: Exception) -> bool:
    """Return True if the error looks like a 429 / quota error."""
    for attr in ("code", "status", "status_code"):
        if getattr(error, attr, None) == 429:
            return True

    message = str(error)
    return any(marker in message for marker in RATE_LIMIT_MARKERS)


def retry_with_exponential_backoff(
    fn: Callable[[], T],
    max_retries: int = 3,
    on_retry: Optional[Callable[[int, int], None]] = None,
) -> T:
    """
    Call ``fn`` and retry it on rate limit errors.

    Waits 1s, 2s, 4s, ... between attempts. Any other error is raised
    immediately, and the last rate limit error is raised once the attempts
    are used up.

    Args:
        fn: Zero-argument callable to invoke
        max_retries: Total number of attempts
        on_retry: Called with (attempt number, wait seconds) before waiting

    Returns:
        The value returned by ``fn``
    """
    attempts = {"count": 0}

    def attempt() -> T:
        attempts["count"] += 1
        try:
            return fn()
        except Exception as error:
            if not is_rate_limit_error(error):
                raise
            if on_retry and attempts["count"] < max_retries:
                on_retry(attempts["count"], 2 ** (attempts["count"] - 1))
            raise RateLimitExceeded(error) from error

    try:
        return retry_call(
            attempt,
            exceptions=RateLimitExceeded,
            tries=max_retries,
            delay=1,
            backoff=2,
            logger=logging,
        )
    except RateLimitExceeded as e:
        raise e.error

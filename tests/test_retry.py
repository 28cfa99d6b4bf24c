"""
Tests for the rate limit retry helper.
"""

import pytest
from unittest.mock import MagicMock

from lecture_summarizer.utils.retry import is_rate_limit_error, retry_with_exponential_backoff


class RateLimited(Exception):
    code = 429


def test_is_rate_limit_error_by_code():
    assert is_rate_limit_error(RateLimited("slow down"))


@pytest.mark.parametrize("message", [
    "429 Too Many Requests",
    "Resource has been exhausted (e.g. check quota).",
    "You exceeded your current quota",
])
def test_is_rate_limit_error_by_message(message):
    assert is_rate_limit_error(Exception(message))


def test_other_errors_are_not_rate_limits():
    assert not is_rate_limit_error(ValueError("invalid argument"))


def test_returns_first_success(retry_sleeps):
    fn = MagicMock(return_value="ok")

    assert retry_with_exponential_backoff(fn) == "ok"
    fn.assert_called_once()
    assert retry_sleeps == []


def test_waits_1_then_2_seconds(retry_sleeps):
    """Two rate limit errors, then success on the third attempt."""
    fn = MagicMock(side_effect=[RateLimited("429"), RateLimited("429"), "summary"])
    on_retry = MagicMock()

    result = retry_with_exponential_backoff(fn, max_retries=3, on_retry=on_retry)

    assert result == "summary"
    assert fn.call_count == 3
    assert retry_sleeps == [1, 2]
    on_retry.assert_any_call(1, 1)
    on_retry.assert_any_call(2, 2)


def test_raises_last_rate_limit_error_after_max_retries(retry_sleeps):
    fn = MagicMock(side_effect=RateLimited("429"))

    with pytest.raises(RateLimited):
        retry_with_exponential_backoff(fn, max_retries=3)

    assert fn.call_count == 3
    assert retry_sleeps == [1, 2]


def test_non_rate_limit_error_is_not_retried(retry_sleeps):
    fn = MagicMock(side_effect=ValueError("bad request"))

    with pytest.raises(ValueError):
        retry_with_exponential_backoff(fn)

    fn.assert_called_once()
    assert retry_sleeps == []

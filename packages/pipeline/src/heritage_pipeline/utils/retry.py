"""
utils/retry.py — Transport-level retry for portal HTTP requests.

data.gov.tw and data.taipei drop connections and time out often enough that a
single attempt is not sufficient. Only httpx.TransportError (connect/read
timeouts, resets) is retried; an HTTP response of any status is returned to
the caller untouched so it can be reported as "Failed to fetch ...: <status>".

Usage:
    from heritage_pipeline.utils.retry import transport_retry

    get = transport_retry(max_attempts=3, base_delay=1.0)(client.get)
    response = await get(url, params={"limit": 1000})
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TypeVar

import httpx
import structlog
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

log = structlog.get_logger(__name__)

T = TypeVar("T")

RETRYABLE_ERRORS: tuple[type[Exception], ...] = (httpx.TransportError,)


def _log_before_sleep(state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome else None
    log.warning(
        "http_retry",
        function=getattr(state.fn, "__qualname__", repr(state.fn)),
        attempt=state.attempt_number,
        wait_s=round(state.next_action.sleep, 2) if state.next_action else None,
        error=f"{type(exc).__name__}: {exc}" if exc else None,
    )


def transport_retry(
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Wrap an async callable so transport errors are retried with backoff.

    Waits base_delay, 2*base_delay, 4*base_delay ... capped at max_delay.
    base_delay=0 disables waiting (tests). After max_attempts the last
    transport error is re-raised unchanged.
    """
    return retry(
        stop=stop_after_attempt(max(max_attempts, 1)),
        wait=wait_exponential(multiplier=base_delay, max=max_delay),
        retry=retry_if_exception_type(RETRYABLE_ERRORS),
        before_sleep=_log_before_sleep,
        reraise=True,
    )


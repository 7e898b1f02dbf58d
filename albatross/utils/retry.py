from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_result,
    stop_after_attempt,
)
from tenacity.wait import wait_base

from albatross.config import RetryPolicy


def backoff_delay(attempt: int, unit: float) -> float:
    """Seconds to wait before the 0-indexed ``attempt``. Uncapped."""
    if attempt <= 0:
        return 0.0
    return unit * 2**attempt


class wait_doubling_backoff(wait_base):
    """Wait ``unit * 2**n`` before attempt ``n``.

    tenacity reports the attempt that just finished (1-based), which is the
    0-based index of the attempt about to run.
    """

    def __init__(self, unit: float) -> None:
        self.unit = unit

    def __call__(self, retry_state: RetryCallState) -> float:
        return backoff_delay(retry_state.attempt_number, self.unit)


def with_retry(
    policy: RetryPolicy,
    should_retry: Callable[[Any], bool],
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    before_sleep: Callable[[RetryCallState], Any] | None = None,
) -> AsyncRetrying:
    """Retry controller that retries on *results* matching ``should_retry``.

    Exceptions raised by the attempt are never retried and propagate as is.
    When the bound is reached tenacity raises ``RetryError`` carrying the
    last result.
    """
    return AsyncRetrying(
        retry=retry_if_result(should_retry),
        stop=stop_after_attempt(policy.max_attempts + 1),
        wait=wait_doubling_backoff(policy.backoff_unit),
        sleep=sleep,
        before_sleep=before_sleep,
    )

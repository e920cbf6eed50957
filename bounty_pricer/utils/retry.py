from __future__ import annotations

import logging
from typing import Callable, TypeVar

from tenacity import RetryCallState, Retrying, stop_after_attempt, wait_fixed

logger = logging.getLogger(__name__)

T = TypeVar("T")


def with_retries(
    max_attempts: int,
    operation: Callable[[], T],
    wait_s: float = 0.0,
    label: str = "operation",
) -> T:
    """Run ``operation`` until it succeeds or ``max_attempts`` calls have failed.

    Every failure except the last is logged before the next attempt. The last
    failure is re-raised unchanged.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    def _log_failure(state: RetryCallState) -> None:
        exc = state.outcome.exception() if state.outcome else None
        logger.warning(
            "%s failed (attempt %d/%d): %s",
            label,
            state.attempt_number,
            max_attempts,
            exc,
        )

    retrying = Retrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_fixed(wait_s),
        before_sleep=_log_failure,
        reraise=True,
    )
    return retrying(operation)

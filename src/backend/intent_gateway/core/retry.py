"""Retry helpers shared by every remote dependency.

Both factories build tenacity controllers with a fixed delay between
sequential attempts (no jitter) and re-raise the last error once the attempt
budget is spent.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Callable

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_fixed,
)

logger = logging.getLogger(__name__)

RetryPredicate = Callable[[BaseException], bool]


def _always(exc: BaseException) -> bool:
    return True


def _log_before_sleep(label: str) -> Callable[[RetryCallState], None]:
    def _log(retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        wait = retry_state.next_action.sleep if retry_state.next_action else 0.0
        logger.warning(
            "%s attempt %d failed (%s); retrying in %.2fs",
            label,
            retry_state.attempt_number,
            exc,
            wait,
        )

    return _log


def _controller_kwargs(attempts: int, delay: float, retry_if: RetryPredicate | None, label: str) -> dict[str, Any]:
    if attempts < 1:
        raise ValueError("attempts must be at least 1")
    return {
        "stop": stop_after_attempt(attempts),
        "wait": wait_fixed(delay),
        "retry": retry_if_exception(retry_if or _always),
        "before_sleep": _log_before_sleep(label),
        "reraise": True,
    }


def retrying(
    attempts: int,
    delay: float,
    retry_if: RetryPredicate | None = None,
    *,
    label: str = "remote call",
    sleep: Callable[[float], None] = time.sleep,
) -> Retrying:
    """Synchronous retry controller; iterate it and wrap each try in ``with attempt:``."""
    return Retrying(sleep=sleep, **_controller_kwargs(attempts, delay, retry_if, label))


def async_retrying(
    attempts: int,
    delay: float,
    retry_if: RetryPredicate | None = None,
    *,
    label: str = "remote call",
    sleep: Callable[[float], Any] | None = None,
) -> AsyncRetrying:
    kwargs = _controller_kwargs(attempts, delay, retry_if, label)
    if sleep is not None:
        kwargs["sleep"] = sleep
    return AsyncRetrying(**kwargs)

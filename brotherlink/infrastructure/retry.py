"""brotherlink/infrastructure/retry.py

Bounded retry used for connection establishment.

Copyright BINGO Collaboration
Last modified: 2026-10-18
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from ..domain import RetryExhaustedError

T = TypeVar("T")


def call_with_retry(
    operation: Callable[[], T],
    *,
    attempts: int,
    delay: float = 0.0,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
    sleep: Callable[[float], None] = time.sleep,
    on_failure: Optional[Callable[[int, BaseException], None]] = None,
) -> T:
    """Call ``operation`` until it succeeds or ``attempts`` calls have failed.

    Parameters
    ----------
    operation:
        Zero-argument callable to invoke.
    attempts:
        Total number of calls allowed, at least 1.
    delay:
        Seconds to sleep between two failed calls. There is no sleep
        after the final failure.
    retry_on:
        Exception types that count as a retryable failure. Anything else
        propagates from the failing call immediately.
    sleep:
        Sleep function, replaceable in tests.
    on_failure:
        Called with ``(attempt, error)`` after every retryable failure.

    Raises
    ------
    RetryExhaustedError
        After the last attempt failed, chained to its error.
    """
    if attempts < 1:
        raise ValueError(f"attempts must be at least 1, got {attempts}")

    last_error: BaseException | None = None
    for attempt in range(1, attempts + 1):
        if attempt > 1:
            sleep(delay)
        try:
            return operation()
        except retry_on as exc:
            last_error = exc
            if on_failure is not None:
                on_failure(attempt, exc)

    assert last_error is not None
    raise RetryExhaustedError(attempts, last_error) from last_error


@dataclass(frozen=True)
class RetryPolicy:
    """Fixed-delay retry budget."""

    attempts: int
    delay: float = 0.0
    retry_on: tuple[type[BaseException], ...] = (OSError,)

    def call(
        self,
        operation: Callable[[], T],
        *,
        sleep: Callable[[float], None] = time.sleep,
        on_failure: Optional[Callable[[int, BaseException], None]] = None,
    ) -> T:
        return call_with_retry(
            operation,
            attempts=self.attempts,
            delay=self.delay,
            retry_on=self.retry_on,
            sleep=sleep,
            on_failure=on_failure,
        )


__all__ = ["call_with_retry", "RetryPolicy"]

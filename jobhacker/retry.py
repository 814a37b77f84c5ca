"""Exponential-backoff retry for outbound notification calls.

Source fetches and scoring calls are never retried; a failed run is simply
picked up again on the next scheduled tick.
"""
from __future__ import annotations

import functools
import random
import time
from typing import Any, Callable, Tuple, Type

from jobhacker.log import get_logger

log = get_logger(__name__)


def retry(
    *,
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    backoff_factor: float = 2.0,
    jitter: bool = True,
    retryable: Tuple[Type[BaseException], ...] = (OSError,),
    sleep: Callable[[float], None] | None = None,
) -> Callable:
    """Decorator: re-run the wrapped call on ``retryable`` errors, then re-raise."""
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")

    def decorator(fn: Callable) -> Callable:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            for attempt in range(1, max_attempts + 1):
                try:
                    return fn(*args, **kwargs)
                except retryable as exc:
                    if attempt == max_attempts:
                        log.error("%s failed after %d attempts: %s", fn.__qualname__, max_attempts, exc)
                        raise
                    delay = min(base_delay * (backoff_factor ** (attempt - 1)), max_delay)
                    if jitter:
                        delay *= 0.5 + random.random()
                    log.warning(
                        "%s attempt %d/%d failed (%s), retrying in %.1fs",
                        fn.__qualname__, attempt, max_attempts, exc, delay,
                    )
                    (sleep or time.sleep)(delay)
            raise AssertionError("unreachable")

        return wrapper

    return decorator

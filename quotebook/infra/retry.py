# quotebook/infra/retry.py
import random
import time
from typing import Callable, Optional, TypeVar

from quotebook.core.logging_config import logger

T = TypeVar("T")


def backoff_delay(base: float, factor: float, attempt: int, cap: float) -> float:
    # exponential backoff with up to 25% jitter
    delay = min(base * (factor ** attempt), cap)
    return delay + random.uniform(0, delay * 0.25)


def retry_on(
    fn: Callable[[], T],
    *,
    attempts: int = 3,
    base: float = 0.05,
    factor: float = 2.0,
    cap: float = 1.0,
    is_retryable: Optional[Callable[[Exception], bool]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Call ``fn`` until it succeeds or ``attempts`` are used up.

    Only exceptions accepted by ``is_retryable`` are retried; anything else
    propagates immediately. The last retryable exception is re-raised when
    all attempts fail.
    """
    if attempts < 1:
        raise ValueError("attempts must be >= 1")

    last_exc: Optional[Exception] = None
    for i in range(attempts):
        try:
            return fn()
        except Exception as e:
            if is_retryable is not None and not is_retryable(e):
                raise
            last_exc = e
            if i == attempts - 1:
                break
            delay = backoff_delay(base, factor, i, cap)
            logger.warning("retry_scheduled", attempt=i + 1, delay_s=round(delay, 3), error=repr(e))
            sleep(delay)

    assert last_exc is not None
    raise last_exc

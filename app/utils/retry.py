"""
RETRY UTILITY
=============

Calls a function and, if it raises one of the given exception types, retries a
few times with exponential backoff. Any other exception propagates at once.

The translator uses it for upstream 429 answers only, and only when
AI_RATE_LIMIT_RETRIES is above 1; by default every request makes one call.

Example:
  data = with_retry(lambda: post(...), max_retries=3, initial_delay=1.0, retry_on=(RateLimitedError,))
"""

import logging
import time
from typing import Callable, Tuple, Type, TypeVar


logger = logging.getLogger("StudyPortal.AI")

# Type variable: with_retry returns whatever the callable returns.
T = TypeVar("T")


def with_retry(
    fn: Callable[[], T],
    max_retries: int = 3,
    initial_delay: float = 1.0,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Execute fn(). If it raises an instance of retry_on, wait initial_delay seconds and
    try again; delay doubles each retry. After max_retries attempts (including the first),
    re-raise the last exception.
    """
    delay = initial_delay
    attempts = max(1, max_retries)

    for attempt in range(attempts):
        try:
            return fn()
        except retry_on as e:
            if attempt == attempts - 1:
                raise
            logger.warning(
                "Attempt %s/%s failed (%s). Retrying in %.1fs: %s",
                attempt + 1,
                attempts,
                fn.__name__ if hasattr(fn, "__name__") else "call",
                delay,
                e,
            )
            sleep(delay)
            delay *= 2  # Exponential backoff: 1s, 2s, 4s, ...

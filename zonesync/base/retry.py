"""
Retry helper for the public IP lookup.

The zone update transaction never retries on its own; the poll cadence
does that. Only the IP lookup, which is a single idempotent GET, is
worth retrying within one iteration.
"""

from __future__ import annotations

import time
import logging
from functools import wraps
from typing import Callable, Any

from zonesync.base.exceptions import PublicIPError

logger = logging.getLogger("zonesync")

_DEFAULT_RETRYABLE: tuple[type[BaseException], ...] = (PublicIPError,)


def retry(
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 10.0,
    backoff_factor: float = 2.0,
    retryable_exceptions: tuple[type[BaseException], ...] | None = None,
    sleep: Callable[[float], None] | None = None,
) -> Callable:
    """Decorator: retry a function on lookup failures with exponential backoff.

    Args:
        max_attempts: Total attempts, including the first one.
        base_delay: Delay in seconds before the first retry.
        max_delay: Cap on the delay between retries.
        backoff_factor: Multiplier applied to the delay after each retry.
        retryable_exceptions: Exception types that trigger a retry.
            Defaults to :class:`PublicIPError`.
        sleep: Function used to wait between attempts, ``time.sleep`` if omitted.

    Returns:
        Decorated function. The last exception is re-raised once all
        attempts are spent.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")
    if retryable_exceptions is None:
        retryable_exceptions = _DEFAULT_RETRYABLE

    def decorator(fn: Callable) -> Callable:
        @wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            delay = base_delay
            attempt = 1
            while True:
                try:
                    return fn(*args, **kwargs)
                except retryable_exceptions as exc:
                    if attempt >= max_attempts:
                        if max_attempts > 1:
                            logger.error(
                                "Giving up on %s after %d attempts: %s",
                                fn.__qualname__,
                                max_attempts,
                                exc,
                            )
                        raise
                    logger.warning(
                        "Attempt %d/%d for %s failed (%s), retrying in %.1fs",
                        attempt,
                        max_attempts,
                        fn.__qualname__,
                        exc,
                        delay,
                    )
                    (sleep or time.sleep)(delay)
                    delay = min(delay * backoff_factor, max_delay)
                    attempt += 1

        return wrapper

    return decorator

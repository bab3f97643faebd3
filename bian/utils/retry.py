"""
Bounded-attempt decorator for connection handshakes.

REST calls are never retried by this library; the only retried operation is
the initial WebSocket handshake, which gets a fixed number of immediate
attempts.
"""

import functools
from typing import Callable, Type, Tuple

from .logger import get_logger

logger = get_logger(__name__)


def retry_on_error(
    max_attempts: int = 3,
    exceptions: Tuple[Type[Exception], ...] = (Exception,)
):
    """
    Decorator to re-invoke a blocking function when it raises one of
    ``exceptions``.

    Attempts follow each other immediately: there is no backoff and no
    jitter between them. The last failure is re-raised unchanged.

    Args:
        max_attempts: Total number of attempts (default: 3)
        exceptions: Tuple of exception types that trigger another attempt

    Example:
        @retry_on_error(max_attempts=3, exceptions=(OSError,))
        def dial(url):
            ...
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    def decorator(func: Callable):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            for attempt in range(1, max_attempts + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    if attempt == max_attempts:
                        logger.error(
                            "max_attempts_exceeded",
                            function=func.__name__,
                            attempts=max_attempts,
                            error=str(e)
                        )
                        raise

                    logger.warning(
                        "retrying_after_error",
                        function=func.__name__,
                        attempt=attempt,
                        max_attempts=max_attempts,
                        error=str(e)
                    )

        return wrapper
    return decorator

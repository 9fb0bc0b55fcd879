"""Retry utilities for delivering payloads to the host."""

import asyncio
import inspect
from collections.abc import Callable
from typing import Any

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from deckcraft_core.utils.logging import get_logger

logger = get_logger(__name__)

# Default retry configuration
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_MIN_WAIT = 0.1  # seconds
DEFAULT_MAX_WAIT = 2  # seconds

# Exceptions that should trigger a retry
RETRYABLE_EXCEPTIONS = (
    ConnectionError,
    TimeoutError,
    asyncio.TimeoutError,
)


def get_async_retry(
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    min_wait: float = DEFAULT_MIN_WAIT,
    max_wait: float = DEFAULT_MAX_WAIT,
) -> AsyncRetrying:
    """Create an async retry context manager.

    Backoff sleeps with ``asyncio.sleep``, so the event loop keeps running
    between attempts.

    Args:
        max_attempts: Maximum number of attempts
        min_wait: Minimum wait time in seconds
        max_wait: Maximum wait time in seconds

    Returns:
        AsyncRetrying context manager
    """
    return AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=min_wait, min=min_wait, max=max_wait),
        retry=retry_if_exception_type(RETRYABLE_EXCEPTIONS),
        reraise=True,
    )


def _format_exception(e: Exception) -> str:
    """Format exception for logging, handling nested/empty exceptions."""
    msg = str(e).strip()

    if not msg:
        msg = type(e).__name__

    if e.__cause__:
        cause_msg = str(e.__cause__).strip()
        if cause_msg:
            msg = f"{msg} (caused by: {cause_msg})"

    return msg or "Unknown error"


async def with_retry(
    func: Callable[..., Any],
    *args: Any,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    min_wait: float = DEFAULT_MIN_WAIT,
    operation_name: str = "operation",
    **kwargs: Any,
) -> Any:
    """Execute a function with retry logic for transient failures.

    ``func`` may be a plain callable (a synchronous transport) or return an
    awaitable; either way the retries are awaited on the running loop.

    Args:
        func: Function to execute
        *args: Positional arguments for the function
        max_attempts: Maximum number of attempts
        min_wait: Initial backoff in seconds
        operation_name: Name for logging purposes
        **kwargs: Keyword arguments for the function

    Returns:
        Result of the function

    Raises:
        The last exception if all retries fail
    """
    attempt = 0

    async for attempt_ctx in get_async_retry(
        max_attempts=max_attempts, min_wait=min_wait
    ):
        with attempt_ctx:
            attempt += 1
            if attempt > 1:
                logger.info(
                    f"Retrying {operation_name} (attempt {attempt}/{max_attempts})"
                )
            try:
                result = func(*args, **kwargs)
                if inspect.isawaitable(result):
                    result = await result
                return result
            except RETRYABLE_EXCEPTIONS as e:
                logger.warning(
                    f"{operation_name} failed (attempt {attempt}/{max_attempts}): "
                    f"{_format_exception(e)}"
                )
                raise  # Let tenacity handle the retry
            except Exception as e:
                logger.error(
                    f"{operation_name} failed with non-retryable error: "
                    f"{_format_exception(e)}"
                )
                raise

    raise RuntimeError(f"{operation_name} failed after {max_attempts} attempts")

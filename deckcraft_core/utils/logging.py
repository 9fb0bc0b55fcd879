"""Logging utilities.

Every module logger is a child of the ``deckcraft_core`` logger, which owns
the single handler. Records go to stderr because stdout may carry host
commands (see ``bridge.transport.StreamTransport``).
"""

import inspect
import logging
import os
import sys
from functools import wraps
from typing import Any, Callable, TypeVar

_PACKAGE_LOGGER = "deckcraft_core"
_LOG_LEVEL = os.environ.get("DECKCRAFT_LOG_LEVEL", "INFO").upper()
_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Set on an exception once a decorated entry point has logged it
_LOGGED_MARKER = "__deckcraft_logged__"

F = TypeVar("F", bound=Callable[..., Any])


def _package_logger() -> logging.Logger:
    root = logging.getLogger(_PACKAGE_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        root.addHandler(handler)
        root.setLevel(getattr(logging, _LOG_LEVEL, logging.INFO))
    return root


def get_logger(name: str, level: int | None = None) -> logging.Logger:
    """Get a logger under the package logger.

    Args:
        name: Logger name (typically __name__)
        level: Optional log level override

    Returns:
        Configured logger
    """
    root = _package_logger()
    if name == _PACKAGE_LOGGER or name.startswith(_PACKAGE_LOGGER + "."):
        logger = logging.getLogger(name)
    else:
        logger = root.getChild(name)

    if level is not None:
        logger.setLevel(level)

    return logger


def _log_once(
    logger: logging.Logger,
    func_name: str,
    e: Exception,
    expected: tuple[type[Exception], ...],
) -> None:
    if getattr(e, _LOGGED_MARKER, False):
        return
    if expected and isinstance(e, expected):
        logger.error(f"{func_name} failed: {e}")
    else:
        logger.exception(f"Exception in {func_name}: {e}")
    try:
        setattr(e, _LOGGED_MARKER, True)
    except AttributeError:
        pass


def log_exceptions(
    logger: logging.Logger,
    expected: tuple[type[Exception], ...] = (),
) -> Callable[[F], F]:
    """Decorator to log exceptions from a function.

    Works on plain functions and coroutine functions. An exception is logged
    by the innermost decorated entry point only, so an async wrapper around a
    decorated sync exporter does not log the same failure twice.

    Args:
        logger: Logger to use for exception logging
        expected: Exception types logged as one error line, without traceback

    Returns:
        Decorated function that logs exceptions before re-raising
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                _log_once(logger, func.__name__, e, expected)
                raise

        @wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                _log_once(logger, func.__name__, e, expected)
                raise

        if inspect.iscoroutinefunction(func):
            return async_wrapper  # type: ignore
        return sync_wrapper  # type: ignore

    return decorator

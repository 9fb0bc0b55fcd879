"""Utility functions."""

from deckcraft_core.utils.ids import new_id, utc_timestamp
from deckcraft_core.utils.logging import get_logger, log_exceptions
from deckcraft_core.utils.retry import RETRYABLE_EXCEPTIONS, with_retry

__all__ = [
    "get_logger",
    "log_exceptions",
    "new_id",
    "utc_timestamp",
    "RETRYABLE_EXCEPTIONS",
    "with_retry",
]

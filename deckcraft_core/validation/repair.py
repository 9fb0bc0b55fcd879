"""Repair pipeline: recover decks delivered as JSON strings.

Producers sometimes hand over the deck as a JSON-encoded string instead of a
structured object. The only recovery attempted is decoding that string and
validating the result; no field coercion or fuzzy matching is performed, so
the producer's intent is never reinterpreted.
"""

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from deckcraft_core.schemas.deck import ChartSeriesPolicy, Deck
from deckcraft_core.schemas.notifications import Notification, NotificationType
from deckcraft_core.utils.logging import get_logger
from deckcraft_core.validation.validator import (
    ValidationIssue,
    format_issues,
    validate,
)

logger = get_logger(__name__)

Notifier = Callable[[Notification], None]

REPAIRED_MESSAGE = "Auto-repaired invalid deck JSON"
INVALID_PREFIX = "Invalid deck JSON:\n"


@dataclass(frozen=True)
class RepairResult:
    """Outcome of the repair pipeline."""

    deck: Deck | None = None
    issues: list[ValidationIssue] = field(default_factory=list)
    repaired: bool = False
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.deck is not None


def _decode(data: Any) -> Any:
    """Decode a string payload as JSON.

    Raises:
        ValueError: If the payload is not a string or not valid JSON
    """
    if isinstance(data, (bytes, bytearray)):
        data = data.decode("utf-8")
    if not isinstance(data, str):
        raise ValueError(f"cannot decode {type(data).__name__} payload")
    return json.loads(data)


def coerce_and_validate(
    data: Any,
    *,
    notify: Notifier | None = None,
    chart_series_policy: ChartSeriesPolicy | None = None,
) -> RepairResult:
    """Validate input, retrying once on its JSON-decoded form.

    Args:
        data: Deck payload as given by the producer
        notify: Callback receiving the success or error notification
        chart_series_policy: Override for the series/xLabels length check

    Returns:
        RepairResult. On failure ``issues`` holds the first attempt's issues
        and ``message`` their multi-line rendering.
    """
    first = validate(data, chart_series_policy=chart_series_policy)
    if first.ok:
        return RepairResult(deck=first.deck)

    try:
        decoded = _decode(data)
    except ValueError as e:
        # json.JSONDecodeError and UnicodeDecodeError are ValueErrors
        logger.debug(f"Repair skipped: {e}")
    else:
        second = validate(decoded, chart_series_policy=chart_series_policy)
        if second.ok:
            logger.info("Deck payload repaired by decoding JSON string")
            _emit(notify, NotificationType.SUCCESS, REPAIRED_MESSAGE)
            return RepairResult(
                deck=second.deck, repaired=True, message=REPAIRED_MESSAGE
            )

    message = INVALID_PREFIX + format_issues(first.issues)
    logger.warning(f"Rejected deck payload with {len(first.issues)} issue(s)")
    _emit(notify, NotificationType.ERROR, message)
    return RepairResult(issues=first.issues, message=message)


def _emit(notify: Notifier | None, kind: NotificationType, message: str) -> None:
    if notify is not None:
        notify(Notification(type=kind, message=message))

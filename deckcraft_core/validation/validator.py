"""Schema validation for deck payloads."""

from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from deckcraft_core.config import settings
from deckcraft_core.schemas.deck import ChartSeriesPolicy, Deck


@dataclass(frozen=True)
class ValidationIssue:
    """A single schema violation."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a deck payload."""

    deck: Deck | None = None
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.deck is not None


def _issue_path(loc: tuple[int | str, ...]) -> str:
    """Join a pydantic error location into a dotted field path."""
    return ".".join(str(part) for part in loc)


def validate(
    data: Any,
    *,
    chart_series_policy: ChartSeriesPolicy | None = None,
) -> ValidationResult:
    """Validate arbitrary input against the deck schema.

    Issues are returned in validation order, which follows the schema's field
    order and is therefore stable for the same input.

    Args:
        data: Candidate deck (typically a dict decoded from JSON)
        chart_series_policy: Override for the series/xLabels length check

    Returns:
        ValidationResult with either the typed deck or the issue list
    """
    policy = chart_series_policy or settings.chart_series_policy
    try:
        deck = Deck.model_validate(
            data, context={"chart_series_policy": policy}
        )
    except ValidationError as e:
        issues = [
            ValidationIssue(path=_issue_path(err["loc"]), message=err["msg"])
            for err in e.errors(include_url=False)
        ]
        return ValidationResult(issues=issues)
    return ValidationResult(deck=deck)


def format_issues(issues: list[ValidationIssue]) -> str:
    """Render issues as ``path: message`` lines."""
    return "\n".join(str(issue) for issue in issues)

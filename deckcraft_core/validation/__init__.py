"""Deck validation and repair."""

from deckcraft_core.validation.repair import (
    Notifier,
    RepairResult,
    coerce_and_validate,
)
from deckcraft_core.validation.validator import (
    ValidationIssue,
    ValidationResult,
    format_issues,
    validate,
)

__all__ = [
    "validate",
    "format_issues",
    "ValidationIssue",
    "ValidationResult",
    "coerce_and_validate",
    "RepairResult",
    "Notifier",
]

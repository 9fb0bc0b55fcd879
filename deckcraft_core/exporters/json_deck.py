"""JSON export: the persisted form of a deck."""

import json
from typing import Any

from deckcraft_core.errors import DeckValidationError
from deckcraft_core.schemas.deck import Deck
from deckcraft_core.validation.validator import ValidationIssue, validate


def deck_payload(deck: Deck) -> dict[str, Any]:
    """Serialize a deck to a JSON-compatible dict (camelCase, no nulls)."""
    return deck.model_dump(mode="json", by_alias=True, exclude_none=True)


def dump_deck_json(deck: Deck, indent: int | None = None) -> str:
    """Serialize a deck to a JSON string.

    Args:
        deck: Deck to serialize
        indent: Optional indentation for human-readable output

    Returns:
        JSON text that validates back to an equal deck
    """
    return deck.model_dump_json(by_alias=True, exclude_none=True, indent=indent)


def load_deck_json(text: str | bytes) -> Deck:
    """Parse a persisted deck.

    Unlike the store's load path this never repairs or notifies: a saved file
    either is a deck or it is not.

    Raises:
        DeckValidationError: If the text is not JSON or not a valid deck
    """
    try:
        data = json.loads(text)
    except ValueError as e:
        raise DeckValidationError(
            [ValidationIssue(path="", message=f"Invalid JSON: {e}")]
        ) from e

    result = validate(data)
    if result.deck is None:
        raise DeckValidationError(result.issues)
    return result.deck

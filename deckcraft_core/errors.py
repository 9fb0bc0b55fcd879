"""Exceptions raised by the deck model, store and exporters."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from deckcraft_core.validation.validator import ValidationIssue


class DeckError(Exception):
    """Base class for deckcraft errors."""

    pass


class DeckValidationError(DeckError):
    """Raised when input does not conform to the deck schema."""

    def __init__(self, issues: list[ValidationIssue], message: str | None = None):
        self.issues = issues
        if message is None:
            message = "; ".join(f"{i.path or '<root>'}: {i.message}" for i in issues)
        super().__init__(message)


class NoDeckLoadedError(DeckError):
    """Raised when an edit requires a deck but none is loaded."""

    pass


class SlideNotFoundError(DeckError):
    """Raised when a slide id does not exist in the current deck."""

    def __init__(self, slide_id: str):
        self.slide_id = slide_id
        super().__init__(f"Slide not found: {slide_id}")


class BlockNotFoundError(DeckError):
    """Raised when a block id does not exist on the addressed slide."""

    def __init__(self, slide_id: str, block_id: str):
        self.slide_id = slide_id
        self.block_id = block_id
        super().__init__(f"Block {block_id} not found on slide {slide_id}")


class UnsupportedBlockError(DeckError):
    """Raised when an edit does not apply to the addressed block's kind."""

    pass


class ExportError(DeckError):
    """Error while projecting a deck to an export format."""

    pass

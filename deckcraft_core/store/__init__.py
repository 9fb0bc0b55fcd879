"""Deck state: document store, undo history and patch merge."""

from deckcraft_core.store.document_store import DocumentStore, LoadResult, Selection
from deckcraft_core.store.history import UndoHistory
from deckcraft_core.store.merge import merge

__all__ = [
    "DocumentStore",
    "LoadResult",
    "Selection",
    "UndoHistory",
    "merge",
]

"""Bounded undo/redo history of whole-deck snapshots."""

from collections import deque

from deckcraft_core.schemas.deck import Deck


class UndoHistory:
    """Undo and redo stacks of deck snapshots.

    The undo stack keeps at most ``limit`` snapshots; pushing beyond that
    evicts the oldest one.
    """

    def __init__(self, limit: int = 50):
        if limit < 1:
            raise ValueError(f"history limit must be positive, got {limit}")
        self._undo: deque[Deck] = deque(maxlen=limit)
        self._redo: list[Deck] = []

    @property
    def limit(self) -> int:
        return self._undo.maxlen or 0

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def record(self, previous: Deck | None) -> None:
        """Record the state before a new mutation and drop the redo stack."""
        if previous is not None:
            self._undo.append(previous)
        self._redo.clear()

    def undo(self, current: Deck | None) -> Deck | None:
        """Pop the latest snapshot, remembering ``current`` for redo."""
        if not self._undo:
            return None
        previous = self._undo.pop()
        if current is not None:
            self._redo.append(current)
        return previous

    def redo(self, current: Deck | None) -> Deck | None:
        """Pop the latest undone state, remembering ``current`` for undo."""
        if not self._redo:
            return None
        following = self._redo.pop()
        if current is not None:
            self._undo.append(current)
        return following

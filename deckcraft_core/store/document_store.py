"""Document store: the current deck, selection and undo history.

The store is the only owner of editor state and exposes the only mutation
entry points. Every operation is synchronous and replaces the deck with a new
value, so callers that hold a snapshot (an export in flight, a history entry)
are never affected by later edits.
"""

from dataclasses import dataclass
from typing import Any, Callable

from deckcraft_core.config import Settings, settings as default_settings
from deckcraft_core.errors import (
    BlockNotFoundError,
    NoDeckLoadedError,
    SlideNotFoundError,
    UnsupportedBlockError,
)
from deckcraft_core.schemas.deck import Block, Deck, Layout, Slide, TextBlock
from deckcraft_core.store.history import UndoHistory
from deckcraft_core.store.merge import merge
from deckcraft_core.utils.ids import new_id, utc_timestamp
from deckcraft_core.utils.logging import get_logger
from deckcraft_core.validation.repair import Notifier, coerce_and_validate

logger = get_logger(__name__)


@dataclass(frozen=True)
class Selection:
    """Currently selected slide and block."""

    slide_id: str | None = None
    block_id: str | None = None


@dataclass(frozen=True)
class LoadResult:
    """Outcome of a load or patch."""

    ok: bool
    deck: Deck | None = None
    message: str | None = None
    repaired: bool = False
    merged: bool = False


class DocumentStore:
    """Holds the current deck and applies every mutation to it."""

    def __init__(
        self,
        settings: Settings | None = None,
        notify: Notifier | None = None,
    ):
        """Initialize an empty store.

        Args:
            settings: Settings override (history depth, default theme...)
            notify: Receives notifications from the repair pipeline
        """
        self._settings = settings or default_settings
        self._notify = notify
        self._deck: Deck | None = None
        self._selection = Selection()
        self._history = UndoHistory(limit=self._settings.history_limit)

    @property
    def deck(self) -> Deck | None:
        return self._deck

    @property
    def selection(self) -> Selection:
        return self._selection

    @property
    def history(self) -> UndoHistory:
        return self._history

    @property
    def can_undo(self) -> bool:
        return self._history.undo_depth > 0

    @property
    def can_redo(self) -> bool:
        return self._history.redo_depth > 0

    def snapshot(self) -> Deck | None:
        """Return the current deck value for export."""
        return self._deck

    def _commit(self, deck: Deck) -> None:
        self._history.record(self._deck)
        self._deck = deck

    # Loading

    def load(self, data: Any, is_patch: bool = False) -> LoadResult:
        """Validate and install a full deck or a patch.

        A rejected payload leaves the deck and history untouched.

        Args:
            data: Deck payload (object or JSON string)
            is_patch: Merge into the current deck instead of replacing it

        Returns:
            LoadResult describing what was installed
        """
        result = coerce_and_validate(
            data,
            notify=self._notify,
            chart_series_policy=self._settings.chart_series_policy,
        )
        if not result.ok or result.deck is None:
            return LoadResult(ok=False, message=result.message)

        current = self._deck
        merged = is_patch and current is not None
        if is_patch and current is not None:
            next_deck = merge(current, result.deck)
        else:
            next_deck = result.deck

        self._commit(next_deck)
        logger.info(
            f"Installed deck {next_deck.id} "
            f"({len(next_deck.slides)} slides, merged={merged})"
        )
        return LoadResult(
            ok=True,
            deck=next_deck,
            message=result.message,
            repaired=result.repaired,
            merged=merged,
        )

    # History

    def undo(self) -> bool:
        """Restore the state before the last mutation. Returns False if none."""
        previous = self._history.undo(self._deck)
        if previous is None:
            return False
        self._deck = previous
        return True

    def redo(self) -> bool:
        """Re-apply the last undone mutation. Returns False if none."""
        following = self._history.redo(self._deck)
        if following is None:
            return False
        self._deck = following
        return True

    # Selection

    def set_selected_slide(self, slide_id: str) -> None:
        self._selection = Selection(slide_id=slide_id)

    def set_selected_block(self, block_id: str | None = None) -> None:
        self._selection = Selection(
            slide_id=self._selection.slide_id, block_id=block_id
        )

    # Direct edits

    def _replace_block(
        self,
        slide_id: str,
        block_id: str,
        edit: Callable[[Block], Block],
    ) -> Deck:
        """Apply ``edit`` to one block and commit the resulting deck."""
        if self._deck is None:
            raise NoDeckLoadedError("No deck loaded")

        slide = self._deck.find_slide(slide_id)
        if slide is None:
            raise SlideNotFoundError(slide_id)

        blocks = list(slide.blocks)
        for index, block in enumerate(blocks):
            if block.id == block_id:
                blocks[index] = edit(block)
                break
        else:
            raise BlockNotFoundError(slide_id, block_id)

        new_slide = slide.model_copy(update={"blocks": blocks})
        slides = [new_slide if s.id == slide_id else s for s in self._deck.slides]
        deck = self._deck.model_copy(update={"slides": slides})
        self._commit(deck)
        return deck

    def update_block_html(self, slide_id: str, block_id: str, html: str) -> Deck:
        """Replace the markup of a text block.

        Raises:
            NoDeckLoadedError: If no deck is loaded
            SlideNotFoundError: If the slide does not exist
            BlockNotFoundError: If the block is not on the slide
            UnsupportedBlockError: If the block is not a text block
        """

        def edit(block: Block) -> Block:
            if not isinstance(block, TextBlock):
                raise UnsupportedBlockError(
                    f"Block {block.id} is a {block.kind} block, not text"
                )
            return block.model_copy(update={"html": html})

        return self._replace_block(slide_id, block_id, edit)

    def move_block_to(
        self, slide_id: str, block_id: str, x: float, y: float
    ) -> Deck:
        """Move a block's frame origin to ``(x, y)``.

        Raises:
            NoDeckLoadedError: If no deck is loaded
            SlideNotFoundError: If the slide does not exist
            BlockNotFoundError: If the block is not on the slide
        """

        def edit(block: Block) -> Block:
            frame = block.frame.model_copy(update={"x": x, "y": y})
            return block.model_copy(update={"frame": frame})

        return self._replace_block(slide_id, block_id, edit)

    def add_slide_with_layout(self, layout: Layout | str) -> Slide:
        """Append an empty slide and select it.

        Bootstraps a new deck when none is loaded.

        Args:
            layout: Advisory layout for the new slide

        Returns:
            The new slide
        """
        layout = Layout(layout)
        deck = self._deck or Deck(
            id=new_id(),
            title="New Deck",
            theme=self._settings.default_theme,
            created_at=utc_timestamp(),
            slides=[],
        )
        slide = Slide(
            id=new_id(),
            layout=layout,
            title="Title Slide" if layout == Layout.TITLE else "New Slide",
            blocks=[],
        )
        self._commit(deck.model_copy(update={"slides": [*deck.slides, slide]}))
        self._selection = Selection(slide_id=slide.id)
        return slide

    # Persistence

    def autosave(self, sink: Callable[[Deck], None]) -> bool:
        """Hand the current deck to ``sink`` without touching state.

        Returns:
            False when no deck is loaded
        """
        if self._deck is None:
            return False
        sink(self._deck)
        return True

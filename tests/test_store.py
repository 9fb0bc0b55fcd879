"""Tests for the document store."""

import json
from typing import Any

import pytest

from deckcraft_core.config import Settings
from deckcraft_core.errors import (
    BlockNotFoundError,
    NoDeckLoadedError,
    SlideNotFoundError,
    UnsupportedBlockError,
)
from deckcraft_core.schemas.deck import Deck, Layout
from deckcraft_core.schemas.notifications import Notification, NotificationType
from deckcraft_core.store.document_store import DocumentStore, Selection


@pytest.fixture
def store(test_settings: Settings, notifications: list[Notification]) -> DocumentStore:
    return DocumentStore(settings=test_settings, notify=notifications.append)


@pytest.fixture
def loaded_store(store: DocumentStore, sample_payload: dict[str, Any]) -> DocumentStore:
    assert store.load(sample_payload).ok
    return store


class TestLoad:
    """Tests for full loads and patches."""

    def test_first_load_installs_deck(
        self, store: DocumentStore, sample_payload: dict[str, Any], sample_deck: Deck
    ) -> None:
        result = store.load(sample_payload)

        assert result.ok
        assert store.deck == sample_deck
        assert not store.can_undo

    def test_second_load_pushes_history(
        self, loaded_store: DocumentStore, make_payload, make_slide, sample_deck: Deck
    ) -> None:
        loaded_store.load(make_payload([make_slide("other")], deck_id="deck-2"))

        assert loaded_store.deck is not None
        assert loaded_store.deck.id == "deck-2"
        assert loaded_store.history.undo_depth == 1
        assert loaded_store.undo()
        assert loaded_store.deck == sample_deck

    def test_invalid_load_changes_nothing(
        self,
        loaded_store: DocumentStore,
        sample_payload: dict[str, Any],
        notifications: list[Notification],
    ) -> None:
        """Test that rejected input performs zero mutation."""
        before = loaded_store.deck
        depth = loaded_store.history.undo_depth
        del sample_payload["slides"][0]["id"]

        result = loaded_store.load(sample_payload)

        assert not result.ok
        assert result.message is not None and "slides.0.id" in result.message
        assert loaded_store.deck is before
        assert loaded_store.history.undo_depth == depth
        assert notifications[-1].type == NotificationType.ERROR

    def test_repaired_load_notifies_once(
        self,
        store: DocumentStore,
        sample_payload: dict[str, Any],
        sample_deck: Deck,
        notifications: list[Notification],
    ) -> None:
        result = store.load(json.dumps(sample_payload))

        assert result.ok and result.repaired
        assert store.deck == sample_deck
        assert [n.type for n in notifications] == [NotificationType.SUCCESS]

    def test_unrepairable_string_leaves_history(
        self, loaded_store: DocumentStore
    ) -> None:
        depth = loaded_store.history.undo_depth

        result = loaded_store.load("{not json")

        assert not result.ok
        assert loaded_store.history.undo_depth == depth

    def test_patch_merges_by_slide_id(
        self, loaded_store: DocumentStore, make_payload, make_slide
    ) -> None:
        patch = make_payload(
            [make_slide("s2", title="Rewritten"), make_slide("s3", title="New")],
            title="",
            theme="",
            deck_id="ignored",
        )

        result = loaded_store.load(patch, is_patch=True)

        assert result.ok and result.merged
        deck = loaded_store.deck
        assert deck is not None
        assert deck.id == "deck-1"
        assert deck.title == "Quarterly Review"
        assert [s.id for s in deck.slides] == ["s1", "s2", "s3"]
        assert deck.slides[1].title == "Rewritten"
        assert deck.slides[1].blocks == []

    def test_patch_without_deck_is_full_load(
        self, store: DocumentStore, make_payload, make_slide
    ) -> None:
        result = store.load(make_payload([make_slide("x")], deck_id="p"), is_patch=True)

        assert result.ok
        assert not result.merged
        assert store.deck is not None and store.deck.id == "p"


class TestUndoRedo:
    """Tests for undo and redo."""

    def test_undo_empty_is_noop(self, store: DocumentStore) -> None:
        assert store.undo() is False
        assert store.deck is None

    def test_undo_restores_previous_states(
        self, store: DocumentStore, make_payload, make_slide
    ) -> None:
        """Test that undo after n mutations restores state n-1, repeatedly."""
        states = []
        for n in range(3):
            store.load(make_payload([make_slide(f"s{n}")], title=f"v{n}"))
            states.append(store.deck)

        assert store.undo()
        assert store.deck == states[1]
        assert store.undo()
        assert store.deck == states[0]
        assert store.undo() is False

    def test_redo_reapplies(self, loaded_store: DocumentStore) -> None:
        loaded_store.add_slide_with_layout("quote")
        edited = loaded_store.deck

        loaded_store.undo()
        assert loaded_store.can_redo
        assert loaded_store.redo()

        assert loaded_store.deck == edited
        assert not loaded_store.can_redo

    def test_new_mutation_clears_redo(self, loaded_store: DocumentStore) -> None:
        loaded_store.add_slide_with_layout("quote")
        loaded_store.undo()

        loaded_store.add_slide_with_layout("chart")

        assert not loaded_store.can_redo
        assert loaded_store.redo() is False

    def test_history_limit_evicts_oldest(
        self, store: DocumentStore, make_payload, make_slide
    ) -> None:
        """Test that only history_limit snapshots are kept."""
        for n in range(6):
            store.load(make_payload([make_slide(f"s{n}")], title=f"v{n}"))

        assert store.history.undo_depth == 3
        while store.undo():
            pass
        assert store.deck is not None
        assert store.deck.title == "v2"


class TestSelection:
    """Tests for selection state."""

    def test_selecting_slide_clears_block(self, store: DocumentStore) -> None:
        store.set_selected_slide("s1")
        store.set_selected_block("b1")
        assert store.selection == Selection(slide_id="s1", block_id="b1")

        store.set_selected_slide("s2")

        assert store.selection == Selection(slide_id="s2")

    def test_clear_block_selection(self, store: DocumentStore) -> None:
        store.set_selected_slide("s1")
        store.set_selected_block("b1")

        store.set_selected_block()

        assert store.selection == Selection(slide_id="s1")


class TestDirectEdits:
    """Tests for block edits addressed by block id."""

    def test_update_block_html(self, loaded_store: DocumentStore) -> None:
        before = loaded_store.deck

        deck = loaded_store.update_block_html("s1", "b-text", "<p>Updated</p>")

        assert deck.slides[0].blocks[0].html == "<p>Updated</p>"
        assert loaded_store.deck is deck
        assert before is not None
        assert before.slides[0].blocks[0].html == "<p>Strong <b>quarter</b></p>"
        assert deck.slides[1] is before.slides[1]
        assert loaded_store.can_undo

    def test_update_html_of_non_text_block(self, loaded_store: DocumentStore) -> None:
        before = loaded_store.deck

        with pytest.raises(UnsupportedBlockError):
            loaded_store.update_block_html("s1", "b-kpi", "<p>x</p>")

        assert loaded_store.deck is before

    def test_move_block(self, loaded_store: DocumentStore) -> None:
        deck = loaded_store.move_block_to("s2", "b-chart", 12.5, 40)

        chart = deck.slides[1].blocks[2]
        assert (chart.frame.x, chart.frame.y) == (12.5, 40)
        assert (chart.frame.w, chart.frame.h) == (450, 380)
        assert chart.id == "b-chart"

    def test_block_id_is_stable_across_reorder(
        self, loaded_store: DocumentStore, sample_payload: dict[str, Any]
    ) -> None:
        """Test that edits find a block after its position changed."""
        blocks = sample_payload["slides"][0]["blocks"]
        sample_payload["slides"][0]["blocks"] = list(reversed(blocks))
        loaded_store.load(sample_payload)

        deck = loaded_store.move_block_to("s1", "b-text", 0, 0)

        moved = [b for b in deck.slides[0].blocks if b.id == "b-text"][0]
        assert (moved.frame.x, moved.frame.y) == (0, 0)
        assert deck.slides[0].blocks[2] is moved

    def test_unknown_slide(self, loaded_store: DocumentStore) -> None:
        with pytest.raises(SlideNotFoundError):
            loaded_store.move_block_to("missing", "b-text", 0, 0)

    def test_unknown_block(self, loaded_store: DocumentStore) -> None:
        with pytest.raises(BlockNotFoundError):
            loaded_store.move_block_to("s1", "missing", 0, 0)

    def test_edit_without_deck(self, store: DocumentStore) -> None:
        with pytest.raises(NoDeckLoadedError):
            store.update_block_html("s1", "b1", "x")


class TestAddSlide:
    """Tests for add_slide_with_layout."""

    def test_bootstraps_deck(self, store: DocumentStore, test_settings: Settings) -> None:
        slide = store.add_slide_with_layout(Layout.TITLE)

        deck = store.deck
        assert deck is not None
        assert deck.title == "New Deck"
        assert deck.theme == test_settings.default_theme
        assert deck.slides == [slide]
        assert slide.title == "Title Slide"
        assert slide.blocks == []
        assert store.selection == Selection(slide_id=slide.id)

    def test_appends_with_unique_id(self, loaded_store: DocumentStore) -> None:
        first = loaded_store.add_slide_with_layout("kpi-cards")
        second = loaded_store.add_slide_with_layout("kpi-cards")

        deck = loaded_store.deck
        assert deck is not None
        assert [s.id for s in deck.slides][-2:] == [first.id, second.id]
        assert first.id != second.id
        assert first.title == "New Slide"
        assert first.layout == Layout.KPI_CARDS

    def test_invalid_layout(self, store: DocumentStore) -> None:
        with pytest.raises(ValueError):
            store.add_slide_with_layout("hero")


class TestAutosave:
    """Tests for autosave."""

    def test_no_deck_is_noop(self, store: DocumentStore) -> None:
        saved: list[Deck] = []

        assert store.autosave(saved.append) is False
        assert saved == []

    def test_saves_without_mutation(self, loaded_store: DocumentStore) -> None:
        saved: list[Deck] = []
        depth = loaded_store.history.undo_depth

        assert loaded_store.autosave(saved.append)

        assert saved == [loaded_store.deck]
        assert loaded_store.history.undo_depth == depth

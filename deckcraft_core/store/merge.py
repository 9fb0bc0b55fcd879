"""Patch merge: fold a partial deck into the current one by slide id."""

from deckcraft_core.schemas.deck import Deck, Slide


def merge(base: Deck, patch: Deck) -> Deck:
    """Merge a patch deck into a base deck.

    Slides are matched by id. A patch slide whose id exists in ``base``
    replaces that slide wholesale at its original position; new ids are
    appended in patch order. There is no field- or block-level merge, so the
    last writer wins per slide.

    ``title`` and ``theme`` are taken from the patch only when non-empty.
    ``id``, ``created_at`` and ``meta`` always come from ``base``.

    Args:
        base: Current deck
        patch: Incoming partial deck

    Returns:
        The merged deck
    """
    by_id: dict[str, Slide] = {slide.id: slide for slide in base.slides}
    for slide in patch.slides:
        by_id[slide.id] = slide

    return base.model_copy(
        update={
            "title": patch.title or base.title,
            "theme": patch.theme or base.theme,
            "slides": list(by_id.values()),
        }
    )

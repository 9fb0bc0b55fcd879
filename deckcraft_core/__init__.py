"""deckcraft-core: Deck document model for AI-assisted presentation editing.

This package holds the deck schema, the validation and repair pipeline, the
document store with undo/redo and patch merging, and the exporters that turn
a deck into slide images, a PPTX file or persisted JSON.

    >>> from deckcraft_core import DocumentStore, export_pptx
    >>> store = DocumentStore()
    >>> result = store.load(payload_from_model, is_patch=False)
    >>> pptx_bytes = export_pptx(store.snapshot())

Host applications talk to the store through the bridge adapter, which maps
host events to store calls and posts notifications and exports back:

    >>> from deckcraft_core.bridge import StreamTransport, create_bridge
    >>> bridge = create_bridge(StreamTransport(sys.stdout))
    >>> bridge.handle_event({"type": "aiResult", "deck": payload, "patch": True})
"""

from deckcraft_core.exporters import (
    dump_deck_json,
    export_pptx,
    render_slide_images,
)
from deckcraft_core.schemas.deck import Deck, Slide
from deckcraft_core.store import DocumentStore, merge
from deckcraft_core.validation import coerce_and_validate, validate

__version__ = "0.1.0"

__all__ = [
    # Schemas
    "Deck",
    "Slide",
    # Validation
    "validate",
    "coerce_and_validate",
    # Store
    "DocumentStore",
    "merge",
    # Exporters
    "export_pptx",
    "render_slide_images",
    "dump_deck_json",
]

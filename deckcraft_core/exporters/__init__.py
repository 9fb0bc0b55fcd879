"""Export formats for decks."""

from deckcraft_core.exporters.json_deck import (
    deck_payload,
    dump_deck_json,
    load_deck_json,
)
from deckcraft_core.exporters.native import (
    build_presentation,
    export_pptx,
    export_pptx_base64,
    export_pptx_base64_async,
)
from deckcraft_core.exporters.raster import (
    render_slide_data_urls,
    render_slide_data_urls_async,
    render_slide_images,
)
from deckcraft_core.exporters.themes import Theme, get_theme

__all__ = [
    "build_presentation",
    "export_pptx",
    "export_pptx_base64",
    "export_pptx_base64_async",
    "render_slide_images",
    "render_slide_data_urls",
    "render_slide_data_urls_async",
    "deck_payload",
    "dump_deck_json",
    "load_deck_json",
    "Theme",
    "get_theme",
]

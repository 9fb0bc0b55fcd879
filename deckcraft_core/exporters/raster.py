"""Raster export: one placeholder PNG per slide.

Rendering is intentionally simplified: the theme background, the slide title
and a translucent rectangle for each block frame.
"""

import asyncio
import base64
from io import BytesIO

from PIL import Image, ImageDraw, ImageFont

from deckcraft_core.config import Settings, settings as default_settings
from deckcraft_core.errors import ExportError
from deckcraft_core.exporters.themes import Theme, get_theme, hex_to_rgb
from deckcraft_core.schemas.deck import (
    SLIDE_HEIGHT_UNITS,
    SLIDE_WIDTH_UNITS,
    Deck,
    Slide,
)
from deckcraft_core.utils.logging import get_logger, log_exceptions

logger = get_logger(__name__)

# Title placement on the 1600px reference canvas
_REFERENCE_WIDTH = 1600
_TITLE_ORIGIN = (80, 140)
_TITLE_SIZE = 56


def _draw_gradient(image: Image.Image, theme: Theme) -> None:
    """Fill the image with the theme's vertical background gradient."""
    width, height = image.size
    draw = ImageDraw.Draw(image)
    top = hex_to_rgb(theme.background_top)
    bottom = hex_to_rgb(theme.background_bottom)
    span = max(height - 1, 1)
    for y in range(height):
        t = y / span
        color = tuple(round(a + (b - a) * t) for a, b in zip(top, bottom))
        draw.line([(0, y), (width, y)], fill=color)


def _title_font(size: int) -> ImageFont.ImageFont | ImageFont.FreeTypeFont:
    return ImageFont.load_default(size=size)


def render_slide(slide: Slide, theme: Theme, width: int, height: int) -> bytes:
    """Render one slide to PNG bytes.

    Args:
        slide: Slide to render
        theme: Theme colors
        width: Canvas width in pixels
        height: Canvas height in pixels

    Returns:
        PNG image bytes
    """
    image = Image.new("RGB", (width, height), hex_to_rgb(theme.background_top))
    _draw_gradient(image, theme)
    draw = ImageDraw.Draw(image, "RGBA")

    scale = width / _REFERENCE_WIDTH
    if slide.title:
        size = max(round(_TITLE_SIZE * scale), 1)
        x, baseline = _TITLE_ORIGIN
        draw.text(
            (x * scale, baseline * scale - size),
            slide.title,
            font=_title_font(size),
            fill=hex_to_rgb(theme.text),
        )

    sx = width / SLIDE_WIDTH_UNITS
    sy = height / SLIDE_HEIGHT_UNITS
    for block in slide.blocks:
        frame = block.frame
        if frame.w <= 0 or frame.h <= 0:
            continue
        left, top = frame.x * sx, frame.y * sy
        draw.rectangle(
            [left, top, left + frame.w * sx, top + frame.h * sy],
            fill=theme.block_fill,
        )

    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


@log_exceptions(logger, expected=(ExportError,))
def render_slide_images(deck: Deck, *, settings: Settings | None = None) -> list[bytes]:
    """Render every slide of a deck to PNG, in slide order.

    Args:
        deck: Validated deck
        settings: Settings override for the canvas size

    Returns:
        One PNG per slide

    Raises:
        ExportError: If an image cannot be encoded
    """
    settings = settings or default_settings
    theme = get_theme(deck.theme)
    logger.info(f"Rendering {len(deck.slides)} slide images for deck {deck.id}")

    images: list[bytes] = []
    for index, slide in enumerate(deck.slides):
        try:
            images.append(
                render_slide(slide, theme, settings.canvas_width, settings.canvas_height)
            )
        except (OSError, ValueError) as e:
            raise ExportError(f"Failed to render slide {index + 1}: {e}") from e
    return images


def to_data_url(png: bytes) -> str:
    """Encode PNG bytes as a data URL."""
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")


def render_slide_data_urls(deck: Deck, *, settings: Settings | None = None) -> list[str]:
    """Render slides as PNG data URLs for the host."""
    return [to_data_url(png) for png in render_slide_images(deck, settings=settings)]


@log_exceptions(logger, expected=(ExportError,))
async def render_slide_data_urls_async(
    deck: Deck, *, settings: Settings | None = None
) -> list[str]:
    """Render slide data URLs in a worker thread.

    The caller must pass a deck snapshot taken before awaiting.
    """
    return await asyncio.to_thread(render_slide_data_urls, deck, settings=settings)

"""PPTX export: project a deck onto a native PowerPoint presentation."""

import asyncio
import base64
import binascii
import html
import re
import zipfile
from datetime import datetime, timezone
from io import BytesIO
from urllib.parse import unquote_to_bytes

from pptx import Presentation
from pptx.chart.data import CategoryChartData
from pptx.dml.color import RGBColor
from pptx.enum.chart import XL_CHART_TYPE, XL_LEGEND_POSITION
from pptx.oxml.xmlchemy import OxmlElement
from pptx.presentation import Presentation as PptxPresentation
from pptx.util import Emu, Inches, Pt

from deckcraft_core.errors import ExportError
from deckcraft_core.exporters.themes import Theme, get_theme
from deckcraft_core.schemas.deck import (
    UNITS_PER_INCH,
    BulletBlock,
    ChartBlock,
    ChartType,
    Deck,
    Frame,
    ImageBlock,
    KpiBlock,
    QuoteBlock,
    Slide,
    TextBlock,
)
from deckcraft_core.utils.logging import get_logger, log_exceptions

logger = get_logger(__name__)

SLIDE_WIDTH = Inches(10)
SLIDE_HEIGHT = Inches(5.625)
BLANK_LAYOUT_INDEX = 6

CHART_PALETTE = ("3FE1B0", "B18CFF", "F5C56B", "FF6B6B")

CHART_TYPES = {
    ChartType.BAR: XL_CHART_TYPE.COLUMN_CLUSTERED,
    ChartType.LINE: XL_CHART_TYPE.LINE,
    ChartType.PIE: XL_CHART_TYPE.PIE,
}

_TAG_RE = re.compile(r"<[^>]+>")
_BLOCK_BREAK_RE = re.compile(r"<br\s*/?>|</p>|</div>|</li>|</h[1-6]>", re.IGNORECASE)

# Fixed timestamp for zip entries and core properties fallback
_ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)
_FALLBACK_CREATED = datetime(2000, 1, 1, tzinfo=timezone.utc)


def frame_to_emu(frame: Frame) -> tuple[Emu, Emu, Emu, Emu]:
    """Convert a frame in slide units to EMU (left, top, width, height)."""
    return (
        Inches(frame.x / UNITS_PER_INCH),
        Inches(frame.y / UNITS_PER_INCH),
        Inches(max(frame.w, 0) / UNITS_PER_INCH),
        Inches(max(frame.h, 0) / UNITS_PER_INCH),
    )


def html_to_text(markup: str) -> str:
    """Strip tags from an HTML fragment, keeping line breaks."""
    text = _BLOCK_BREAK_RE.sub("\n", markup)
    text = _TAG_RE.sub("", text)
    return html.unescape(text).strip()


def decode_data_url(data_url: str) -> bytes:
    """Decode a ``data:`` URL into raw bytes.

    Raises:
        ExportError: If the URL is malformed
    """
    header, sep, payload = data_url.partition(",")
    if not sep or not header.lower().startswith("data:"):
        raise ExportError("Image dataUrl is not a data: URL")
    try:
        if header.lower().endswith(";base64"):
            return base64.b64decode(payload, validate=True)
        return unquote_to_bytes(payload)
    except (binascii.Error, ValueError) as e:
        raise ExportError(f"Image dataUrl is not valid base64: {e}") from e


def _style_run(run, theme: Theme, size: int, bold: bool = False, italic: bool = False) -> None:
    font = run.font
    font.size = Pt(size)
    font.bold = bold
    font.italic = italic
    font.color.rgb = RGBColor.from_string(theme.text)


def _add_text(slide, frame: Frame, text: str, theme: Theme, size: int, **style: bool) -> None:
    left, top, width, height = frame_to_emu(frame)
    box = slide.shapes.add_textbox(left, top, width, height)
    text_frame = box.text_frame
    text_frame.word_wrap = True
    for index, line in enumerate(text.split("\n")):
        paragraph = text_frame.paragraphs[0] if index == 0 else text_frame.add_paragraph()
        run = paragraph.add_run()
        run.text = line
        _style_run(run, theme, size, **style)


def _set_bullet(paragraph) -> None:
    """Turn a paragraph into a bulleted one with a hanging indent."""
    p_pr = paragraph._p.get_or_add_pPr()
    p_pr.set("marL", str(Inches(0.25)))
    p_pr.set("indent", str(-Inches(0.25)))
    bullet = OxmlElement("a:buChar")
    bullet.set("char", "•")
    p_pr.append(bullet)


def _add_bullets(slide, block: BulletBlock, theme: Theme) -> None:
    left, top, width, height = frame_to_emu(block.frame)
    box = slide.shapes.add_textbox(left, top, width, height)
    text_frame = box.text_frame
    text_frame.word_wrap = True
    for index, item in enumerate(block.items):
        paragraph = text_frame.paragraphs[0] if index == 0 else text_frame.add_paragraph()
        _set_bullet(paragraph)
        run = paragraph.add_run()
        run.text = item
        _style_run(run, theme, 14)


def kpi_text(block: KpiBlock) -> str:
    """Compose ``label: value (delta)``."""
    text = f"{block.label}: {block.value}"
    if block.delta:
        text += f" ({block.delta})"
    return text


def quote_text(block: QuoteBlock) -> str:
    """Compose the quoted text with optional attribution."""
    text = f"“{block.text}”"
    if block.by:
        text += f" — {block.by}"
    return text


def _add_image(slide, block: ImageBlock) -> None:
    if not block.data_url:
        logger.debug(f"Skipping image block {block.id} without dataUrl")
        return
    data = decode_data_url(block.data_url)
    left, top, width, height = frame_to_emu(block.frame)
    try:
        slide.shapes.add_picture(BytesIO(data), left, top, width, height)
    except (OSError, ValueError) as e:
        raise ExportError(f"Image block {block.id} is not a readable image: {e}") from e


def _add_chart(slide, block: ChartBlock) -> None:
    if not block.dataset:
        logger.warning(f"Skipping chart block {block.id} without series")
        return

    longest = max(len(series.values) for series in block.dataset)
    categories = block.x_labels or [str(i + 1) for i in range(longest)]
    if not categories:
        logger.warning(f"Skipping chart block {block.id} without data points")
        return

    chart_data = CategoryChartData()
    chart_data.categories = categories
    for series in block.dataset:
        chart_data.add_series(series.name, series.values)

    left, top, width, height = frame_to_emu(block.frame)
    graphic_frame = slide.shapes.add_chart(
        CHART_TYPES[block.chart_type], left, top, width, height, chart_data
    )
    chart = graphic_frame.chart
    if block.chart_type == ChartType.PIE and len(block.dataset) > 1:
        # The pie writer only emits the first series
        chart.replace_data(chart_data)
    plot = chart.plots[0]

    if block.chart_type == ChartType.PIE:
        chart.has_legend = True
        for index, point in enumerate(plot.series[0].points):
            point.format.fill.solid()
            point.format.fill.fore_color.rgb = RGBColor.from_string(
                CHART_PALETTE[index % len(CHART_PALETTE)]
            )
    else:
        chart.has_legend = len(block.dataset) > 1
        for index, series in enumerate(plot.series):
            color = RGBColor.from_string(CHART_PALETTE[index % len(CHART_PALETTE)])
            if block.chart_type == ChartType.LINE:
                series.format.line.color.rgb = color
            else:
                series.format.fill.solid()
                series.format.fill.fore_color.rgb = color
        if block.y_label:
            axis = chart.value_axis
            axis.has_title = True
            axis.axis_title.text_frame.text = block.y_label

    if chart.has_legend:
        chart.legend.position = XL_LEGEND_POSITION.BOTTOM
        chart.legend.include_in_layout = False


def _set_background(slide, theme: Theme) -> None:
    fill = slide.background.fill
    fill.solid()
    fill.fore_color.rgb = RGBColor.from_string(theme.background_top)


def _render_slide(prs: PptxPresentation, slide: Slide, theme: Theme) -> None:
    pptx_slide = prs.slides.add_slide(prs.slide_layouts[BLANK_LAYOUT_INDEX])
    _set_background(pptx_slide, theme)

    if slide.title:
        box = pptx_slide.shapes.add_textbox(
            Inches(0.5), Inches(0.3), Inches(9), Inches(0.7)
        )
        run = box.text_frame.paragraphs[0].add_run()
        run.text = slide.title
        _style_run(run, theme, 28, bold=True)

    if slide.notes:
        pptx_slide.notes_slide.notes_text_frame.text = slide.notes

    for block in slide.blocks:
        if isinstance(block, TextBlock):
            _add_text(pptx_slide, block.frame, html_to_text(block.html), theme, 14)
        elif isinstance(block, BulletBlock):
            _add_bullets(pptx_slide, block, theme)
        elif isinstance(block, KpiBlock):
            _add_text(pptx_slide, block.frame, kpi_text(block), theme, 18, bold=True)
        elif isinstance(block, QuoteBlock):
            _add_text(pptx_slide, block.frame, quote_text(block), theme, 16, italic=True)
        elif isinstance(block, ImageBlock):
            _add_image(pptx_slide, block)
        elif isinstance(block, ChartBlock):
            _add_chart(pptx_slide, block)


def _created_at(deck: Deck) -> datetime:
    try:
        created = datetime.fromisoformat(deck.created_at.replace("Z", "+00:00"))
    except ValueError:
        return _FALLBACK_CREATED
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return created


def build_presentation(deck: Deck) -> PptxPresentation:
    """Build a python-pptx presentation for a deck.

    Args:
        deck: Validated deck

    Returns:
        Presentation with one slide per deck slide

    Raises:
        ExportError: If an embedded image cannot be decoded or a slide
            cannot be rendered
    """
    theme = get_theme(deck.theme)
    prs = Presentation()
    prs.slide_width = SLIDE_WIDTH
    prs.slide_height = SLIDE_HEIGHT

    props = prs.core_properties
    created = _created_at(deck)
    props.title = deck.title
    props.author = "deckcraft"
    props.last_modified_by = "deckcraft"
    props.revision = 1
    props.created = created
    props.modified = created

    for index, slide in enumerate(deck.slides):
        try:
            _render_slide(prs, slide, theme)
        except (KeyError, ValueError) as e:
            raise ExportError(f"Failed to render slide {index + 1}: {e}") from e
    return prs


def _normalize_zip(blob: bytes) -> bytes:
    """Rewrite a zip package with fixed entry timestamps."""
    out = BytesIO()
    with zipfile.ZipFile(BytesIO(blob)) as source, zipfile.ZipFile(
        out, "w", zipfile.ZIP_DEFLATED
    ) as target:
        for info in source.infolist():
            entry = zipfile.ZipInfo(info.filename, date_time=_ZIP_EPOCH)
            entry.compress_type = zipfile.ZIP_DEFLATED
            target.writestr(entry, source.read(info.filename))
    return out.getvalue()


@log_exceptions(logger, expected=(ExportError,))
def export_pptx(deck: Deck) -> bytes:
    """Export a deck to PPTX bytes.

    Raises:
        ExportError: If the deck cannot be rendered
    """
    logger.info(f"Exporting PPTX for deck {deck.id} ({len(deck.slides)} slides)")
    prs = build_presentation(deck)
    buffer = BytesIO()
    prs.save(buffer)
    return _normalize_zip(buffer.getvalue())


def export_pptx_base64(deck: Deck) -> str:
    """Export a deck to base64-encoded PPTX for the host."""
    return base64.b64encode(export_pptx(deck)).decode("ascii")


@log_exceptions(logger, expected=(ExportError,))
async def export_pptx_base64_async(deck: Deck) -> str:
    """Export base64 PPTX in a worker thread.

    The caller must pass a deck snapshot taken before awaiting.
    """
    return await asyncio.to_thread(export_pptx_base64, deck)

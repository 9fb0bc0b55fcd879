"""Deck, slide and block schemas.

The wire format is JSON with camelCase keys (``createdAt``, ``chartType``,
``dataUrl``...). Python attributes are snake_case; every model accepts either
spelling and serializes by alias.

All models are frozen. Edits produce new values through ``model_copy``, so a
deck that has been handed to an exporter or pushed onto the undo history can
never change underneath its holder.
"""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    model_validator,
)
from pydantic.alias_generators import to_camel

from deckcraft_core.utils.ids import new_id
from deckcraft_core.utils.logging import get_logger

logger = get_logger(__name__)

# Slides are 10in x 5.625in (16:9); one frame unit is 1/100 inch.
UNITS_PER_INCH = 100
SLIDE_WIDTH_UNITS = 1000.0
SLIDE_HEIGHT_UNITS = 562.5


class DeckModel(BaseModel):
    """Base model for all deck document values."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class Layout(str, Enum):
    """Advisory slide layouts. Layout never constrains block kinds."""

    TITLE = "title"
    TITLE_BULLETS = "title-bullets"
    TWO_COLUMN = "two-column"
    KPI_CARDS = "kpi-cards"
    CHART = "chart"
    IMAGE = "image"
    QUOTE = "quote"
    GRID_CARDS = "grid-cards"


class ChartType(str, Enum):
    """Supported chart renderings."""

    BAR = "bar"
    LINE = "line"
    PIE = "pie"


class KpiIntent(str, Enum):
    """Sentiment of a KPI delta."""

    GOOD = "good"
    BAD = "bad"
    NEUTRAL = "neutral"


class ChartSeriesPolicy(str, Enum):
    """How to treat chart series whose length differs from ``xLabels``."""

    IGNORE = "ignore"
    WARN = "warn"
    ERROR = "error"


class Frame(DeckModel):
    """A block rectangle in slide units (0-1000 wide, 0-562.5 high)."""

    x: float = Field(..., description="Left edge")
    y: float = Field(..., description="Top edge")
    w: float = Field(
        ..., validation_alias=AliasChoices("w", "width"), description="Width"
    )
    h: float = Field(
        ..., validation_alias=AliasChoices("h", "height"), description="Height"
    )


class DataSeries(DeckModel):
    """A named numeric series of a chart."""

    name: str = Field(..., description="Series name")
    values: list[float] = Field(..., description="Ordered data points")


class BlockBase(DeckModel):
    """Fields shared by every block kind."""

    id: str = Field(
        default_factory=new_id,
        description="Stable block id, assigned at creation when omitted",
    )
    frame: Frame = Field(..., description="Position on the slide")


class TextBlock(BlockBase):
    """Rich text rendered from an HTML fragment."""

    kind: Literal["text"] = "text"
    html: str = Field(..., description="Rich-text markup")


class BulletBlock(BlockBase):
    """A bulleted list."""

    kind: Literal["bullet"] = "bullet"
    items: list[str] = Field(..., description="Bullet items in order")


class KpiBlock(BlockBase):
    """A headline metric."""

    kind: Literal["kpi"] = "kpi"
    label: str = Field(..., description="Metric label")
    value: str = Field(..., description="Metric value")
    delta: str | None = Field(None, description="Change versus a baseline")
    intent: KpiIntent | None = Field(None, description="Whether the delta is good")


class QuoteBlock(BlockBase):
    """A quotation with optional attribution."""

    kind: Literal["quote"] = "quote"
    text: str = Field(..., description="Quoted text")
    by: str | None = Field(None, description="Attribution")


class ImageBlock(BlockBase):
    """An inline or remote image."""

    kind: Literal["image"] = "image"
    data_url: str | None = Field(None, description="Inline data: URL")
    url: str | None = Field(None, description="Remote image reference")
    caption: str | None = Field(None, description="Caption text")


class ChartBlock(BlockBase):
    """A bar, line or pie chart."""

    kind: Literal["chart"] = "chart"
    chart_type: ChartType = Field(..., description="Chart rendering")
    dataset: list[DataSeries] = Field(..., description="Series to plot")
    x_labels: list[str] | None = Field(None, description="Category labels")
    y_label: str | None = Field(None, description="Value axis title")

    @model_validator(mode="after")
    def _check_series_lengths(self, info: ValidationInfo) -> "ChartBlock":
        """Apply the configured policy to series/label length mismatches."""
        context = info.context or {}
        policy = ChartSeriesPolicy(
            context.get("chart_series_policy", ChartSeriesPolicy.IGNORE)
        )
        if policy == ChartSeriesPolicy.IGNORE or self.x_labels is None:
            return self

        expected = len(self.x_labels)
        for series in self.dataset:
            if len(series.values) == expected:
                continue
            message = (
                f"series '{series.name}' has {len(series.values)} values "
                f"but xLabels has {expected}"
            )
            if policy == ChartSeriesPolicy.ERROR:
                raise ValueError(message)
            logger.warning(f"Chart block {self.id}: {message}")
        return self


Block = Annotated[
    Union[TextBlock, BulletBlock, KpiBlock, QuoteBlock, ImageBlock, ChartBlock],
    Field(discriminator="kind"),
]


class Slide(DeckModel):
    """One presentation page."""

    id: str = Field(..., description="Slide id, the merge key for patches")
    layout: Layout = Field(..., description="Advisory layout")
    title: str | None = Field(None, description="Slide title")
    notes: str | None = Field(None, description="Speaker notes")
    blocks: list[Block] = Field(..., description="Blocks in z-order")


class DeckMeta(DeckModel):
    """Provenance strings attached by the producer."""

    source: str | None = Field(None, description="Where the content came from")
    disclaimer: str | None = Field(None, description="Disclaimer text")


class Deck(DeckModel):
    """Root presentation document."""

    id: str = Field(..., description="Stable deck id")
    title: str = Field(..., description="Deck title")
    theme: str = Field(..., description="Visual theme name")
    created_at: str = Field(..., description="Creation timestamp (ISO-8601)")
    slides: list[Slide] = Field(..., description="Slides in presentation order")
    meta: DeckMeta | None = Field(None, description="Provenance metadata")
    patch: bool | None = Field(
        None, description="Producer hint that this is a partial update"
    )

    def find_slide(self, slide_id: str) -> Slide | None:
        """Return the slide with the given id, if present."""
        for slide in self.slides:
            if slide.id == slide_id:
                return slide
        return None

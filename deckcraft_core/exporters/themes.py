"""Visual themes shared by the raster and PPTX exporters."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Theme:
    """Colors for one named theme. Colors are ``RRGGBB`` hex strings."""

    name: str
    background_top: str
    background_bottom: str
    text: str
    # RGBA fill for placeholder block rectangles in raster output
    block_fill: tuple[int, int, int, int]


NEBULA = Theme(
    name="Nebula",
    background_top="0B1422",
    background_bottom="08111B",
    text="E8F0FF",
    block_fill=(255, 255, 255, 13),
)

DAYLIGHT = Theme(
    name="Daylight",
    background_top="FFFFFF",
    background_bottom="EEF2F7",
    text="0F172A",
    block_fill=(15, 23, 42, 18),
)

SLATE = Theme(
    name="Slate",
    background_top="1E293B",
    background_bottom="0F172A",
    text="F1F5F9",
    block_fill=(241, 245, 249, 20),
)

THEMES: dict[str, Theme] = {t.name.lower(): t for t in (NEBULA, DAYLIGHT, SLATE)}


def get_theme(name: str | None) -> Theme:
    """Look up a theme by name, case-insensitively. Unknown names get Nebula."""
    if not name:
        return NEBULA
    return THEMES.get(name.strip().lower(), NEBULA)


def hex_to_rgb(value: str) -> tuple[int, int, int]:
    """Convert ``RRGGBB`` to an RGB tuple."""
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)

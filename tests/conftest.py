"""Shared fixtures for deckcraft tests."""

import base64
from io import BytesIO
from typing import Any, Callable

import pytest
from PIL import Image

from deckcraft_core.config import Settings
from deckcraft_core.schemas.deck import Deck
from deckcraft_core.schemas.messages import HostCommand
from deckcraft_core.schemas.notifications import Notification
from deckcraft_core.validation.validator import validate


class RecordingTransport:
    """Host transport that records every posted command."""

    def __init__(self) -> None:
        self.commands: list[HostCommand] = []

    def post(self, command: HostCommand) -> None:
        self.commands.append(command)

    def of_type(self, type_: str) -> list[HostCommand]:
        return [c for c in self.commands if c.type == type_]


@pytest.fixture
def png_data_url() -> str:
    """A small valid PNG as a data URL."""
    buffer = BytesIO()
    Image.new("RGB", (4, 4), (255, 0, 0)).save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode()


@pytest.fixture
def make_slide() -> Callable[..., dict[str, Any]]:
    """Factory for raw slide payloads."""

    def _make(slide_id: str, title: str | None = None, blocks: list | None = None,
              layout: str = "title-bullets") -> dict[str, Any]:
        slide: dict[str, Any] = {
            "id": slide_id,
            "layout": layout,
            "blocks": blocks if blocks is not None else [],
        }
        if title is not None:
            slide["title"] = title
        return slide

    return _make


@pytest.fixture
def make_payload() -> Callable[..., dict[str, Any]]:
    """Factory for raw deck payloads."""

    def _make(slides: list[dict[str, Any]], title: str = "Quarterly Review",
              theme: str = "Nebula", deck_id: str = "deck-1") -> dict[str, Any]:
        return {
            "id": deck_id,
            "title": title,
            "theme": theme,
            "createdAt": "2026-10-01T09:00:00+00:00",
            "slides": slides,
        }

    return _make


@pytest.fixture
def sample_payload(png_data_url: str) -> dict[str, Any]:
    """A deck payload exercising every block kind."""
    return {
        "id": "deck-1",
        "title": "Quarterly Review",
        "theme": "Nebula",
        "createdAt": "2026-10-01T09:00:00+00:00",
        "meta": {"source": "assistant", "disclaimer": "Figures are unaudited"},
        "slides": [
            {
                "id": "s1",
                "layout": "title-bullets",
                "title": "Highlights",
                "notes": "Open with the headline number",
                "blocks": [
                    {
                        "id": "b-text",
                        "kind": "text",
                        "html": "<p>Strong <b>quarter</b></p>",
                        "frame": {"x": 50, "y": 110, "w": 400, "h": 60},
                    },
                    {
                        "id": "b-bullets",
                        "kind": "bullet",
                        "items": ["Revenue up", "Churn down", "Two launches"],
                        "frame": {"x": 50, "y": 180, "w": 400, "h": 200},
                    },
                    {
                        "id": "b-kpi",
                        "kind": "kpi",
                        "label": "Revenue",
                        "value": "$4.2M",
                        "delta": "+12%",
                        "intent": "good",
                        "frame": {"x": 550, "y": 110, "w": 300, "h": 100},
                    },
                ],
            },
            {
                "id": "s2",
                "layout": "chart",
                "title": "Details",
                "blocks": [
                    {
                        "id": "b-quote",
                        "kind": "quote",
                        "text": "Best quarter yet",
                        "by": "CEO",
                        "frame": {"x": 50, "y": 110, "w": 400, "h": 80},
                    },
                    {
                        "id": "b-image",
                        "kind": "image",
                        "dataUrl": png_data_url,
                        "caption": "Team offsite",
                        "frame": {"x": 50, "y": 220, "w": 200, "h": 200},
                    },
                    {
                        "id": "b-chart",
                        "kind": "chart",
                        "chartType": "bar",
                        "dataset": [
                            {"name": "2025", "values": [1, 2, 3]},
                            {"name": "2026", "values": [2, 3, 4]},
                        ],
                        "xLabels": ["Q1", "Q2", "Q3"],
                        "yLabel": "Revenue ($M)",
                        "frame": {"x": 500, "y": 110, "w": 450, "h": 380},
                    },
                ],
            },
        ],
    }


@pytest.fixture
def sample_deck(sample_payload: dict[str, Any]) -> Deck:
    """The sample payload as a validated deck."""
    result = validate(sample_payload)
    assert result.deck is not None, result.issues
    return result.deck


@pytest.fixture
def test_settings() -> Settings:
    """Settings with small limits for fast tests."""
    return Settings(
        history_limit=3,
        autosave_interval=0.01,
        delivery_max_attempts=2,
    )


@pytest.fixture
def notifications() -> list[Notification]:
    """Collector list for notifications."""
    return []


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()

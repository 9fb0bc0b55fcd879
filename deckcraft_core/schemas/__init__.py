"""Data schemas for decks and host messages.

This module exports the deck document model (decks, slides and the closed
block union), user-facing notifications and the typed messages exchanged with
the host application.
"""

from deckcraft_core.schemas.deck import (
    Block,
    BulletBlock,
    ChartBlock,
    ChartSeriesPolicy,
    ChartType,
    DataSeries,
    Deck,
    DeckMeta,
    Frame,
    ImageBlock,
    KpiBlock,
    KpiIntent,
    Layout,
    QuoteBlock,
    Slide,
    TextBlock,
)
from deckcraft_core.schemas.messages import (
    AIResultEvent,
    AutosaveDeckCommand,
    ExportImagesCommand,
    ExportPptxCommand,
    HostCommand,
    HostEvent,
    InvokeAICommand,
    LoadDeckResultEvent,
    NotifyCommand,
    SaveDeckCommand,
    parse_host_event,
)
from deckcraft_core.schemas.notifications import Notification, NotificationType

__all__ = [
    # Deck document
    "Deck",
    "DeckMeta",
    "Slide",
    "Layout",
    "Frame",
    # Blocks
    "Block",
    "TextBlock",
    "BulletBlock",
    "KpiBlock",
    "KpiIntent",
    "QuoteBlock",
    "ImageBlock",
    "ChartBlock",
    "ChartType",
    "ChartSeriesPolicy",
    "DataSeries",
    # Notifications
    "Notification",
    "NotificationType",
    # Host messages
    "AIResultEvent",
    "LoadDeckResultEvent",
    "HostEvent",
    "parse_host_event",
    "HostCommand",
    "NotifyCommand",
    "AutosaveDeckCommand",
    "SaveDeckCommand",
    "ExportPptxCommand",
    "ExportImagesCommand",
    "InvokeAICommand",
]

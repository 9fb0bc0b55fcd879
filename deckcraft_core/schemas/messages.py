"""Typed messages exchanged with the host application.

Inbound events arrive from the host bridge (AI results, decks opened from
disk). Outbound commands are posted to the host (notifications, exports, AI
invocations). Both are discriminated on ``type``, whose values are the host's
message handler names.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from deckcraft_core.schemas.notifications import Notification


class HostMessage(BaseModel):
    """Base model for bridge messages."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_payload(self) -> dict[str, Any]:
        """Serialize for the host bridge (camelCase, no null fields)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# Inbound events


class AIResultEvent(HostMessage):
    """A deck produced by the AI provider."""

    type: Literal["aiResult"] = "aiResult"
    deck: Any = Field(None, description="Deck payload as object or JSON string")
    patch: bool = Field(False, description="Merge into the current deck")
    request_id: str | None = Field(
        None, description="Echo of the InvokeAICommand request id"
    )


class LoadDeckResultEvent(HostMessage):
    """A deck opened by the host, always a full load."""

    type: Literal["loadDeckResult"] = "loadDeckResult"
    deck: Any = Field(None, description="Deck payload as object or JSON string")


HostEvent = Annotated[
    Union[AIResultEvent, LoadDeckResultEvent],
    Field(discriminator="type"),
]

host_event_adapter: TypeAdapter[HostEvent] = TypeAdapter(HostEvent)


def parse_host_event(payload: dict[str, Any]) -> HostEvent:
    """Parse a raw host payload into a typed event.

    Raises:
        pydantic.ValidationError: If the payload is not a known event
    """
    return host_event_adapter.validate_python(payload)


# Outbound commands


class NotifyCommand(HostMessage):
    """Show a transient notification."""

    type: Literal["toast"] = "toast"
    notification: Notification


class AutosaveDeckCommand(HostMessage):
    """Periodic save of the current deck."""

    type: Literal["autosaveDeck"] = "autosaveDeck"
    deck: dict[str, Any]


class SaveDeckCommand(HostMessage):
    """User-requested save of the deck JSON."""

    type: Literal["saveDeck"] = "saveDeck"
    deck: dict[str, Any]


class ExportPptxCommand(HostMessage):
    """A rendered PPTX file, base64 encoded."""

    type: Literal["exportPPTX"] = "exportPPTX"
    pptx_base64: str


class ExportImagesCommand(HostMessage):
    """Rendered slide images as PNG data URLs, in slide order."""

    type: Literal["exportPDF"] = "exportPDF"
    images: list[str]


class InvokeAICommand(HostMessage):
    """Ask the host to run an AI turn."""

    type: Literal["invokeAI"] = "invokeAI"
    prompt: str
    context: dict[str, Any] | None = None
    tool: str
    request_id: str
    intent: str | None = None


HostCommand = Union[
    NotifyCommand,
    AutosaveDeckCommand,
    SaveDeckCommand,
    ExportPptxCommand,
    ExportImagesCommand,
    InvokeAICommand,
]

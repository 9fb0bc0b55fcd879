"""Boundary adapter between the host application and the document store.

The store only exposes synchronous, return-value based operations. This
adapter is the single place that turns host events into store calls and store
results into outbound commands (notifications, exports, AI invocations).
"""

from __future__ import annotations

from typing import Any

import structlog
from pydantic import ValidationError

from deckcraft_core.bridge.ai import AIIntent, build_prompt, build_repair_prompt
from deckcraft_core.bridge.autosave import AutosaveTimer
from deckcraft_core.bridge.channel import NotificationChannel
from deckcraft_core.bridge.transport import HostTransport
from deckcraft_core.config import Settings, settings as default_settings
from deckcraft_core.errors import ExportError
from deckcraft_core.exporters.json_deck import deck_payload
from deckcraft_core.exporters.native import export_pptx_base64_async
from deckcraft_core.exporters.raster import render_slide_data_urls_async
from deckcraft_core.schemas.deck import Deck
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
from deckcraft_core.schemas.notifications import Notification
from deckcraft_core.store.document_store import DocumentStore, LoadResult
from deckcraft_core.utils.ids import new_id
from deckcraft_core.utils.retry import RETRYABLE_EXCEPTIONS, with_retry

logger = structlog.get_logger()

STALE_RESPONSE_MESSAGE = "Ignored an outdated AI response"


class BridgeAdapter:
    """Translates between host messages and the document store."""

    def __init__(
        self,
        store: DocumentStore,
        transport: HostTransport,
        channel: NotificationChannel,
        settings: Settings | None = None,
    ):
        """Wire the adapter.

        Args:
            store: Document store; its notifier should be ``channel``
            transport: Destination for outbound commands
            channel: Notification channel forwarded to the host
            settings: Settings override
        """
        self.store = store
        self.channel = channel
        self._transport = transport
        self._settings = settings or default_settings
        self._in_flight: str | None = None
        self._autosave_timer = AutosaveTimer(
            self.autosave, self._settings.autosave_interval
        )
        channel.subscribe(self._forward_notification)

    @property
    def in_flight_request(self) -> str | None:
        return self._in_flight

    # Outbound delivery

    def _forward_notification(self, notification: Notification) -> None:
        # Notifications are fire-and-forget: no retry
        self._transport.post(NotifyCommand(notification=notification))

    async def _deliver(self, command: HostCommand) -> bool:
        """Post a command, retrying transient failures.

        Returns:
            False if delivery failed after all retries
        """
        try:
            await with_retry(
                self._transport.post,
                command,
                max_attempts=self._settings.delivery_max_attempts,
                operation_name=f"deliver {command.type}",
            )
        except RETRYABLE_EXCEPTIONS as e:
            logger.error("delivery_failed", command=command.type, error=str(e))
            self.channel.error(f"Could not reach the host: {e}")
            return False
        return True

    # Inbound events

    def handle_event(self, event: HostEvent | dict[str, Any]) -> LoadResult | None:
        """Dispatch a host event to the store.

        Args:
            event: Typed event or raw host payload

        Returns:
            The store's load result, or None if the event was dropped
        """
        if isinstance(event, dict):
            try:
                event = parse_host_event(event)
            except ValidationError as e:
                logger.warning("invalid_host_event", errors=e.error_count())
                return None

        if isinstance(event, LoadDeckResultEvent):
            if event.deck is None:
                logger.info("load_deck_result_empty")
                return None
            return self._load(event.deck, is_patch=False)

        if isinstance(event, AIResultEvent):
            if event.request_id is not None:
                if event.request_id != self._in_flight:
                    logger.warning(
                        "stale_ai_response",
                        request_id=event.request_id,
                        in_flight=self._in_flight,
                    )
                    self.channel.info(STALE_RESPONSE_MESSAGE)
                    return None
            if event.deck is None:
                logger.info("ai_result_without_deck", request_id=event.request_id)
                return None
            return self._load(event.deck, is_patch=event.patch)

        return None

    def _load(self, data: Any, is_patch: bool) -> LoadResult:
        result = self.store.load(data, is_patch=is_patch)
        if result.ok and result.deck is not None:
            logger.info(
                "deck_loaded",
                deck_id=result.deck.id,
                slides=len(result.deck.slides),
                patch=is_patch,
                merged=result.merged,
                repaired=result.repaired,
            )
        else:
            logger.warning("deck_rejected", patch=is_patch)
        return result

    # AI invocation

    def invoke_ai(
        self,
        text: str,
        intent: AIIntent | str = AIIntent.CREATE,
        include_context: bool = True,
    ) -> str:
        """Ask the host to run an AI turn.

        A new request supersedes the previous one: responses carrying the
        older request id are dropped. Responses to the latest request are
        accepted until the next request, so a host may stream several patches
        for one turn.

        Returns:
            The request id the host must echo in its AIResultEvent
        """
        intent = AIIntent(intent)
        context: dict[str, Any] = {"intent": intent.value}
        deck = self.store.snapshot()
        if include_context and deck is not None:
            selection = self.store.selection
            context["deck"] = deck_payload(deck)
            context["selection"] = {
                "slideId": selection.slide_id,
                "blockId": selection.block_id,
            }
        return self._send_ai_request(build_prompt(intent, text), context, intent)

    def request_model_repair(self, broken: str) -> str:
        """Ask the model to restructure an invalid deck without changing content."""
        return self._send_ai_request(
            build_repair_prompt(broken),
            {"intent": AIIntent.REPAIR.value},
            AIIntent.REPAIR,
        )

    def _send_ai_request(
        self, prompt: str, context: dict[str, Any], intent: AIIntent
    ) -> str:
        if self._in_flight is not None:
            logger.info("ai_request_superseded", request_id=self._in_flight)
        request_id = new_id()
        self._in_flight = request_id
        self._transport.post(
            InvokeAICommand(
                prompt=prompt,
                context=context,
                tool=self._settings.ai_tool_id,
                request_id=request_id,
                intent=intent.value,
            )
        )
        logger.info("ai_request_sent", request_id=request_id, intent=intent.value)
        return request_id

    # Exports

    async def export_pptx(self) -> bool:
        """Render the current deck to PPTX and post it to the host."""
        deck = self.store.snapshot()
        if deck is None:
            return False
        try:
            payload = await export_pptx_base64_async(deck)
        except ExportError as e:
            return self._export_failed("PPTX", deck, e)
        return await self._deliver(ExportPptxCommand(pptx_base64=payload))

    async def export_images(self) -> bool:
        """Render the current deck's slides to PNGs and post them to the host."""
        deck = self.store.snapshot()
        if deck is None:
            return False
        try:
            images = await render_slide_data_urls_async(
                deck, settings=self._settings
            )
        except ExportError as e:
            return self._export_failed("image", deck, e)
        return await self._deliver(ExportImagesCommand(images=images))

    def _export_failed(self, kind: str, deck: Deck, error: ExportError) -> bool:
        logger.error("export_failed", kind=kind, deck_id=deck.id, error=str(error))
        self.channel.error(f"{kind} export failed: {error}")
        return False

    async def save_deck(self) -> bool:
        """Post the current deck JSON to the host for saving."""
        deck = self.store.snapshot()
        if deck is None:
            return False
        return await self._deliver(SaveDeckCommand(deck=deck_payload(deck)))

    # Autosave

    async def autosave(self) -> bool:
        """Post the current deck for autosave; no-op without a deck."""
        saved: list[Deck] = []
        if not self.store.autosave(saved.append):
            return False
        return await self._deliver(AutosaveDeckCommand(deck=deck_payload(saved[0])))

    def start_autosave(self) -> None:
        self._autosave_timer.start()

    async def shutdown(self) -> None:
        """Stop background work. Call before tearing down the transport."""
        await self._autosave_timer.stop()


def create_bridge(
    transport: HostTransport, settings: Settings | None = None
) -> BridgeAdapter:
    """Build a store, notification channel and adapter wired together."""
    channel = NotificationChannel()
    store = DocumentStore(settings=settings, notify=channel)
    return BridgeAdapter(store, transport, channel, settings=settings)

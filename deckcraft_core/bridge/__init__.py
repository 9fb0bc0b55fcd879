"""Host bridge: typed messaging between the host application and the store."""

from deckcraft_core.bridge.adapter import BridgeAdapter, create_bridge
from deckcraft_core.bridge.ai import AIIntent, build_prompt, build_repair_prompt
from deckcraft_core.bridge.autosave import AutosaveTimer
from deckcraft_core.bridge.channel import NotificationChannel
from deckcraft_core.bridge.transport import HostTransport, StreamTransport

__all__ = [
    "BridgeAdapter",
    "create_bridge",
    "AIIntent",
    "build_prompt",
    "build_repair_prompt",
    "AutosaveTimer",
    "NotificationChannel",
    "HostTransport",
    "StreamTransport",
]

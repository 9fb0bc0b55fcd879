"""Host transports: where outbound commands are posted."""

import json
from typing import Protocol, TextIO

from deckcraft_core.schemas.messages import HostCommand


class HostTransport(Protocol):
    """Posts commands to the host application. Fire-and-forget."""

    def post(self, command: HostCommand) -> None: ...


class StreamTransport:
    """Writes each command as one JSON line to a text stream.

    Suitable for hosts that drive the editor as a subprocess over stdio.
    """

    def __init__(self, stream: TextIO):
        self._stream = stream

    def post(self, command: HostCommand) -> None:
        self._stream.write(json.dumps(command.to_payload(), ensure_ascii=False))
        self._stream.write("\n")
        self._stream.flush()

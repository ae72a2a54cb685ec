"""
Voice connector over the chat bridge.

The chat bridge process owns the real chat-platform client, so joining
a voice channel is expressed as a control frame for the bridge:

    {"type": "JOIN_VOICE", "channel_id": ...}
    {"type": "LEAVE_VOICE", "channel_id": ...}

Frames belong to the message whose command produced them. The gateway
opens a collect_control() scope around each message; frames emitted
inside it are returned with that message's replies. Frames emitted
outside any scope are buffered FIFO until drain_control().
"""

from __future__ import annotations

from collections import deque
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator

from observability.logger import log_event, now_ms


# Per-message outbox; asyncio tasks inherit it from the dispatching message
_message_control: ContextVar[list[dict[str, Any]] | None] = ContextVar(
    "message_control",
    default=None,
)


class BridgeVoiceConnection:
    """Handle for one joined channel. Disconnect is idempotent."""

    def __init__(self, *, connector: BridgeVoiceConnector, channel_id: str) -> None:
        self._connector = connector
        self.channel_id = channel_id
        self._connected = True

    @property
    def connected(self) -> bool:
        return self._connected

    async def disconnect(self) -> None:
        if not self._connected:
            return
        self._connected = False
        self._connector.enqueue_control({
            "type": "LEAVE_VOICE",
            "channel_id": self.channel_id,
            "ts_ms": now_ms(),
        })


class BridgeVoiceConnector:
    """VoiceConnectorProtocol implementation."""

    def __init__(self) -> None:
        self._control_out: deque[dict[str, Any]] = deque()

    async def join(self, channel_id: str) -> BridgeVoiceConnection:
        self.enqueue_control({
            "type": "JOIN_VOICE",
            "channel_id": channel_id,
            "ts_ms": now_ms(),
        })
        log_event({"event_type": "VOICE_JOIN_REQUESTED", "channel_id": channel_id})
        return BridgeVoiceConnection(connector=self, channel_id=channel_id)

    def enqueue_control(self, msg: dict[str, Any]) -> None:
        outbox = _message_control.get()
        if outbox is not None:
            outbox.append(msg)
        else:
            self._control_out.append(msg)

    @contextmanager
    def collect_control(self) -> Iterator[list[dict[str, Any]]]:
        """
        Scope control frames to the current message.

        Yields the list that receives every frame emitted by this task
        (and tasks it spawns) until the scope exits.
        """
        outbox: list[dict[str, Any]] = []
        token = _message_control.set(outbox)
        try:
            yield outbox
        finally:
            _message_control.reset(token)

    def drain_control(self) -> tuple[dict[str, Any], ...]:
        """
        Atomically drain control frames emitted outside any message scope.

        Returns a FIFO-ordered tuple, empty if nothing is pending.
        """
        if not self._control_out:
            return ()
        out = tuple(self._control_out)
        self._control_out.clear()
        return out

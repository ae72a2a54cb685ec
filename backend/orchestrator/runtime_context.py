"""
Collaborator capabilities consumed by the session state machine.

This module contains:
- Narrow Protocols (capabilities, not implementations)
- Zero orchestration logic
- Zero state mutation

Concrete implementations live under adapters/ (browser recorder,
voice bridge, video host upload). Tests provide in-memory fakes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, runtime_checkable


# ---------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------

@runtime_checkable
class RecorderProtocol(Protocol):
    """
    One active capture (screen + voice audio).

    Contract:
    - start() begins capture and returns the capture start timestamp
    - stop() finalizes capture and returns the encoded webm bytes
    - started_at is valid after start() returned
    - debug mode is scoped to this instance and defaults to off
    - close() releases the underlying page; safe to call twice
    """

    @property
    def started_at(self) -> datetime: ...

    async def start(self) -> datetime: ...
    async def stop(self) -> bytes: ...
    async def take_shot(self) -> bytes: ...
    async def toggle_debug(self) -> bool: ...
    async def set_screen_url(self, url: str | None) -> None: ...
    async def close(self) -> None: ...


@runtime_checkable
class RecorderFactoryProtocol(Protocol):
    """Creates a fresh Recorder per session."""

    async def create(
        self,
        *,
        screen_url: str | None,
        voice_channel_id: str,
        text_channel_id: str,
    ) -> RecorderProtocol: ...


# ---------------------------------------------------------------------
# Voice
# ---------------------------------------------------------------------

@runtime_checkable
class VoiceConnectionProtocol(Protocol):
    """Joined voice channel. Owned by the Recording/Saving variant."""

    channel_id: str

    async def disconnect(self) -> None: ...


@runtime_checkable
class VoiceConnectorProtocol(Protocol):
    async def join(self, channel_id: str) -> VoiceConnectionProtocol: ...


# ---------------------------------------------------------------------
# Upload
# ---------------------------------------------------------------------

@runtime_checkable
class UploaderProtocol(Protocol):
    """
    Video host upload client.

    Returns the remote video id. Raises on any failure; the caller
    recovers by saving locally.
    """

    async def upload(
        self,
        *,
        data: bytes,
        title: str,
        description: str,
        privacy_status: str,
        mime_type: str,
    ) -> str: ...

# pylint: disable=missing-module-docstring,missing-function-docstring,missing-class-docstring

from __future__ import annotations

import asyncio
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

from orchestrator.runtime_context import VoiceConnectorProtocol
from orchestrator.saving import UploadFallbackManager
from orchestrator.state_machine import SessionStateMachine


RECORDER_STARTED_AT = datetime(2024, 1, 1, 9, 30, 15)
SAVE_CLOCK_NOW = datetime(2024, 1, 2, 3, 4, 5)


# ---------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------

class FakeRecorder:
    def __init__(
        self,
        *,
        screen_url: str | None = None,
        data: bytes = b"\x1aE\xdf\xa3webm-payload",
        shot: bytes = b"\x89PNG-shot",
        started_at: datetime = RECORDER_STARTED_AT,
        fail_start: Exception | None = None,
        fail_stop: Exception | None = None,
        start_gate: asyncio.Event | None = None,
        stop_gate: asyncio.Event | None = None,
    ) -> None:
        self.screen_url = screen_url
        self.data = data
        self.shot = shot
        self._start_ts = started_at
        self._started_at: datetime | None = None
        self.fail_start = fail_start
        self.fail_stop = fail_stop
        self.start_gate = start_gate
        self.stop_gate = stop_gate

        self.debug = False
        self.start_calls = 0
        self.stop_calls = 0
        self.closed = False

    @property
    def started_at(self) -> datetime:
        assert self._started_at is not None
        return self._started_at

    async def start(self) -> datetime:
        self.start_calls += 1
        if self.start_gate is not None:
            await self.start_gate.wait()
        if self.fail_start is not None:
            raise self.fail_start
        self._started_at = self._start_ts
        return self._started_at

    async def stop(self) -> bytes:
        self.stop_calls += 1
        if self.stop_gate is not None:
            await self.stop_gate.wait()
        if self.fail_stop is not None:
            raise self.fail_stop
        return self.data

    async def take_shot(self) -> bytes:
        return self.shot

    async def toggle_debug(self) -> bool:
        self.debug = not self.debug
        return self.debug

    async def set_screen_url(self, url: str | None) -> None:
        self.screen_url = url

    async def close(self) -> None:
        self.closed = True


class FakeRecorderFactory:
    def __init__(
        self,
        *,
        fail: Exception | None = None,
        gate: asyncio.Event | None = None,
        recorder_kwargs: dict[str, Any] | None = None,
    ) -> None:
        self.fail = fail
        self.gate = gate
        self.recorder_kwargs = recorder_kwargs or {}
        self.created: list[FakeRecorder] = []
        self.calls: list[dict[str, Any]] = []

    async def create(
        self,
        *,
        screen_url: str | None,
        voice_channel_id: str,
        text_channel_id: str,
    ) -> FakeRecorder:
        self.calls.append({
            "screen_url": screen_url,
            "voice_channel_id": voice_channel_id,
            "text_channel_id": text_channel_id,
        })
        if self.gate is not None:
            await self.gate.wait()
        if self.fail is not None:
            raise self.fail
        recorder = FakeRecorder(screen_url=screen_url, **self.recorder_kwargs)
        self.created.append(recorder)
        return recorder


# ---------------------------------------------------------------------
# Voice
# ---------------------------------------------------------------------

class FakeVoiceConnection:
    def __init__(self, channel_id: str) -> None:
        self.channel_id = channel_id
        self.disconnected = False

    async def disconnect(self) -> None:
        self.disconnected = True


class FakeVoiceConnector:
    def __init__(self, *, fail: Exception | None = None) -> None:
        self.fail = fail
        self.connections: list[FakeVoiceConnection] = []

    async def join(self, channel_id: str) -> FakeVoiceConnection:
        if self.fail is not None:
            raise self.fail
        conn = FakeVoiceConnection(channel_id)
        self.connections.append(conn)
        return conn


# ---------------------------------------------------------------------
# Upload
# ---------------------------------------------------------------------

class FakeUploader:
    def __init__(self, *, video_id: str = "dQw4w9WgXcQ", fail: Exception | None = None) -> None:
        self.video_id = video_id
        self.fail = fail
        self.calls: list[dict[str, Any]] = []

    async def upload(
        self,
        *,
        data: bytes,
        title: str,
        description: str,
        privacy_status: str,
        mime_type: str,
    ) -> str:
        self.calls.append({
            "data": data,
            "title": title,
            "description": description,
            "privacy_status": privacy_status,
            "mime_type": mime_type,
        })
        if self.fail is not None:
            raise self.fail
        return self.video_id


# ---------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------

def make_machine(
    tmp_path: Path,
    *,
    factory: FakeRecorderFactory | None = None,
    voice: VoiceConnectorProtocol | None = None,
    uploader: FakeUploader | None = None,
    upload_disabled: bool = False,
    save_clock: Callable[[], datetime] = lambda: SAVE_CLOCK_NOW,
    start_timeout_s: float = 5.0,
) -> SessionStateMachine:
    """Machine rooted at tmp_path/app, so fallback files land in tmp_path/video."""
    root_dir = tmp_path / "app"
    root_dir.mkdir(exist_ok=True)
    saver = UploadFallbackManager(
        root_dir=root_dir,
        uploader=uploader,
        upload_disabled=upload_disabled,
        clock=save_clock,
    )
    return SessionStateMachine(
        recorder_factory=factory or FakeRecorderFactory(),
        voice_connector=voice or FakeVoiceConnector(),
        saver=saver,
        start_timeout_s=start_timeout_s,
    )


async def wait_until(predicate: Callable[[], bool], *, max_spins: int = 1000) -> None:
    """Yield to the loop until predicate holds."""
    for _ in range(max_spins):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition never became true")

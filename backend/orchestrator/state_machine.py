"""
Session state machine for the single recording slot.

Responsibilities:
- Own the process-wide session slot (exactly one variant at a time)
- Validate every command against the legality rules
- Drive the recorder, the voice connector and the upload/fallback
  protocol through a session's lifecycle
- Return the slot to Ready after any fault in start or stop

Non-responsibilities:
- Parsing chat text or rendering replies (gateway)
- Capture internals (recorder adapter)
- Upload transport (upload adapter)
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from datetime import datetime
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, TypeVar

from orchestrator.commands import CommandType
from orchestrator.errors import (
    CommandError,
    RecorderOperationError,
    RecorderStartError,
    RecordSaveError,
)
from orchestrator.legality import ensure_legal
from orchestrator.runtime_context import (
    RecorderFactoryProtocol,
    RecorderProtocol,
    VoiceConnectionProtocol,
    VoiceConnectorProtocol,
)
from orchestrator.saving import SaveResult, UploadFallbackManager
from orchestrator.state_dataclass import (
    Ready,
    Recording,
    Saving,
    SessionState,
    Starting,
)

from observability.logger import log_event

from spec import MSG_NO_VOICE_CHANNEL, START_TIMEOUT_S_DEFAULT


T = TypeVar("T")


def _describe(exc: BaseException) -> str:
    text = str(exc)
    return f"{type(exc).__name__}: {text}" if text else type(exc).__name__


class SessionStateMachine:
    """
    Single owner of the session slot.

    Guarantees:
    - Every public operation holds one asyncio.Lock for its full duration,
      including the blocking calls into collaborators
    - A command that is illegal in the current variant is rejected at
      once, without waiting for an in-flight operation to finish
    - Illegal commands raise CommandError and leave the slot untouched
    - start() never leaves the slot in Starting; stop() never leaves it
      in Saving
    - Recorder and voice connection are released whenever the slot
      returns to Ready
    """

    def __init__(
        self,
        *,
        recorder_factory: RecorderFactoryProtocol,
        voice_connector: VoiceConnectorProtocol,
        saver: UploadFallbackManager,
        start_timeout_s: float = START_TIMEOUT_S_DEFAULT,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._recorder_factory = recorder_factory
        self._voice_connector = voice_connector
        self._saver = saver
        self._start_timeout_s = start_timeout_s
        self._clock = clock

        self._state: SessionState = Ready()
        self._lock = asyncio.Lock()

    @property
    def state(self) -> SessionState:
        """
        Current slot variant.

        Variants are frozen; consumers must never try to swap them.
        """
        return self._state

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def set_screen_url(self, url: str | None) -> None:
        async with self._admit(CommandType.SET_SCREEN_URL):
            if isinstance(self._state, Recording):
                await self._call_recorder(
                    "set_screen_url",
                    lambda rec: rec.set_screen_url(url),
                )
            else:
                self._state = Ready(screen_url=url)

            log_event({
                "event_type": "SCREEN_URL_SET",
                "state": self._state.state_type.value,
                "screen_url": url,
            })

    async def start(
        self,
        *,
        voice_channel_id: str | None,
        text_channel_id: str,
    ) -> datetime:
        """
        Ready -> Starting -> Recording.

        Returns the recorder's start timestamp.

        Raises:
            CommandError if not Ready or no voice channel was given.
            RecorderStartError if acquisition fails or times out; the
            slot is back in Ready with its screen url kept.
        """
        async with self._admit(CommandType.START):
            if not voice_channel_id:
                raise CommandError(MSG_NO_VOICE_CHANNEL)

            assert isinstance(self._state, Ready)
            screen_url = self._state.screen_url
            self._transition(Starting())

            held: dict[str, Any] = {}
            try:
                await asyncio.wait_for(
                    self._acquire(
                        held,
                        screen_url=screen_url,
                        voice_channel_id=voice_channel_id,
                        text_channel_id=text_channel_id,
                    ),
                    timeout=self._start_timeout_s,
                )
            except BaseException as exc:
                await self._release(held.get("recorder"), held.get("voice"))
                self._transition(Ready(screen_url=screen_url))
                log_event({
                    "event_type": "RECORDER_START_FAILED",
                    "error": _describe(exc),
                })
                if not isinstance(exc, Exception):
                    # cancellation / interpreter exit: roll back, then propagate as-is
                    raise
                raise RecorderStartError(_describe(exc)) from exc

            assert isinstance(self._state, Recording)
            return self._state.started_at

    async def stop(self) -> SaveResult:
        """
        Recording -> Saving -> Ready.

        The slot reaches Ready only after the upload/fallback protocol
        finished, so no new session starts while a save is in flight.

        Raises:
            CommandError unless Recording.
            RecordSaveError if finalizing or the local save failed.
        """
        async with self._admit(CommandType.STOP):
            assert isinstance(self._state, Recording)

            recording = self._state
            self._transition(Saving())

            try:
                data = await recording.recorder.stop()
                started_at = recording.recorder.started_at
                log_event({
                    "event_type": "RECORDER_STOPPED",
                    "bytes": len(data),
                    "started_at": started_at.isoformat(),
                })
                return await self._saver.persist(data, started_at)
            except Exception as exc:
                log_event({
                    "event_type": "RECORD_SAVE_FAILED",
                    "error": _describe(exc),
                })
                raise RecordSaveError(_describe(exc)) from exc
            finally:
                await self._release(recording.recorder, recording.voice)
                self._transition(Ready())

    async def take_shot(self) -> bytes:
        async with self._admit(CommandType.TAKE_SHOT):
            return await self._call_recorder("take_shot", lambda rec: rec.take_shot())

    async def toggle_debug(self) -> bool:
        """Returns the new debug flag of the current recorder."""
        async with self._admit(CommandType.TOGGLE_DEBUG):
            enabled = await self._call_recorder(
                "toggle_debug",
                lambda rec: rec.toggle_debug(),
            )
            log_event({"event_type": "DEBUG_TOGGLED", "enabled": enabled})
            return enabled

    # ------------------------------------------------------------------
    # Admission
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _admit(self, command_type: CommandType) -> AsyncIterator[None]:
        """
        Check legality, take the lock, check again.

        The first check answers immediately while Starting or Saving is
        in flight; the second sees whatever the previous holder left.
        """
        ensure_legal(command_type, self._state.state_type)
        async with self._lock:
            ensure_legal(command_type, self._state.state_type)
            yield

    # ------------------------------------------------------------------
    # Internals (lock already held)
    # ------------------------------------------------------------------

    async def _acquire(
        self,
        held: dict[str, Any],
        *,
        screen_url: str | None,
        voice_channel_id: str,
        text_channel_id: str,
    ) -> None:
        recorder = await self._recorder_factory.create(
            screen_url=screen_url,
            voice_channel_id=voice_channel_id,
            text_channel_id=text_channel_id,
        )
        held["recorder"] = recorder

        voice = await self._voice_connector.join(voice_channel_id)
        held["voice"] = voice

        self._transition(
            Recording(recorder=recorder, voice=voice, started_at=self._clock())
        )

        started_at = await recorder.start()
        assert isinstance(self._state, Recording)
        self._state = replace(self._state, started_at=started_at)

    async def _call_recorder(
        self,
        operation: str,
        call: Callable[[RecorderProtocol], Awaitable[T]],
    ) -> T:
        assert isinstance(self._state, Recording)
        try:
            return await call(self._state.recorder)
        except Exception as exc:
            log_event({
                "event_type": "RECORDER_OPERATION_FAILED",
                "operation": operation,
                "error": _describe(exc),
            })
            raise RecorderOperationError(_describe(exc)) from exc

    async def _release(
        self,
        recorder: RecorderProtocol | None,
        voice: VoiceConnectionProtocol | None,
    ) -> None:
        """Release session-owned resources; failures are logged only."""
        if recorder is not None:
            try:
                await recorder.close()
            except Exception as exc:  # pylint: disable=broad-exception-caught
                log_event({
                    "event_type": "RECORDER_CLOSE_FAILED",
                    "error": _describe(exc),
                })

        if voice is not None:
            try:
                await voice.disconnect()
            except Exception as exc:  # pylint: disable=broad-exception-caught
                log_event({
                    "event_type": "VOICE_DISCONNECT_FAILED",
                    "channel_id": voice.channel_id,
                    "error": _describe(exc),
                })

    def _transition(self, new_state: SessionState) -> None:
        prev = self._state
        self._state = new_state
        log_event({
            "event_type": "STATE_CHANGED",
            "from": prev.state_type.value,
            "to": new_state.state_type.value,
        })

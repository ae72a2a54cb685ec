"""
Command gateway.

Responsibilities:
- Parse inbound chat text into commands
- Reject direct messages
- Invoke the session state machine
- Convert CommandError / OperationalError into replies
- Render exactly one reply per accepted command
- Collect the bridge control frames (voice join/leave) produced while
  handling each message, and only those

NOT responsible for:
- Any state machine logic or legality rules
- Transport (WebSocket) concerns
"""

from __future__ import annotations

from contextlib import AbstractContextManager, nullcontext
from dataclasses import dataclass
from typing import Any, Callable

from orchestrator.commands import (
    Command,
    Help,
    SetScreenUrl,
    Start,
    Stop,
    TakeShot,
    ToggleDebug,
    Unknown,
    parse_command,
)
from orchestrator.errors import CommandError, OperationalError
from orchestrator.saving import SaveResult
from orchestrator.state_machine import SessionStateMachine

from session.chat_message import ChatMessage, Reply, ReplyKind
from session.help_card import build_help_embed

from observability.logger import log_event

from spec import (
    MSG_DIRECT_MESSAGE,
    MSG_INVALID_COMMAND,
    MSG_RECORDER_LAUNCHED,
    MSG_RECORDER_STOPPED,
    MSG_SCREEN_URL_SET,
    MSG_UPLOAD_FAILED,
    SCREENSHOT_FILE_NAME,
)


# ------------------------------------------------------------------
# Gateway result
# ------------------------------------------------------------------

@dataclass(frozen=True)
class GatewayResult:
    """
    Return value for gateway boundary methods.

    replies:
        Replies to deliver, in order
    control:
        Bridge control frames (voice join/leave)
    """
    replies: tuple[Reply, ...] = ()
    control: tuple[dict[str, Any], ...] = ()

    def frames(self) -> tuple[dict[str, Any], ...]:
        """Control frames first so the bridge joins voice before replying."""
        return self.control + tuple(r.to_frame() for r in self.replies)


# Opens a per-message scope yielding the list that receives its control frames
ControlScope = Callable[[], AbstractContextManager[list[dict[str, Any]]]]


def _no_control() -> AbstractContextManager[list[dict[str, Any]]]:
    return nullcontext([])


# ------------------------------------------------------------------
# Rendering helpers
# ------------------------------------------------------------------

def _reply(message: ChatMessage, text: str) -> Reply:
    return Reply(
        kind=ReplyKind.REPLY,
        channel_id=message.channel_id,
        author_id=message.author_id,
        text=text,
    )


def render_save_result(result: SaveResult) -> str:
    if result.uploaded:
        return f"{MSG_RECORDER_STOPPED} record is uploaded to {result.video_url}"
    return (
        f"{MSG_RECORDER_STOPPED} {MSG_UPLOAD_FAILED} "
        f"record file is saved to {result.file_name}"
    )


# ------------------------------------------------------------------
# ChatGateway
# ------------------------------------------------------------------

class ChatGateway:
    """
    Dispatcher in front of the one session state machine.

    Safe to share between bridge connections; serialization of slot
    mutations is the state machine's job.
    """

    def __init__(
        self,
        *,
        state_machine: SessionStateMachine,
        control_scope: ControlScope | None = None,
    ) -> None:
        self._state_machine = state_machine
        self._control_scope = control_scope or _no_control

    @property
    def state_machine(self) -> SessionStateMachine:
        return self._state_machine

    async def on_message(self, message: ChatMessage) -> GatewayResult:
        """Handle one inbound chat message. Non-command messages yield nothing."""
        command = parse_command(message.content)
        if command is None:
            return GatewayResult()

        log_event({
            "event_type": "COMMAND_RECEIVED",
            "command": command.command_type.value,
            "author_id": message.author_id,
            "channel_id": message.channel_id,
            "state": self._state_machine.state.state_type.value,
        })

        if message.is_direct:
            return GatewayResult(replies=(_reply(message, MSG_DIRECT_MESSAGE),))

        with self._control_scope() as control:
            try:
                reply = await self._execute(command, message)
            except CommandError as e:
                log_event({
                    "event_type": "COMMAND_REJECTED",
                    "command": command.command_type.value,
                    "reason": e.reason,
                })
                reply = _reply(message, e.reason)
            except OperationalError as e:
                log_event({
                    "event_type": "COMMAND_FAILED",
                    "command": command.command_type.value,
                    "error_kind": type(e).__name__,
                    "reason": e.reason,
                })
                reply = _reply(message, f"unexpected failure: {e.reason}")

        return GatewayResult(replies=(reply,), control=tuple(control))

    # ------------------------------------------------------------------
    # Command execution
    # ------------------------------------------------------------------

    async def _execute(self, command: Command, message: ChatMessage) -> Reply:
        sm = self._state_machine

        if isinstance(command, SetScreenUrl):
            await sm.set_screen_url(command.url)
            return _reply(message, MSG_SCREEN_URL_SET)

        if isinstance(command, Start):
            await sm.start(
                voice_channel_id=message.voice_channel_id,
                text_channel_id=message.channel_id,
            )
            return _reply(message, MSG_RECORDER_LAUNCHED)

        if isinstance(command, Stop):
            result = await sm.stop()
            return _reply(message, render_save_result(result))

        if isinstance(command, TakeShot):
            data = await sm.take_shot()
            return Reply(
                kind=ReplyKind.ATTACHMENT,
                channel_id=message.channel_id,
                author_id=message.author_id,
                attachment=data,
                filename=SCREENSHOT_FILE_NAME,
            )

        if isinstance(command, ToggleDebug):
            enabled = await sm.toggle_debug()
            return _reply(
                message,
                "toggled. debug: " + ("enabled" if enabled else "disabled"),
            )

        if isinstance(command, Help):
            log_event({
                "event_type": "HELP_SENT",
                "author_name": message.author_name,
            })
            return Reply(
                kind=ReplyKind.DIRECT,
                channel_id=message.channel_id,
                author_id=message.author_id,
                embed=build_help_embed(),
            )

        assert isinstance(command, Unknown)
        return _reply(message, MSG_INVALID_COMMAND)

"""
Chat command definitions and parser.

Rules:
- Commands are declarative, immutable requests.
- Commands are produced by parse_command() and executed by the gateway
  against the session state machine.
- No behavior, no async, no I/O.
Invariant:
    - All concrete Command subclasses MUST be frozen dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from spec import COMMAND_PREFIX

# =============================================================================
# Command Type Enumeration
# =============================================================================

class CommandType(str, Enum):
    """
    Canonical command types.

    These are stable discriminants used for logging, legality checks
    and gateway dispatch.
    """

    SET_SCREEN_URL = "SET_SCREEN_URL"
    START = "START"
    STOP = "STOP"
    TAKE_SHOT = "TAKE_SHOT"
    TOGGLE_DEBUG = "TOGGLE_DEBUG"
    HELP = "HELP"
    UNKNOWN = "UNKNOWN"


# =============================================================================
# Base Command
# =============================================================================

class Command:
    """
    Base command type.

    command_type is an explicit discriminant and must never be inferred
    from Python type identity.
    """

    command_type: CommandType


# =============================================================================
# Session commands
# =============================================================================

@dataclass(frozen=True)
class SetScreenUrl(Command):
    """Set the page shown on the captured screen. url may be None."""
    url: str | None
    command_type: CommandType = CommandType.SET_SCREEN_URL


@dataclass(frozen=True)
class Start(Command):
    """Begin a recording session in the requester's voice channel."""
    command_type: CommandType = CommandType.START


@dataclass(frozen=True)
class Stop(Command):
    """End the session, then upload or save the capture."""
    command_type: CommandType = CommandType.STOP


@dataclass(frozen=True)
class TakeShot(Command):
    command_type: CommandType = CommandType.TAKE_SHOT


@dataclass(frozen=True)
class ToggleDebug(Command):
    command_type: CommandType = CommandType.TOGGLE_DEBUG


# =============================================================================
# Non-session commands
# =============================================================================

@dataclass(frozen=True)
class Help(Command):
    command_type: CommandType = CommandType.HELP


@dataclass(frozen=True)
class Unknown(Command):
    """Unrecognised subcommand; name kept for logging."""
    name: str
    command_type: CommandType = CommandType.UNKNOWN


# =============================================================================
# Parser
# =============================================================================

def parse_command(content: str) -> Command | None:
    """
    Parse ``?record <subcommand> <rest-of-line>``.

    Returns None when the message is not addressed to the recorder
    (first token is not exactly the prefix).
    """
    parts = content.strip().split(None, 2)
    if not parts or parts[0] != COMMAND_PREFIX:
        return None

    sub_command = parts[1] if len(parts) > 1 else ""
    args = parts[2].strip() if len(parts) > 2 else None

    if sub_command in ("screen", "url"):
        return SetScreenUrl(url=args or None)
    if sub_command == "start":
        return Start()
    if sub_command == "stop":
        return Stop()
    if sub_command == "take":
        return TakeShot()
    if sub_command == "debug":
        return ToggleDebug()
    if sub_command in ("help", ""):
        return Help()
    return Unknown(name=sub_command)

"""
Command legality rules.

Collapsed matrix:
- every state has exactly one rejection text
- every session command has a set of states in which it is legal

An illegal command is rejected with the rejection text of the state
the slot is currently in.
"""

from __future__ import annotations

from typing import Final, Mapping

from orchestrator.commands import CommandType
from orchestrator.enums.state import SessionStateType
from orchestrator.errors import CommandError

from spec import (
    MSG_NOT_RECORDING,
    MSG_RECORDING,
    MSG_SAVING,
    MSG_STARTING,
)


REJECTION_BY_STATE: Final[Mapping[SessionStateType, str]] = {
    SessionStateType.READY: MSG_NOT_RECORDING,
    SessionStateType.STARTING: MSG_STARTING,
    SessionStateType.RECORDING: MSG_RECORDING,
    SessionStateType.SAVING: MSG_SAVING,
}

LEGAL_STATES: Final[Mapping[CommandType, frozenset[SessionStateType]]] = {
    CommandType.SET_SCREEN_URL: frozenset(
        {SessionStateType.READY, SessionStateType.RECORDING}
    ),
    CommandType.START: frozenset({SessionStateType.READY}),
    CommandType.STOP: frozenset({SessionStateType.RECORDING}),
    CommandType.TAKE_SHOT: frozenset({SessionStateType.RECORDING}),
    CommandType.TOGGLE_DEBUG: frozenset({SessionStateType.RECORDING}),
}


def is_legal(command_type: CommandType, state_type: SessionStateType) -> bool:
    return state_type in LEGAL_STATES[command_type]


def ensure_legal(command_type: CommandType, state_type: SessionStateType) -> None:
    """
    Raise CommandError unless command_type may run in state_type.

    Raises:
        KeyError for command types that never touch the slot
        (HELP, UNKNOWN); those must not be checked here.
    """
    if not is_legal(command_type, state_type):
        raise CommandError(REJECTION_BY_STATE[state_type])

"""
Session slot variants.

Rules:
- Each variant is a pure, frozen data model.
- The slot holds exactly one variant at any instant.
- No behavior, no helpers, no derived logic.
- Only the state machine constructs or swaps variants.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Union

from orchestrator.enums.state import SessionStateType
from orchestrator.runtime_context import RecorderProtocol, VoiceConnectionProtocol


@dataclass(frozen=True)
class Ready:
    """No active recording. screen_url carries into the next session."""
    screen_url: str | None = None
    state_type: SessionStateType = SessionStateType.READY


@dataclass(frozen=True)
class Starting:
    """Session resources are being acquired."""
    state_type: SessionStateType = SessionStateType.STARTING


@dataclass(frozen=True)
class Recording:
    """
    Capture active.

    recorder and voice are exclusively owned by this variant; they are
    released when the slot returns to Ready.
    """
    recorder: RecorderProtocol
    voice: VoiceConnectionProtocol
    started_at: datetime
    state_type: SessionStateType = SessionStateType.RECORDING


@dataclass(frozen=True)
class Saving:
    """Stop issued; capture is being finalized and uploaded/saved."""
    state_type: SessionStateType = SessionStateType.SAVING


SessionState = Union[Ready, Starting, Recording, Saving]

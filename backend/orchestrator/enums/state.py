"""
Authoritative session state enumeration.

Rules:
- This enum defines ONLY the recorder control states.
- No behavior, no helper methods, no side effects.
- Transitions are defined exclusively in the state machine.
"""

from __future__ import annotations

from enum import Enum


class SessionStateType(str, Enum):
    """
    Discriminant of the session slot variant.

    Cycle: READY -> STARTING -> RECORDING -> SAVING -> READY
    """

    READY = "READY"
    STARTING = "STARTING"
    RECORDING = "RECORDING"
    SAVING = "SAVING"

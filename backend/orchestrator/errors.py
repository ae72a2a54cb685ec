"""
Error kinds raised by the session state machine.

CommandError:
    User-facing rejection (illegal command for the current state, or a
    missing precondition). Never a defect. Never changes the slot.

OperationalError:
    Unexpected fault in a collaborator. Raised only after the slot has
    been returned to a consistent variant.
"""

from __future__ import annotations


class CommandError(Exception):
    """Rejection shown to the requester as-is."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class OperationalError(Exception):
    """Base class for collaborator faults."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class RecorderStartError(OperationalError):
    """Acquisition or start failed (or timed out); slot rolled back to Ready."""


class RecordSaveError(OperationalError):
    """Finalizing or saving the capture failed; slot returned to Ready."""


class RecorderOperationError(OperationalError):
    """Snapshot, debug toggle or screen url forwarding failed."""

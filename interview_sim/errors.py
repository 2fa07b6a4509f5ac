from __future__ import annotations
from typing import Optional


class InfeasibleConfigError(ValueError):
    """Raised before any run when the configuration cannot cover every interview."""


class InvariantViolationError(RuntimeError):
    """Raised when a booking run leaves the calendar in an illegal state."""

    def __init__(self, slot: int, participant: Optional[str], reason: str):
        self.slot = slot
        self.participant = participant
        self.reason = reason
        who = f" participant={participant}" if participant else ""
        super().__init__(f"Invariant violated at slot={slot}{who}: {reason}")

"""User-facing error kinds raised by season operations.

Every error except :class:`CorruptState` is recoverable: the operation that
raised it was rejected and the season state is left exactly as it was.
"""

from __future__ import annotations


class GridironError(Exception):
    kind: str = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind, "message": self.message}


class InvalidTarget(GridironError):
    kind = "invalid_target"


class InsufficientFunds(GridironError):
    kind = "insufficient_funds"

    def __init__(self, cost: int, balance: int) -> None:
        super().__init__(f"Costs {cost} TP but only {balance} TP available.")
        self.cost = cost
        self.balance = balance


class IncompleteRoster(GridironError):
    kind = "incomplete_roster"


class TacticsNotSelected(GridironError):
    kind = "tactics_not_selected"


class InvalidPhaseTransition(GridironError):
    kind = "invalid_phase_transition"


class InvalidSelection(GridironError):
    kind = "invalid_selection"


class UpgradeNotOffered(GridironError):
    kind = "upgrade_not_offered"


class CorruptState(GridironError):
    kind = "corrupt_state"

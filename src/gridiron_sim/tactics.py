from __future__ import annotations

from dataclasses import dataclass

from .config import TACTICS
from .errors import InvalidSelection


@dataclass(slots=True)
class TacticSelection:
    offensive_tactic: str | None = None
    defensive_tactic: str | None = None

    def is_complete(self) -> bool:
        return bool(self.offensive_tactic) and bool(self.defensive_tactic)


def _validate(value: str, side: str) -> str:
    tactic = value.lower().strip()
    if tactic not in TACTICS:
        raise InvalidSelection(f"Unknown {side} tactic '{value}'.")
    return tactic


class TacticsSelector:
    """Holds the per-match tactic choices.

    Offense and defense are chosen independently and either may be changed
    until the match starts; both are required before resolution.
    """

    UNSELECTED = "unselected"
    OFFENSE_CHOSEN = "offense_chosen"
    DEFENSE_CHOSEN = "defense_chosen"
    COMPLETE = "complete"

    def __init__(self, selection: TacticSelection | None = None) -> None:
        self.selection = selection or TacticSelection()

    def select(self, offensive_tactic: str | None = None, defensive_tactic: str | None = None) -> TacticSelection:
        # Validate both before touching the selection.
        offense = _validate(offensive_tactic, "offensive") if offensive_tactic is not None else None
        defense = _validate(defensive_tactic, "defensive") if defensive_tactic is not None else None
        if offense is not None:
            self.selection.offensive_tactic = offense
        if defense is not None:
            self.selection.defensive_tactic = defense
        return self.selection

    def is_complete(self) -> bool:
        return self.selection.is_complete()

    @property
    def state(self) -> str:
        if self.is_complete():
            return self.COMPLETE
        if self.selection.offensive_tactic:
            return self.OFFENSE_CHOSEN
        if self.selection.defensive_tactic:
            return self.DEFENSE_CHOSEN
        return self.UNSELECTED

    def reset(self) -> None:
        self.selection = TacticSelection()

import pytest

from gridiron_sim.errors import InvalidSelection
from gridiron_sim.tactics import TacticsSelector


def test_selection_states() -> None:
    selector = TacticsSelector()
    assert selector.state == TacticsSelector.UNSELECTED
    selector.select(offensive_tactic="aggressive")
    assert selector.state == TacticsSelector.OFFENSE_CHOSEN
    assert not selector.is_complete()
    selector.select(defensive_tactic="Conservative")
    assert selector.state == TacticsSelector.COMPLETE
    assert selector.selection.defensive_tactic == "conservative"


def test_defense_first_path() -> None:
    selector = TacticsSelector()
    selector.select(defensive_tactic="balanced")
    assert selector.state == TacticsSelector.DEFENSE_CHOSEN
    selector.select(offensive_tactic="balanced")
    assert selector.is_complete()


def test_unknown_tactic_leaves_selection_alone() -> None:
    selector = TacticsSelector()
    selector.select(offensive_tactic="aggressive")
    with pytest.raises(InvalidSelection):
        selector.select(offensive_tactic="conservative", defensive_tactic="blitz-everything")
    assert selector.selection.offensive_tactic == "aggressive"
    assert selector.selection.defensive_tactic is None


def test_reset_clears_both_sides() -> None:
    selector = TacticsSelector()
    selector.select("aggressive", "aggressive")
    selector.reset()
    assert selector.state == TacticsSelector.UNSELECTED

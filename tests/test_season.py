import pytest

from gridiron_sim.catalog import get_upgrade
from gridiron_sim.config import SEASON_WEEKS
from gridiron_sim.errors import (
    InsufficientFunds,
    InvalidPhaseTransition,
    InvalidSelection,
    TacticsNotSelected,
)
from gridiron_sim.season import Phase, SeasonController


def _started(seed: int = 21, difficulty: str = "normal") -> SeasonController:
    controller = SeasonController(seed=seed)
    controller.configure("pass", "run", difficulty)
    controller.begin_season()
    return controller


def _play_week(controller: SeasonController, offense: str = "balanced", defense: str = "balanced"):
    controller.proceed_to_tactics()
    controller.select_tactics(offense, defense)
    controller.start_match()
    result = controller.finish_match()
    controller.continue_season()
    return result


def test_begin_requires_every_choice() -> None:
    controller = SeasonController(seed=1)
    controller.configure(offense_style="pass")
    assert not controller.can_begin
    with pytest.raises(InvalidPhaseTransition):
        controller.begin_season()
    assert controller.phase == Phase.SETUP
    assert controller.team is None


def test_configure_rejects_unknown_style() -> None:
    controller = SeasonController(seed=1)
    with pytest.raises(InvalidSelection):
        controller.configure(offense_style="wildcat", defense_style="run")
    assert controller.offense_style is None
    assert controller.defense_style is None


def test_begin_season_starts_week_one() -> None:
    controller = _started(difficulty="underdog")
    assert controller.phase == Phase.MANAGEMENT
    assert controller.run_number == 1
    assert controller.current_week == 1
    assert controller.training_points == 75
    assert controller.team.training_points == 75
    assert controller.team.offense_style == "pass"
    assert len(controller.schedule) == SEASON_WEEKS
    assert controller.catalog.get_available()
    assert controller.current_matchup.opponent_name == "Cowboys"


def test_configure_locked_after_begin() -> None:
    controller = _started()
    with pytest.raises(InvalidPhaseTransition):
        controller.configure(offense_style="run")
    assert controller.offense_style == "pass"


def test_purchase_from_current_offers() -> None:
    controller = _started()
    controller.catalog.offers = [get_upgrade(4), get_upgrade(1)]
    assert controller.purchase_upgrade(4, target_player_id=1) == 80
    assert controller.effective_stats(1)["passing"] == 83
    assert [u.upgrade_id for u in controller.catalog.get_available()] == [1]
    controller.catalog.offers = [get_upgrade(5), get_upgrade(4)]
    assert controller.purchase_upgrade(5, target_player_id=12) == 40
    with pytest.raises(InsufficientFunds):
        controller.purchase_upgrade(4, target_player_id=1)
    assert [u.upgrade_id for u in controller.catalog.get_available()] == [4]
    assert controller.training_points == 40
    assert controller.team.training_points == 40


def test_out_of_turn_operations_change_nothing() -> None:
    controller = _started()
    with pytest.raises(InvalidPhaseTransition):
        controller.select_tactics("aggressive", "aggressive")
    with pytest.raises(InvalidPhaseTransition):
        controller.start_match()
    with pytest.raises(InvalidPhaseTransition):
        controller.continue_season()

    controller.catalog.offers = [get_upgrade(1)]
    controller.proceed_to_tactics()
    controller.select_tactics("aggressive", "conservative")
    controller.start_match()
    assert controller.phase == Phase.MATCH_IN_PROGRESS
    with pytest.raises(InvalidPhaseTransition):
        controller.purchase_upgrade(1)
    with pytest.raises(InvalidPhaseTransition):
        controller.new_run()
    assert controller.training_points == 125
    assert controller.team.applied_upgrades == []


def test_match_needs_both_tactics() -> None:
    controller = _started()
    controller.proceed_to_tactics()
    controller.select_tactics(offensive_tactic="aggressive")
    with pytest.raises(TacticsNotSelected):
        controller.start_match()
    assert controller.phase == Phase.TACTICS_SELECTION
    assert controller.pending_result is None


def test_tactics_clear_once_the_match_resolves() -> None:
    controller = _started()
    controller.proceed_to_tactics()
    controller.select_tactics("aggressive", "conservative")
    pending = controller.start_match()
    assert controller.tactics.state == "unselected"
    assert controller.snapshot()["tactics"]["complete"] is False
    assert (pending.offensive_tactic, pending.defensive_tactic) == ("aggressive", "conservative")

    result = controller.finish_match()
    assert controller.phase == Phase.RESULTS
    assert controller.tactics.state == "unselected"
    assert result.offensive_tactic == "aggressive"


def test_back_to_management_keeps_tactics() -> None:
    controller = _started()
    controller.proceed_to_tactics()
    controller.select_tactics("conservative", "aggressive")
    controller.back_to_management()
    assert controller.phase == Phase.MANAGEMENT
    controller.proceed_to_tactics()
    assert controller.tactics.is_complete()


def test_week_result_is_recorded_and_credited_on_continue() -> None:
    controller = _started()
    controller.proceed_to_tactics()
    controller.select_tactics("balanced", "balanced")
    pending = controller.start_match()
    assert controller.schedule[0].result is None
    result = controller.finish_match()
    assert result == pending
    assert controller.phase == Phase.RESULTS
    assert controller.schedule[0].result.own_score == result.own_score
    assert controller.standings["Your Team"].games_played == 1
    assert controller.standings["Cowboys"].games_played == 1
    # Reward lands when leaving the results screen.
    assert controller.training_points == 125
    controller.continue_season()
    assert controller.training_points == 125 + result.training_points_awarded
    assert controller.current_week == 2
    assert controller.phase == Phase.MANAGEMENT
    assert not controller.tactics.is_complete()


def test_bye_week_is_processed_automatically() -> None:
    controller = _started()
    for _ in range(7):
        _play_week(controller)
    controller.proceed_to_tactics()
    controller.select_tactics("balanced", "balanced")
    controller.start_match()
    controller.finish_match()
    before = controller.training_points + controller.last_result.training_points_awarded
    controller.continue_season()
    assert controller.current_week == 10
    assert controller.phase == Phase.MANAGEMENT
    assert controller.schedule[8].is_bye
    assert controller.schedule[8].result is None
    assert [e for e in controller.ledger.entries if e.week == 9] == []
    assert controller.training_points == before
    assert len(controller.league_results[9]) == 15


def test_full_season_balance_and_weeks() -> None:
    controller = _started(seed=5)
    weeks_seen = []
    rewards = 0
    while controller.phase != Phase.SEASON_COMPLETE:
        weeks_seen.append(controller.current_week)
        rewards += _play_week(controller, "aggressive", "balanced").training_points_awarded
    assert weeks_seen == [w for w in range(1, SEASON_WEEKS + 1) if w != 9]
    assert controller.training_points == 125 + rewards
    assert controller.standings["Your Team"].games_played == 16
    assert all(m.result is not None for m in controller.schedule if not m.is_bye)
    with pytest.raises(InvalidPhaseTransition):
        controller.continue_season()


def test_same_seed_same_season() -> None:
    first = _started(seed=77)
    second = _started(seed=77)
    for _ in range(3):
        assert _play_week(first) == _play_week(second)
    assert first.snapshot() == second.snapshot()


def test_scouting_costs_once_per_report() -> None:
    controller = _started()
    report = controller.scout("tendencies")
    assert report["opponent_name"] == "Cowboys"
    assert "summary" in report
    assert controller.training_points == 115
    assert controller.scout("tendencies") == report
    assert controller.training_points == 115
    controller.scout("offense")
    assert controller.training_points == 90
    assert controller.team.training_points == 90
    with pytest.raises(InvalidSelection):
        controller.scout("injuries")


def test_refresh_needs_funds() -> None:
    controller = _started(difficulty="underdog")
    controller.ledger.debit(70, memo="test drain", week=1)
    controller.team.training_points = controller.ledger.balance
    before = controller.catalog.get_available()
    with pytest.raises(InsufficientFunds):
        controller.refresh_offers()
    assert controller.catalog.get_available() == before
    assert controller.training_points == 5


def test_end_season_then_new_run() -> None:
    controller = _started()
    _play_week(controller)
    controller.end_season()
    assert controller.phase == Phase.SEASON_COMPLETE

    controller.new_run()
    assert controller.phase == Phase.SETUP
    assert controller.team is None
    assert controller.offense_style is None
    controller.configure("run", "pass", "favorite")
    controller.begin_season()
    assert controller.run_number == 2
    assert controller.current_week == 1
    assert controller.training_points == 200
    assert controller.standings["Your Team"].games_played == 0


def test_end_season_from_results_credits_reward() -> None:
    controller = _started()
    controller.proceed_to_tactics()
    controller.select_tactics("balanced", "balanced")
    controller.start_match()
    result = controller.finish_match()
    controller.end_season()
    assert controller.training_points == 125 + result.training_points_awarded


def test_standings_cover_every_division() -> None:
    controller = _started()
    _play_week(controller)
    divisions = controller.get_division_standings()
    assert len(divisions) == 8
    assert all(len(records) == 4 for records in divisions.values())
    played = sum(r.games_played for r in controller.get_standings())
    # 15 league games plus the user's game, counted for both sides.
    assert played == 32

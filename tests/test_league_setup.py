import pytest

from gridiron_sim.app import format_standings
from gridiron_sim.league import DEFAULT_LEAGUE, DIVISIONS, USER_TEAM_NAME, build_opponent_profile
from gridiron_sim.models import TeamRecord
from gridiron_sim.season import SeasonController


def test_division_and_team_count() -> None:
    assert len(DIVISIONS) == 8
    assert all(len(names) == 4 for names in DIVISIONS.values())
    assert USER_TEAM_NAME in DIVISIONS["NFC East"]
    assert len(DEFAULT_LEAGUE.league_teams()) == 31


def test_every_scheduled_opponent_has_a_division() -> None:
    for _week, opponent, _home in DEFAULT_LEAGUE.schedule_template:
        if opponent is None:
            continue
        assert DEFAULT_LEAGUE.division_for(opponent) != "Independent"
    assert DEFAULT_LEAGUE.division_for("Commanders") == "NFC East"


def test_opponent_profiles_are_stable() -> None:
    first = build_opponent_profile("Eagles", "NFC East")
    second = DEFAULT_LEAGUE.profile("Eagles")
    assert first == second
    assert 68.0 <= first.offense_rating <= 92.0
    assert first.offense_rating - first.defense_rating == pytest.approx(2 * first.offense_edge)


def test_team_record_streak_and_pct() -> None:
    record = TeamRecord(team_name="Eagles", division="NFC East")
    record.register_game(24, 17)
    record.register_game(10, 13)
    record.register_game(20, 20)
    record.register_game(31, 3)
    record.register_game(17, 14)
    assert record.record == "3-1-1"
    assert record.win_pct == pytest.approx(0.7)
    assert record.point_diff == 35
    assert record.streak == "W2"


def test_format_standings_lists_divisions() -> None:
    controller = SeasonController(seed=4)
    controller.configure("balanced", "balanced", "normal")
    controller.begin_season()
    text = format_standings(controller)
    assert "AFC East" in text
    assert "Your Team" in text
    assert "0-0" in text

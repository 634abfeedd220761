import dataclasses

import pytest

from gridiron_sim.app import build_default_team, format_roster
from gridiron_sim.catalog import get_upgrade
from gridiron_sim.errors import InvalidTarget
from gridiron_sim.models import DEFENSE_SLOTS, OFFENSE_SLOTS, Player, Position, Stat, Team


def test_default_team_fills_every_slot() -> None:
    team = build_default_team("pass", "run")
    assert [p.position for p in team.offensive_players] == list(OFFENSE_SLOTS)
    assert [p.position for p in team.defensive_players] == list(DEFENSE_SLOTS)
    assert team.is_complete
    assert len({p.player_id for p in team.all_players()}) == 22


def test_roster_problems_name_missing_position() -> None:
    team = build_default_team()
    team.defensive_players = [p for p in team.defensive_players if p.position != Position.CB]
    problems = team.roster_problems()
    assert any("missing 2 CB" in problem for problem in problems)
    assert not team.is_complete


def test_roster_problems_catch_slot_order() -> None:
    team = build_default_team()
    first, second, third = team.defensive_players[:3]
    team.defensive_players[1:3] = [third, second]
    assert team.defensive_players[0] is first
    assert team.roster_problems() == ["defense players are out of slot order"]
    assert not team.is_complete


def test_player_rejects_stat_outside_family() -> None:
    with pytest.raises(ValueError):
        Player(player_id=99, position=Position.QB, name="Bad Stat", base_stats={Stat.COVERAGE: 50})
    with pytest.raises(ValueError):
        Player(player_id=98, position=Position.CB, name="Negative", base_stats={Stat.COVERAGE: -1})


def test_player_upgrade_changes_only_target() -> None:
    team = build_default_team()
    returned = team.apply_upgrade(get_upgrade(4), target_player_id=1, week=3)
    assert isinstance(returned, Player)
    assert team.effective_stats(1)[Stat.PASSING] == 83
    assert team.effective_stats(1)[Stat.RUSHING] == 45
    app = returned.applied_upgrades[-1]
    assert app.upgrade_id == 4
    assert app.target_player_id == 1
    assert app.applied_at_week == 3


def test_team_upgrade_reaches_only_its_side() -> None:
    team = build_default_team()
    returned = team.apply_upgrade(get_upgrade(1), target_player_id=999, week=1)
    assert isinstance(returned, Team)
    assert team.applied_upgrades[-1].target_player_id is None
    assert team.effective_stats(4)[Stat.SPEED] == 94
    # Cornerbacks carry speed too but sit on the defensive side.
    assert team.effective_stats(19)[Stat.SPEED] == 90
    # Linemen have no speed rating; the upgrade does not invent one.
    assert Stat.SPEED not in team.effective_stats(8)


def test_both_category_upgrade_reaches_every_player() -> None:
    team = build_default_team()
    team.apply_upgrade(get_upgrade(3))
    assert team.effective_stats(1)[Stat.STAMINA] == 87
    assert team.effective_stats(19)[Stat.STAMINA] == 91


def test_effective_stats_idempotent_and_match_audit_trail() -> None:
    team = build_default_team()
    team.apply_upgrade(get_upgrade(4), 1, week=1)
    team.apply_upgrade(get_upgrade(4), 1, week=2)
    team.apply_upgrade(get_upgrade(13), 1, week=2)
    team.apply_upgrade(get_upgrade(3), week=2)

    first = team.effective_stats(1)
    second = team.effective_stats(1)
    assert first == second

    qb = team.find_player(1)
    expected = dict(qb.base_stats)
    for app in [*qb.applied_upgrades, *team.applied_upgrades]:
        if app.stat in expected:
            expected[app.stat] += app.amount
    assert first == expected
    # Base record is never rewritten.
    assert qb.base_stats[Stat.PASSING] == 75


@pytest.mark.parametrize(
    ("upgrade_id", "target"),
    [
        (4, None),
        (4, 999),
        (4, 2),
        (14, 4),
        (5, 16),
    ],
)
def test_player_upgrade_invalid_targets(upgrade_id: int, target: int | None) -> None:
    team = build_default_team()
    before = [list(p.applied_upgrades) for p in team.all_players()]
    with pytest.raises(InvalidTarget):
        team.apply_upgrade(get_upgrade(upgrade_id), target_player_id=target)
    assert [list(p.applied_upgrades) for p in team.all_players()] == before


def test_player_identity_is_fixed_while_trail_grows() -> None:
    team = build_default_team()
    qb = team.find_player(1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        qb.position = Position.RB
    team.apply_upgrade(get_upgrade(4), 1)
    assert qb.base_stats[Stat.PASSING] == 75
    assert len(qb.applied_upgrades) == 1


def test_route_package_accepts_tight_end() -> None:
    team = build_default_team()
    team.apply_upgrade(get_upgrade(6), target_player_id=7)
    assert team.effective_stats(7)[Stat.ROUTE] == 73


def test_effective_stats_unknown_player() -> None:
    with pytest.raises(InvalidTarget):
        build_default_team().effective_stats(404)


def test_format_roster_lists_effective_values() -> None:
    team = build_default_team()
    team.apply_upgrade(get_upgrade(4), 1)
    text = format_roster(team)
    assert "John Smith" in text
    assert "passing=83" in text
    assert len(text.splitlines()) == 23

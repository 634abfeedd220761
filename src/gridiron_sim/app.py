from __future__ import annotations

from typing import TYPE_CHECKING

from .models import Player, Position, Stat, Team

if TYPE_CHECKING:
    from .season import SeasonController

# (id, position, name, base stats)
OFFENSE_TEMPLATE: tuple[tuple[int, Position, str, dict[Stat, int]], ...] = (
    (1, Position.QB, "John Smith", {Stat.PASSING: 75, Stat.RUSHING: 45, Stat.LEADERSHIP: 80, Stat.STAMINA: 82}),
    (2, Position.RB, "Mike Johnson", {Stat.RUSHING: 85, Stat.RECEIVING: 60, Stat.BLOCKING: 50, Stat.STAMINA: 86}),
    (3, Position.FB, "Tom Wilson", {Stat.RUSHING: 65, Stat.BLOCKING: 90, Stat.RECEIVING: 40, Stat.STAMINA: 84}),
    (4, Position.WR, "Chris Davis", {Stat.RECEIVING: 88, Stat.SPEED: 92, Stat.ROUTE: 85, Stat.STAMINA: 85}),
    (5, Position.WR, "Alex Brown", {Stat.RECEIVING: 82, Stat.SPEED: 87, Stat.ROUTE: 80, Stat.STAMINA: 83}),
    (6, Position.WR, "Sam Miller", {Stat.RECEIVING: 75, Stat.SPEED: 83, Stat.ROUTE: 78, Stat.STAMINA: 84}),
    (7, Position.TE, "Dave Garcia", {Stat.RECEIVING: 70, Stat.BLOCKING: 85, Stat.HANDS: 80, Stat.ROUTE: 66, Stat.STAMINA: 81}),
    (8, Position.LT, "Rob Taylor", {Stat.BLOCKING: 92, Stat.STRENGTH: 88, Stat.TECHNIQUE: 85, Stat.STAMINA: 78}),
    (9, Position.LG, "Joe Martinez", {Stat.BLOCKING: 88, Stat.STRENGTH: 85, Stat.TECHNIQUE: 82, Stat.STAMINA: 79}),
    (10, Position.C, "Bill Anderson", {Stat.BLOCKING: 90, Stat.STRENGTH: 83, Stat.SNAPPING: 95, Stat.STAMINA: 80}),
    (11, Position.RG, "Pat Thomas", {Stat.BLOCKING: 87, Stat.STRENGTH: 86, Stat.TECHNIQUE: 83, Stat.STAMINA: 78}),
)

DEFENSE_TEMPLATE: tuple[tuple[int, Position, str, dict[Stat, int]], ...] = (
    (12, Position.DE, "Mark Jackson", {Stat.PASS_RUSH: 88, Stat.RUN_STOP: 82, Stat.STRENGTH: 85, Stat.STAMINA: 80}),
    (15, Position.DE, "Jim Clark", {Stat.PASS_RUSH: 85, Stat.RUN_STOP: 80, Stat.STRENGTH: 83, Stat.STAMINA: 81}),
    (13, Position.DT, "Steve White", {Stat.PASS_RUSH: 75, Stat.RUN_STOP: 92, Stat.STRENGTH: 90, Stat.STAMINA: 77}),
    (14, Position.DT, "Dan Harris", {Stat.PASS_RUSH: 78, Stat.RUN_STOP: 88, Stat.STRENGTH: 87, Stat.STAMINA: 78}),
    (16, Position.LB, "Tony Lewis", {Stat.COVERAGE: 75, Stat.RUN_STOP: 88, Stat.TACKLING: 90, Stat.STAMINA: 84}),
    (17, Position.LB, "Ryan Walker", {Stat.COVERAGE: 70, Stat.RUN_STOP: 85, Stat.TACKLING: 87, Stat.STAMINA: 83}),
    (18, Position.LB, "Ken Hall", {Stat.COVERAGE: 80, Stat.RUN_STOP: 82, Stat.TACKLING: 85, Stat.STAMINA: 85}),
    (19, Position.CB, "Carl Allen", {Stat.COVERAGE: 92, Stat.SPEED: 90, Stat.TACKLING: 70, Stat.STAMINA: 86}),
    (20, Position.CB, "Luke Young", {Stat.COVERAGE: 88, Stat.SPEED: 87, Stat.TACKLING: 72, Stat.STAMINA: 85}),
    (21, Position.S, "Ben King", {Stat.COVERAGE: 85, Stat.TACKLING: 88, Stat.RANGE: 90, Stat.STAMINA: 84}),
    (22, Position.S, "Nick Wright", {Stat.COVERAGE: 80, Stat.TACKLING: 85, Stat.RANGE: 87, Stat.STAMINA: 83}),
)


def _make_players(template: tuple[tuple[int, Position, str, dict[Stat, int]], ...]) -> list[Player]:
    return [
        Player(player_id=player_id, position=position, name=name, base_stats=dict(stats))
        for player_id, position, name, stats in template
    ]


def build_default_team(offense_style: str = "balanced", defense_style: str = "balanced", training_points: int = 0) -> Team:
    return Team(
        offense_style=offense_style,
        defense_style=defense_style,
        offensive_players=_make_players(OFFENSE_TEMPLATE),
        defensive_players=_make_players(DEFENSE_TEMPLATE),
        training_points=training_points,
    )


def format_standings(controller: SeasonController) -> str:
    lines = []
    for division, records in controller.get_division_standings().items():
        lines.append(division)
        lines.append("  Team          W-L     PF   PA")
        for rec in records:
            lines.append(f"  {rec.team_name:<12} {rec.record:<6} {rec.points_for:>4} {rec.points_against:>4}")
    return "\n".join(lines)


def format_roster(team: Team) -> str:
    lines = ["ID  Pos Name             Stats"]
    for player in team.all_players():
        stats = team.effective_stats(player.player_id)
        summary = " ".join(f"{stat.value}={value}" for stat, value in stats.items())
        lines.append(f"{player.player_id:>2}  {player.position.value:<3} {player.name:<16} {summary}")
    return "\n".join(lines)

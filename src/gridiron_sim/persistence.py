"""JSON (de)serialization of the season data model.

Only source data is written: base stats, audit trails, ledger entries and
results. Effective stats and ratings are recomputed after load.
"""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path
from typing import Any

from .economy import LedgerEntry
from .engine import MatchResult, StatLine
from .errors import CorruptState
from .models import (
    GameScore,
    Matchup,
    Player,
    Position,
    Stat,
    Team,
    TeamRecord,
    Upgrade,
    UpgradeApplication,
)

_log = logging.getLogger("gridiron.persistence")

SAVE_VERSION = 1


def serialize_application(app: UpgradeApplication) -> dict[str, Any]:
    return {
        "upgrade_id": app.upgrade_id,
        "target_player_id": app.target_player_id,
        "applied_at_week": app.applied_at_week,
        "stat": app.stat.value,
        "amount": app.amount,
        "category": app.category,
    }


def deserialize_application(raw: dict[str, Any]) -> UpgradeApplication:
    target = raw.get("target_player_id")
    return UpgradeApplication(
        upgrade_id=int(raw["upgrade_id"]),
        target_player_id=int(target) if target is not None else None,
        applied_at_week=int(raw["applied_at_week"]),
        stat=Stat(raw["stat"]),
        amount=int(raw["amount"]),
        category=str(raw.get("category", "both")),
    )


def serialize_player(player: Player) -> dict[str, Any]:
    return {
        "player_id": player.player_id,
        "position": player.position.value,
        "name": player.name,
        "base_stats": {stat.value: value for stat, value in player.base_stats.items()},
        "applied_upgrades": [serialize_application(app) for app in player.applied_upgrades],
    }


def deserialize_player(raw: dict[str, Any]) -> Player:
    return Player(
        player_id=int(raw["player_id"]),
        position=Position(raw["position"]),
        name=str(raw["name"]),
        base_stats={Stat(key): int(value) for key, value in dict(raw["base_stats"]).items()},
        applied_upgrades=[deserialize_application(row) for row in raw.get("applied_upgrades", [])],
    )


def serialize_team(team: Team) -> dict[str, Any]:
    return {
        "name": team.name,
        "offense_style": team.offense_style,
        "defense_style": team.defense_style,
        "training_points": team.training_points,
        "offensive_players": [serialize_player(p) for p in team.offensive_players],
        "defensive_players": [serialize_player(p) for p in team.defensive_players],
        "applied_upgrades": [serialize_application(app) for app in team.applied_upgrades],
    }


def deserialize_team(raw: dict[str, Any]) -> Team:
    return Team(
        name=str(raw.get("name", "Your Team")),
        offense_style=str(raw["offense_style"]),
        defense_style=str(raw["defense_style"]),
        training_points=int(raw["training_points"]),
        offensive_players=[deserialize_player(p) for p in raw["offensive_players"]],
        defensive_players=[deserialize_player(p) for p in raw["defensive_players"]],
        applied_upgrades=[deserialize_application(app) for app in raw.get("applied_upgrades", [])],
    )


def serialize_upgrade(upgrade: Upgrade) -> dict[str, Any]:
    return {
        "upgrade_id": upgrade.upgrade_id,
        "name": upgrade.name,
        "cost": upgrade.cost,
        "scope": upgrade.scope,
        "category": upgrade.category,
        "stat": upgrade.effect.stat.value,
        "amount": upgrade.effect.amount,
        "positions": [p.value for p in upgrade.effect.positions],
        "description": upgrade.description,
    }


def serialize_matchup(matchup: Matchup) -> dict[str, Any]:
    result = None
    if matchup.result is not None:
        result = {"own_score": matchup.result.own_score, "opp_score": matchup.result.opp_score}
    return {
        "week": matchup.week,
        "opponent_name": matchup.opponent_name,
        "is_home": matchup.is_home,
        "is_bye": matchup.is_bye,
        "result": result,
    }


def deserialize_matchup(raw: dict[str, Any]) -> Matchup:
    raw_result = raw.get("result")
    result = None
    if isinstance(raw_result, dict):
        result = GameScore(own_score=int(raw_result["own_score"]), opp_score=int(raw_result["opp_score"]))
    opponent = raw.get("opponent_name")
    return Matchup(
        week=int(raw["week"]),
        opponent_name=str(opponent) if opponent is not None else None,
        is_home=bool(raw.get("is_home", True)),
        is_bye=bool(raw.get("is_bye", False)),
        result=result,
    )


def serialize_record(record: TeamRecord) -> dict[str, Any]:
    return {
        "team_name": record.team_name,
        "division": record.division,
        "wins": record.wins,
        "losses": record.losses,
        "ties": record.ties,
        "points_for": record.points_for,
        "points_against": record.points_against,
        "recent_results": list(record.recent_results),
    }


def deserialize_record(raw: dict[str, Any]) -> TeamRecord:
    return TeamRecord(
        team_name=str(raw["team_name"]),
        division=str(raw.get("division", "")),
        wins=int(raw.get("wins", 0)),
        losses=int(raw.get("losses", 0)),
        ties=int(raw.get("ties", 0)),
        points_for=int(raw.get("points_for", 0)),
        points_against=int(raw.get("points_against", 0)),
        recent_results=[str(r) for r in raw.get("recent_results", [])],
    )


def serialize_result(result: MatchResult) -> dict[str, Any]:
    line = result.stat_line
    return {
        "own_score": result.own_score,
        "opp_score": result.opp_score,
        "outcome": result.outcome,
        "training_points_awarded": result.training_points_awarded,
        "opponent_name": result.opponent_name,
        "week": result.week,
        "offensive_tactic": result.offensive_tactic,
        "defensive_tactic": result.defensive_tactic,
        "stat_line": {
            "total_yards": line.total_yards,
            "passing_yards": line.passing_yards,
            "rushing_yards": line.rushing_yards,
            "turnovers": line.turnovers,
            "takeaways": line.takeaways,
            "third_down_made": line.third_down_made,
            "third_down_attempts": line.third_down_attempts,
        },
    }


def deserialize_result(raw: dict[str, Any]) -> MatchResult:
    line = dict(raw["stat_line"])
    return MatchResult(
        own_score=int(raw["own_score"]),
        opp_score=int(raw["opp_score"]),
        outcome=str(raw["outcome"]),
        training_points_awarded=int(raw["training_points_awarded"]),
        opponent_name=str(raw["opponent_name"]),
        week=int(raw.get("week", 0)),
        offensive_tactic=str(raw.get("offensive_tactic", "")),
        defensive_tactic=str(raw.get("defensive_tactic", "")),
        stat_line=StatLine(
            total_yards=int(line["total_yards"]),
            passing_yards=int(line["passing_yards"]),
            rushing_yards=int(line["rushing_yards"]),
            turnovers=int(line["turnovers"]),
            takeaways=int(line["takeaways"]),
            third_down_made=int(line["third_down_made"]),
            third_down_attempts=int(line["third_down_attempts"]),
        ),
    )


def serialize_entry(entry: LedgerEntry) -> dict[str, Any]:
    return {
        "kind": entry.kind,
        "amount": entry.amount,
        "balance_after": entry.balance_after,
        "week": entry.week,
        "memo": entry.memo,
    }


def deserialize_entry(raw: dict[str, Any]) -> LedgerEntry:
    return LedgerEntry(
        kind=str(raw["kind"]),
        amount=int(raw["amount"]),
        balance_after=int(raw["balance_after"]),
        week=int(raw.get("week", 0)),
        memo=str(raw.get("memo", "")),
    )


def write_json_with_backup(path: Path, payload: Any, *, with_backup: bool = True) -> None:
    if with_backup and path.exists():
        backup = path.with_suffix(path.suffix + ".bak")
        try:
            shutil.copy2(path, backup)
        except OSError as exc:
            _log.warning("Could not back up %s (%s)", path, exc)
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def read_state(path: Path) -> dict[str, Any]:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        raise CorruptState(f"Failed to read season state ({exc}).") from exc
    if not isinstance(raw, dict):
        raise CorruptState("Season state file has invalid format.")
    try:
        version = int(raw.get("save_version", 1) or 1)
    except (TypeError, ValueError) as exc:
        raise CorruptState("Season state has an invalid save version.") from exc
    if version > SAVE_VERSION:
        raise CorruptState(f"Unsupported season state version {version}; app supports up to {SAVE_VERSION}.")
    return raw

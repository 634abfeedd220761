from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from .config import (
    BASE_POINTS,
    BASE_TURNOVER_RATE,
    CLOSE_LOSS_BONUS,
    CLOSE_LOSS_MARGIN,
    DEFENSE_STYLE_WEIGHTS,
    DIFFICULTY_REWARD_MULTIPLIER,
    DRIVES_PER_GAME,
    LOSS_REWARD,
    MAX_EXPECTED_POINTS,
    MIN_EXPECTED_POINTS,
    OFFENSE_STYLE_WEIGHTS,
    PASS_SHARE_BY_STYLE,
    POINTS_PER_RATING,
    SCORE_CEILING_RATIO,
    SCORE_FLOOR_RATIO,
    SCORE_STDDEV,
    STYLE_COUNTER_BONUS,
    STYLE_MISMATCH_PENALTY,
    TACTIC_EFFECTS,
    TAKEAWAY_POINT_GAIN,
    TEAM_STYLES,
    TIE_REWARD,
    TURNOVER_POINT_COST,
    WIN_BASE_REWARD,
    WIN_MARGIN_BONUS,
)
from .errors import IncompleteRoster, InvalidSelection, TacticsNotSelected
from .models import OpponentProfile, Player, Stat, Team
from .tactics import TacticSelection

_log = logging.getLogger("gridiron.engine")

HOME_FIELD_BONUS = 1.0


@dataclass(slots=True)
class StatLine:
    total_yards: int
    passing_yards: int
    rushing_yards: int
    turnovers: int
    takeaways: int
    third_down_made: int
    third_down_attempts: int

    @property
    def third_down(self) -> str:
        return f"{self.third_down_made}/{self.third_down_attempts}"


@dataclass(slots=True)
class MatchResult:
    own_score: int
    opp_score: int
    outcome: str
    stat_line: StatLine
    training_points_awarded: int
    opponent_name: str
    week: int = 0
    offensive_tactic: str = ""
    defensive_tactic: str = ""

    @property
    def margin(self) -> int:
        return self.own_score - self.opp_score


def _avg(values: list[float], fallback: float) -> float:
    if not values:
        return fallback
    return sum(values) / len(values)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _style_weights(table: dict[str, dict[str, float]], style: str) -> dict[str, float]:
    if style not in TEAM_STYLES:
        raise InvalidSelection(f"Unknown team style '{style}'.")
    if style != "balanced":
        return table[style]
    # Balanced is an even split of the pass and run weightings.
    keys = set(table["pass"]) | set(table["run"])
    return {key: (table["pass"].get(key, 0.0) + table["run"].get(key, 0.0)) / 2 for key in keys}


def _weighted_rating(team: Team, players: list[Player], weights: dict[str, float]) -> float:
    effective = [team.effective_stats(p.player_id) for p in players]
    total = 0.0
    weight_sum = 0.0
    for stat_name in sorted(weights):
        stat = Stat(stat_name)
        values = [stats[stat] for stats in effective if stat in stats]
        if not values:
            continue
        total += weights[stat_name] * _avg(values, 0.0)
        weight_sum += weights[stat_name]
    if weight_sum <= 0:
        return 0.0
    return total / weight_sum


def offense_rating(team: Team) -> float:
    return _weighted_rating(team, team.offensive_players, _style_weights(OFFENSE_STYLE_WEIGHTS, team.offense_style))


def defense_rating(team: Team) -> float:
    return _weighted_rating(team, team.defensive_players, _style_weights(DEFENSE_STYLE_WEIGHTS, team.defense_style))


def style_matchup(defending_style: str, attacking_style: str) -> float:
    """Defense-rating adjustment for a defensive style facing an offensive style."""
    if defending_style == "balanced" or attacking_style == "balanced":
        return 0.0
    if defending_style == attacking_style:
        return STYLE_COUNTER_BONUS
    return -STYLE_MISMATCH_PENALTY


def expected_points(attack_rating: float, defense_rating_value: float) -> float:
    raw = BASE_POINTS + (attack_rating - defense_rating_value) * POINTS_PER_RATING
    return _clamp(raw, MIN_EXPECTED_POINTS, MAX_EXPECTED_POINTS)


def _legal_score(points: float) -> int:
    score = max(0, int(round(points)))
    # One point alone is not a reachable football score.
    return 0 if score == 1 else score


def _count_turnovers(attack_tactic: str, defend_tactic: str, rng: random.Random) -> int:
    rate = BASE_TURNOVER_RATE + TACTIC_EFFECTS[attack_tactic]["turnover"] + TACTIC_EFFECTS[defend_tactic]["turnover"]
    rate = _clamp(rate, 0.01, 0.40)
    return sum(1 for _ in range(DRIVES_PER_GAME) if rng.random() < rate)


def _sample_points(
    expected: float,
    attack_tactic: str,
    defend_tactic: str,
    turnovers: int,
    takeaways: int,
    rng: random.Random,
) -> int:
    attack = TACTIC_EFFECTS[attack_tactic]
    defend = TACTIC_EFFECTS[defend_tactic]
    stddev = SCORE_STDDEV * attack["variance"] * defend["variance"]
    raw = rng.gauss(expected, stddev) - turnovers * TURNOVER_POINT_COST + takeaways * TAKEAWAY_POINT_GAIN
    floor = expected * (SCORE_FLOOR_RATIO + attack["floor"])
    ceiling = expected * (SCORE_CEILING_RATIO + attack["ceiling"])
    return _legal_score(_clamp(raw, floor, ceiling))


def _sample_scores(
    a_expected: float,
    b_expected: float,
    a_tactics: tuple[str, str],
    b_tactics: tuple[str, str],
    rng: random.Random,
) -> tuple[int, int, int, int]:
    a_offense, a_defense = a_tactics
    b_offense, b_defense = b_tactics
    a_turnovers = _count_turnovers(a_offense, b_defense, rng)
    b_turnovers = _count_turnovers(b_offense, a_defense, rng)
    a_points = _sample_points(a_expected, a_offense, b_defense, a_turnovers, b_turnovers, rng)
    b_points = _sample_points(b_expected, b_offense, a_defense, b_turnovers, a_turnovers, rng)
    return a_points, b_points, a_turnovers, b_turnovers


def training_points_for(outcome: str, margin: int, difficulty: str = "normal") -> int:
    if difficulty not in DIFFICULTY_REWARD_MULTIPLIER:
        raise InvalidSelection(f"Unknown difficulty '{difficulty}'.")
    margin = abs(margin)
    if outcome == "win":
        bonus = next((b for limit, b in WIN_MARGIN_BONUS if margin <= limit), WIN_MARGIN_BONUS[-1][1])
        base = WIN_BASE_REWARD + bonus
    elif outcome == "tie":
        base = TIE_REWARD
    elif outcome == "loss":
        base = LOSS_REWARD + (CLOSE_LOSS_BONUS if margin <= CLOSE_LOSS_MARGIN else 0)
    else:
        raise ValueError(f"Unknown outcome '{outcome}'.")
    return int(round(base * DIFFICULTY_REWARD_MULTIPLIER[difficulty]))


def _build_stat_line(
    team: Team,
    own_score: int,
    own_offense: float,
    opp_defense: float,
    offensive_tactic: str,
    turnovers: int,
    takeaways: int,
    rng: random.Random,
) -> StatLine:
    total_yards = max(80, int(round(150 + own_score * 8.5 + (own_offense - 75.0) * 2.0 + rng.gauss(0, 25))))
    pass_share = _clamp(PASS_SHARE_BY_STYLE.get(team.offense_style, 0.52) + rng.uniform(-0.06, 0.06), 0.15, 0.85)
    passing_yards = int(round(total_yards * pass_share))
    attempts = rng.randint(9, 15)
    conversion = 0.38 + (own_offense - opp_defense) / 100.0
    if offensive_tactic == "aggressive":
        conversion += 0.03
    elif offensive_tactic == "conservative":
        conversion -= 0.02
    conversion = _clamp(conversion, 0.15, 0.70)
    made = sum(1 for _ in range(attempts) if rng.random() < conversion)
    return StatLine(
        total_yards=total_yards,
        passing_yards=passing_yards,
        rushing_yards=total_yards - passing_yards,
        turnovers=turnovers,
        takeaways=takeaways,
        third_down_made=made,
        third_down_attempts=attempts,
    )


def resolve(
    team: Team,
    tactics: TacticSelection,
    opponent: OpponentProfile,
    seed: int | str,
    difficulty: str = "normal",
    week: int = 0,
    is_home: bool = True,
) -> MatchResult:
    """Resolve one match between the user's team and an opponent profile.

    The team is read, never mutated. Identical inputs and seed always produce
    an identical result, so a presentation layer may skip playback freely.
    """
    problems = team.roster_problems()
    if problems:
        raise IncompleteRoster("Roster is incomplete: " + "; ".join(problems))
    if not tactics.is_complete():
        raise TacticsNotSelected("Select both an offensive and a defensive tactic.")
    for tactic in (tactics.offensive_tactic, tactics.defensive_tactic):
        if tactic not in TACTIC_EFFECTS:
            raise InvalidSelection(f"Unknown tactic '{tactic}'.")

    rng = random.Random(seed)
    own_offense = offense_rating(team) + (HOME_FIELD_BONUS if is_home else 0.0)
    own_defense = defense_rating(team) + style_matchup(team.defense_style, opponent.offense_style)
    opp_offense = opponent.offense_rating + (0.0 if is_home else HOME_FIELD_BONUS)
    opp_defense = opponent.defense_rating + style_matchup(opponent.defense_style, team.offense_style)

    own_expected = expected_points(own_offense, opp_defense)
    opp_expected = expected_points(opp_offense, own_defense)
    own_score, opp_score, own_turnovers, opp_turnovers = _sample_scores(
        own_expected,
        opp_expected,
        (tactics.offensive_tactic, tactics.defensive_tactic),
        (opponent.offensive_tactic, opponent.defensive_tactic),
        rng,
    )
    stat_line = _build_stat_line(
        team,
        own_score,
        own_offense,
        opp_defense,
        tactics.offensive_tactic,
        own_turnovers,
        opp_turnovers,
        rng,
    )

    if own_score > opp_score:
        outcome = "win"
    elif own_score < opp_score:
        outcome = "loss"
    else:
        outcome = "tie"
    reward = training_points_for(outcome, own_score - opp_score, difficulty)
    _log.debug(
        "Resolved week %d vs %s: %d-%d (expected %.1f-%.1f)",
        week,
        opponent.name,
        own_score,
        opp_score,
        own_expected,
        opp_expected,
    )
    return MatchResult(
        own_score=own_score,
        opp_score=opp_score,
        outcome=outcome,
        stat_line=stat_line,
        training_points_awarded=reward,
        opponent_name=opponent.name,
        week=week,
        offensive_tactic=tactics.offensive_tactic,
        defensive_tactic=tactics.defensive_tactic,
    )


def simulate_league_game(home: OpponentProfile, away: OpponentProfile, rng: random.Random) -> tuple[int, int]:
    home_expected = expected_points(
        home.offense_rating + HOME_FIELD_BONUS,
        away.defense_rating + style_matchup(away.defense_style, home.offense_style),
    )
    away_expected = expected_points(
        away.offense_rating,
        home.defense_rating + style_matchup(home.defense_style, away.offense_style),
    )
    home_points, away_points, _home_to, _away_to = _sample_scores(
        home_expected,
        away_expected,
        (home.offensive_tactic, home.defensive_tactic),
        (away.offensive_tactic, away.defensive_tactic),
        rng,
    )
    return home_points, away_points

from __future__ import annotations

import random
from typing import Iterable

from .config import SEASON_WEEKS
from .models import Matchup


def schedule_problems(matchups: list[Matchup], weeks: int = SEASON_WEEKS) -> list[str]:
    problems: list[str] = []
    if [m.week for m in matchups] != list(range(1, weeks + 1)):
        problems.append(f"weeks must run contiguously from 1 to {weeks}")
    byes = [m for m in matchups if m.is_bye]
    if len(byes) > 1:
        problems.append("schedule has more than one bye week")
    for matchup in matchups:
        if matchup.is_bye and matchup.result is not None:
            problems.append(f"bye week {matchup.week} has a result")
        if not matchup.is_bye and not matchup.opponent_name:
            problems.append(f"week {matchup.week} has no opponent")
    return problems


def build_schedule(template: Iterable[tuple[int, str | None, bool]], weeks: int = SEASON_WEEKS) -> list[Matchup]:
    matchups = [
        Matchup(week=week, opponent_name=opponent, is_home=is_home, is_bye=opponent is None)
        for week, opponent, is_home in template
    ]
    problems = schedule_problems(matchups, weeks)
    if problems:
        raise ValueError("Invalid schedule template: " + "; ".join(problems))
    return matchups


def pair_weekly_games(team_names: Iterable[str], rng: random.Random) -> list[tuple[str, str]]:
    """Pair teams into (home, away) games; with an odd count one team sits idle."""
    names = list(team_names)
    rng.shuffle(names)
    return [(names[idx], names[idx + 1]) for idx in range(0, len(names) - 1, 2)]

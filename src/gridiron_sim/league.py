"""Read-only league reference data: divisions, schedule template, opponent profiles."""

from __future__ import annotations

import random
from dataclasses import dataclass, field

from .config import TACTICS, TEAM_STYLES
from .models import OpponentProfile

USER_TEAM_NAME = "Your Team"

DIVISIONS: dict[str, tuple[str, ...]] = {
    "AFC East": ("Bills", "Dolphins", "Patriots", "Jets"),
    "AFC North": ("Ravens", "Bengals", "Steelers", "Browns"),
    "AFC South": ("Texans", "Colts", "Titans", "Jaguars"),
    "AFC West": ("Chiefs", "Chargers", "Raiders", "Broncos"),
    "NFC East": (USER_TEAM_NAME, "Eagles", "Giants", "Cowboys"),
    "NFC North": ("Lions", "Packers", "Vikings", "Bears"),
    "NFC South": ("Saints", "Falcons", "Panthers", "Buccaneers"),
    "NFC West": ("49ers", "Seahawks", "Cardinals", "Rams"),
}

# (week, opponent, is_home); None marks the bye.
SCHEDULE_TEMPLATE: tuple[tuple[int, str | None, bool], ...] = (
    (1, "Cowboys", True),
    (2, "Giants", False),
    (3, "Eagles", True),
    (4, "Commanders", False),
    (5, "49ers", True),
    (6, "Seahawks", False),
    (7, "Cardinals", True),
    (8, "Rams", False),
    (9, None, True),
    (10, "Packers", True),
    (11, "Bears", False),
    (12, "Lions", True),
    (13, "Vikings", False),
    (14, "Chiefs", True),
    (15, "Broncos", False),
    (16, "Raiders", True),
    (17, "Chargers", False),
)

# Opponents on the template that sit outside the standings divisions.
NON_DIVISION_OPPONENTS: dict[str, str] = {
    "Commanders": "NFC East",
}


def build_opponent_profile(name: str, division: str = "") -> OpponentProfile:
    rng = random.Random(f"profile:{name}")
    return OpponentProfile(
        name=name,
        division=division,
        offense_style=rng.choice(TEAM_STYLES),
        defense_style=rng.choice(TEAM_STYLES),
        offensive_tactic=rng.choice(TACTICS),
        defensive_tactic=rng.choice(TACTICS),
        strength=round(rng.uniform(72.0, 88.0), 1),
        offense_edge=round(rng.uniform(-4.0, 4.0), 1),
    )


@dataclass(slots=True)
class LeagueData:
    divisions: dict[str, tuple[str, ...]] = field(default_factory=lambda: dict(DIVISIONS))
    schedule_template: tuple[tuple[int, str | None, bool], ...] = SCHEDULE_TEMPLATE
    user_team_name: str = USER_TEAM_NAME
    extra_opponents: dict[str, str] = field(default_factory=lambda: dict(NON_DIVISION_OPPONENTS))

    def team_names(self) -> list[str]:
        return [name for names in self.divisions.values() for name in names]

    def league_teams(self) -> list[str]:
        return [name for name in self.team_names() if name != self.user_team_name]

    def division_for(self, team_name: str) -> str:
        for division, names in self.divisions.items():
            if team_name in names:
                return division
        return self.extra_opponents.get(team_name, "Independent")

    def profile(self, team_name: str) -> OpponentProfile:
        return build_opponent_profile(team_name, self.division_for(team_name))


DEFAULT_LEAGUE = LeagueData()

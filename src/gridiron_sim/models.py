from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum

from .errors import InvalidTarget


class Stat(str, Enum):
    PASSING = "passing"
    RUSHING = "rushing"
    LEADERSHIP = "leadership"
    RECEIVING = "receiving"
    BLOCKING = "blocking"
    SPEED = "speed"
    ROUTE = "route"
    HANDS = "hands"
    STRENGTH = "strength"
    TECHNIQUE = "technique"
    SNAPPING = "snapping"
    STAMINA = "stamina"
    PASS_RUSH = "pass_rush"
    RUN_STOP = "run_stop"
    COVERAGE = "coverage"
    TACKLING = "tackling"
    RANGE = "range"


class Position(str, Enum):
    QB = "QB"
    RB = "RB"
    FB = "FB"
    WR = "WR"
    TE = "TE"
    LT = "LT"
    LG = "LG"
    C = "C"
    RG = "RG"
    DE = "DE"
    DT = "DT"
    LB = "LB"
    CB = "CB"
    S = "S"


OFFENSE_POSITIONS = {Position.QB, Position.RB, Position.FB, Position.WR, Position.TE, Position.LT, Position.LG, Position.C, Position.RG}
DEFENSE_POSITIONS = {Position.DE, Position.DT, Position.LB, Position.CB, Position.S}

OFFENSE_SLOTS: tuple[Position, ...] = (
    Position.QB,
    Position.RB,
    Position.FB,
    Position.WR,
    Position.WR,
    Position.WR,
    Position.TE,
    Position.LT,
    Position.LG,
    Position.C,
    Position.RG,
)
DEFENSE_SLOTS: tuple[Position, ...] = (
    Position.DE,
    Position.DE,
    Position.DT,
    Position.DT,
    Position.LB,
    Position.LB,
    Position.LB,
    Position.CB,
    Position.CB,
    Position.S,
    Position.S,
)

OFFENSE_STATS = {
    Stat.PASSING,
    Stat.RUSHING,
    Stat.LEADERSHIP,
    Stat.RECEIVING,
    Stat.BLOCKING,
    Stat.SPEED,
    Stat.ROUTE,
    Stat.HANDS,
    Stat.STRENGTH,
    Stat.TECHNIQUE,
    Stat.SNAPPING,
    Stat.STAMINA,
}
DEFENSE_STATS = {
    Stat.PASS_RUSH,
    Stat.RUN_STOP,
    Stat.STRENGTH,
    Stat.COVERAGE,
    Stat.TACKLING,
    Stat.SPEED,
    Stat.RANGE,
    Stat.STAMINA,
}

UPGRADE_SCOPES = ("team", "player")
UPGRADE_CATEGORIES = ("offense", "defense", "both")


def side_for_position(position: Position) -> str:
    return "offense" if position in OFFENSE_POSITIONS else "defense"


@dataclass(frozen=True, slots=True)
class UpgradeEffect:
    stat: Stat
    amount: int
    positions: tuple[Position, ...] = ()


@dataclass(frozen=True, slots=True)
class Upgrade:
    upgrade_id: int
    name: str
    cost: int
    scope: str
    category: str
    effect: UpgradeEffect
    description: str = ""

    def __post_init__(self) -> None:
        if self.cost <= 0:
            raise ValueError(f"Upgrade {self.name} must have a positive cost.")
        if self.scope not in UPGRADE_SCOPES:
            raise ValueError(f"Unknown upgrade scope '{self.scope}'.")
        if self.category not in UPGRADE_CATEGORIES:
            raise ValueError(f"Unknown upgrade category '{self.category}'.")
        if self.effect.amount <= 0:
            raise ValueError(f"Upgrade {self.name} must add a positive amount.")
        if self.scope == "player" and not self.effect.positions:
            raise ValueError(f"Player upgrade {self.name} needs a target-position filter.")


@dataclass(frozen=True, slots=True)
class UpgradeApplication:
    upgrade_id: int
    target_player_id: int | None
    applied_at_week: int
    stat: Stat
    amount: int
    category: str = "both"


@dataclass(frozen=True, slots=True)
class Player:
    # Identity and base stats are fixed; upgrades only ever append to applied_upgrades.
    player_id: int
    position: Position
    name: str
    base_stats: dict[Stat, int]
    applied_upgrades: list[UpgradeApplication] = field(default_factory=list)

    def __post_init__(self) -> None:
        allowed = OFFENSE_STATS if self.position in OFFENSE_POSITIONS else DEFENSE_STATS
        for stat, value in self.base_stats.items():
            if stat not in allowed:
                raise ValueError(f"{self.name} ({self.position.value}) cannot carry stat '{stat.value}'.")
            if value < 0:
                raise ValueError(f"{self.name} has negative {stat.value}.")

    @property
    def side(self) -> str:
        return side_for_position(self.position)


@dataclass(slots=True)
class Team:
    offense_style: str
    defense_style: str
    offensive_players: list[Player] = field(default_factory=list)
    defensive_players: list[Player] = field(default_factory=list)
    training_points: int = 0
    applied_upgrades: list[UpgradeApplication] = field(default_factory=list)
    name: str = "Your Team"

    def all_players(self) -> list[Player]:
        return [*self.offensive_players, *self.defensive_players]

    def find_player(self, player_id: int | None) -> Player | None:
        if player_id is None:
            return None
        for player in self.all_players():
            if player.player_id == player_id:
                return player
        return None

    def roster_problems(self) -> list[str]:
        problems: list[str] = []
        for side, players, slots in (
            ("offense", self.offensive_players, OFFENSE_SLOTS),
            ("defense", self.defensive_players, DEFENSE_SLOTS),
        ):
            have = Counter(p.position for p in players)
            need = Counter(slots)
            for position, count in need.items():
                if have[position] < count:
                    problems.append(f"{side} is missing {count - have[position]} {position.value}")
            for position, count in have.items():
                if count > need[position]:
                    problems.append(f"{side} has {count - need[position]} extra {position.value}")
            if have == need and [p.position for p in players] != list(slots):
                problems.append(f"{side} players are out of slot order")
        ids = [p.player_id for p in self.all_players()]
        if len(ids) != len(set(ids)):
            problems.append("player ids are not unique")
        return problems

    @property
    def is_complete(self) -> bool:
        return not self.roster_problems()

    def _covers(self, category: str, player: Player) -> bool:
        return category == "both" or category == player.side

    def effective_stats(self, player_id: int) -> dict[Stat, int]:
        player = self.find_player(player_id)
        if player is None:
            raise InvalidTarget(f"No player with id {player_id} on the roster.")
        stats = dict(player.base_stats)
        for app in player.applied_upgrades:
            if app.stat in stats:
                stats[app.stat] += app.amount
        for app in self.applied_upgrades:
            if app.stat in stats and self._covers(app.category, player):
                stats[app.stat] += app.amount
        return stats

    def check_upgrade_target(self, upgrade: Upgrade, target_player_id: int | None) -> Player | None:
        if upgrade.scope == "team":
            return None
        if target_player_id is None:
            raise InvalidTarget(f"{upgrade.name} needs a target player.")
        player = self.find_player(target_player_id)
        if player is None:
            raise InvalidTarget(f"No player with id {target_player_id} on the roster.")
        if player.position not in upgrade.effect.positions:
            allowed = "/".join(p.value for p in upgrade.effect.positions)
            raise InvalidTarget(f"{upgrade.name} can only target {allowed}, not {player.position.value}.")
        if upgrade.effect.stat not in player.base_stats:
            raise InvalidTarget(f"{player.name} has no {upgrade.effect.stat.value} rating to improve.")
        return player

    def apply_upgrade(self, upgrade: Upgrade, target_player_id: int | None = None, week: int = 1) -> Player | Team:
        player = self.check_upgrade_target(upgrade, target_player_id)
        application = UpgradeApplication(
            upgrade_id=upgrade.upgrade_id,
            target_player_id=player.player_id if player is not None else None,
            applied_at_week=week,
            stat=upgrade.effect.stat,
            amount=upgrade.effect.amount,
            category=upgrade.category,
        )
        if player is None:
            self.applied_upgrades.append(application)
            return self
        player.applied_upgrades.append(application)
        return player


@dataclass(frozen=True, slots=True)
class OpponentProfile:
    name: str
    division: str
    offense_style: str
    defense_style: str
    offensive_tactic: str
    defensive_tactic: str
    strength: float
    # Positive leans the aggregate strength toward offense.
    offense_edge: float = 0.0

    @property
    def offense_rating(self) -> float:
        return self.strength + self.offense_edge

    @property
    def defense_rating(self) -> float:
        return self.strength - self.offense_edge


@dataclass(frozen=True, slots=True)
class GameScore:
    own_score: int
    opp_score: int


@dataclass(slots=True)
class Matchup:
    week: int
    opponent_name: str | None
    is_home: bool = True
    is_bye: bool = False
    result: GameScore | None = None

    @property
    def label(self) -> str:
        if self.is_bye:
            return "BYE WEEK"
        return f"{'vs' if self.is_home else '@'} {self.opponent_name}"

    @property
    def status(self) -> str:
        if self.is_bye:
            return "bye"
        return "completed" if self.result is not None else "upcoming"

    @property
    def score_text(self) -> str:
        if self.result is None:
            return ""
        own, opp = self.result.own_score, self.result.opp_score
        mark = "W" if own > opp else ("L" if own < opp else "T")
        return f"{mark} {own}-{opp}"


@dataclass(slots=True)
class TeamRecord:
    team_name: str
    division: str
    wins: int = 0
    losses: int = 0
    ties: int = 0
    points_for: int = 0
    points_against: int = 0
    recent_results: list[str] = field(default_factory=list)

    @property
    def games_played(self) -> int:
        return self.wins + self.losses + self.ties

    @property
    def record(self) -> str:
        if self.ties:
            return f"{self.wins}-{self.losses}-{self.ties}"
        return f"{self.wins}-{self.losses}"

    @property
    def win_pct(self) -> float:
        gp = self.games_played
        if gp <= 0:
            return 0.0
        return (self.wins + self.ties * 0.5) / gp

    @property
    def point_diff(self) -> int:
        return self.points_for - self.points_against

    @property
    def streak(self) -> str:
        if not self.recent_results:
            return "-"
        last = self.recent_results[-1]
        count = 1
        for result in reversed(self.recent_results[:-1]):
            if result != last:
                break
            count += 1
        return f"{last}{count}"

    def register_game(self, points_for: int, points_against: int) -> None:
        self.points_for += points_for
        self.points_against += points_against
        if points_for > points_against:
            self.wins += 1
            self.recent_results.append("W")
        elif points_for < points_against:
            self.losses += 1
            self.recent_results.append("L")
        else:
            self.ties += 1
            self.recent_results.append("T")
        if len(self.recent_results) > 5:
            self.recent_results = self.recent_results[-5:]

from __future__ import annotations

import logging
import random
from enum import Enum
from pathlib import Path
from typing import Any, Callable

from .app import build_default_team
from .catalog import UpgradeCatalog, get_upgrade
from .config import (
    DIFFICULTY_TRAINING_POINTS,
    SCOUTING_COSTS,
    SEASON_WEEKS,
    TEAM_STYLES,
)
from .economy import EconomyLedger
from .engine import MatchResult, defense_rating, offense_rating, resolve, simulate_league_game
from .errors import (
    CorruptState,
    InvalidPhaseTransition,
    InvalidSelection,
    TacticsNotSelected,
)
from .league import DEFAULT_LEAGUE, LeagueData
from .models import GameScore, Matchup, Player, Team, TeamRecord
from .persistence import (
    SAVE_VERSION,
    deserialize_entry,
    deserialize_matchup,
    deserialize_record,
    deserialize_result,
    deserialize_team,
    read_state,
    serialize_application,
    serialize_entry,
    serialize_matchup,
    serialize_record,
    serialize_result,
    serialize_team,
    serialize_upgrade,
    write_json_with_backup,
)
from .schedule import build_schedule, pair_weekly_games, schedule_problems
from .tactics import TacticSelection, TacticsSelector

_log = logging.getLogger("gridiron.season")

RosterFactory = Callable[[str, str, int], Team]

OFFENSE_STYLE_TEXT = {"pass": "Pass-heavy", "run": "Strong running", "balanced": "Balanced"}
DEFENSE_STYLE_TEXT = {"pass": "pass-prevent", "run": "run-stopping", "balanced": "versatile"}


class Phase(str, Enum):
    SETUP = "setup"
    MANAGEMENT = "management"
    TACTICS_SELECTION = "tactics_selection"
    MATCH_IN_PROGRESS = "match_in_progress"
    RESULTS = "results"
    SEASON_COMPLETE = "season_complete"


IN_SEASON_PHASES = {Phase.MANAGEMENT, Phase.TACTICS_SELECTION, Phase.MATCH_IN_PROGRESS, Phase.RESULTS}


class SeasonController:
    """Drives one run through Setup, weekly management, matches and results.

    Every public operation checks the current phase first and raises
    ``InvalidPhaseTransition`` without touching state when called out of turn.
    """

    SCOUTING_REPORTS = tuple(SCOUTING_COSTS)

    def __init__(
        self,
        seed: int | None = None,
        league: LeagueData | None = None,
        roster_factory: RosterFactory = build_default_team,
    ) -> None:
        self.seed = seed if seed is not None else random.randrange(1, 1 << 30)
        self.league = league or DEFAULT_LEAGUE
        self._roster_factory = roster_factory
        self.phase = Phase.SETUP
        self.run_number = 0
        self.current_week = 1
        self.offense_style: str | None = None
        self.defense_style: str | None = None
        self.difficulty: str | None = None
        self.team: Team | None = None
        self.ledger = EconomyLedger()
        self.catalog = UpgradeCatalog(seed=self.seed, run_number=0)
        self.tactics = TacticsSelector()
        self.schedule: list[Matchup] = []
        self.standings: dict[str, TeamRecord] = {}
        self.last_result: MatchResult | None = None
        self.pending_result: MatchResult | None = None
        self.scouting: dict[int, dict[str, dict[str, Any]]] = {}
        self.league_results: dict[int, list[dict[str, Any]]] = {}

    # ----------------------------------------------------------------- guards

    def _require_phase(self, action: str, *phases: Phase) -> None:
        if self.phase not in phases:
            allowed = ", ".join(p.value for p in phases)
            raise InvalidPhaseTransition(f"Cannot {action} during {self.phase.value}; allowed in: {allowed}.")

    def _require_team(self) -> Team:
        if self.team is None:
            raise InvalidPhaseTransition("No season in progress.")
        return self.team

    @property
    def can_begin(self) -> bool:
        return bool(self.offense_style and self.defense_style and self.difficulty)

    @property
    def current_matchup(self) -> Matchup | None:
        if not self.schedule:
            return None
        return self.schedule[self.current_week - 1]

    @property
    def training_points(self) -> int:
        return self.ledger.balance

    def match_seed(self, week: int | None = None) -> str:
        return f"match:{self.seed}:{self.run_number}:{week or self.current_week}"

    # ------------------------------------------------------------------ setup

    def configure(
        self,
        offense_style: str | None = None,
        defense_style: str | None = None,
        difficulty: str | None = None,
    ) -> None:
        self._require_phase("change team setup", Phase.SETUP)
        offense = offense_style.lower().strip() if offense_style is not None else None
        defense = defense_style.lower().strip() if defense_style is not None else None
        level = difficulty.lower().strip() if difficulty is not None else None
        if offense is not None and offense not in TEAM_STYLES:
            raise InvalidSelection(f"Unknown offensive style '{offense_style}'.")
        if defense is not None and defense not in TEAM_STYLES:
            raise InvalidSelection(f"Unknown defensive style '{defense_style}'.")
        if level is not None and level not in DIFFICULTY_TRAINING_POINTS:
            raise InvalidSelection(f"Unknown difficulty '{difficulty}'.")
        if offense is not None:
            self.offense_style = offense
        if defense is not None:
            self.defense_style = defense
        if level is not None:
            self.difficulty = level

    def begin_season(self) -> None:
        self._require_phase("begin the season", Phase.SETUP)
        missing = [
            label
            for label, value in (
                ("offensive style", self.offense_style),
                ("defensive style", self.defense_style),
                ("difficulty", self.difficulty),
            )
            if not value
        ]
        if missing:
            raise InvalidPhaseTransition(f"Choose {', '.join(missing)} before starting the season.")

        starting_points = DIFFICULTY_TRAINING_POINTS[self.difficulty]
        run_number = self.run_number + 1
        team = self._roster_factory(self.offense_style, self.defense_style, starting_points)
        team.name = self.league.user_team_name
        team.training_points = starting_points
        schedule = build_schedule(self.league.schedule_template)
        catalog = UpgradeCatalog(seed=self.seed, run_number=run_number)

        self.run_number = run_number
        self.current_week = 1
        self.team = team
        self.ledger = EconomyLedger(balance=starting_points)
        self.schedule = schedule
        self.standings = {
            name: TeamRecord(team_name=name, division=division)
            for division, names in self.league.divisions.items()
            for name in names
        }
        self.catalog = catalog
        self.tactics.reset()
        self.last_result = None
        self.pending_result = None
        self.scouting = {}
        self.league_results = {}
        self.phase = Phase.MANAGEMENT
        _log.info(
            "Run %d started: %s offense, %s defense, %s (%d TP)",
            self.run_number,
            self.offense_style,
            self.defense_style,
            self.difficulty,
            starting_points,
        )
        if self._skip_bye_weeks():
            self.catalog.restock(self.current_week)

    # ------------------------------------------------------------- management

    def purchase_upgrade(self, upgrade_id: int, target_player_id: int | None = None) -> int:
        self._require_phase("purchase upgrades", Phase.MANAGEMENT)
        team = self._require_team()
        return self.catalog.purchase(upgrade_id, self.ledger, team, target_player_id, week=self.current_week)

    def refresh_offers(self) -> list[Any]:
        self._require_phase("refresh training offers", Phase.MANAGEMENT)
        team = self._require_team()
        return self.catalog.refresh(self.ledger, self.current_week, team)

    def scout(self, report: str) -> dict[str, Any]:
        self._require_phase("scout opponents", Phase.MANAGEMENT)
        team = self._require_team()
        report = report.lower().strip()
        if report not in SCOUTING_COSTS:
            raise InvalidSelection(f"Unknown scouting report '{report}'.")
        matchup = self.current_matchup
        if matchup is None or matchup.is_bye or not matchup.opponent_name:
            raise InvalidSelection("No opponent to scout this week.")
        week_reports = self.scouting.get(self.current_week, {})
        if report in week_reports:
            return week_reports[report]

        profile = self.league.profile(matchup.opponent_name)
        if report == "tendencies":
            data: dict[str, Any] = {
                "offense_style": profile.offense_style,
                "defense_style": profile.defense_style,
                "offensive_tactic": profile.offensive_tactic,
                "defensive_tactic": profile.defensive_tactic,
                "summary": (
                    f"{OFFENSE_STYLE_TEXT[profile.offense_style]} offense, "
                    f"{DEFENSE_STYLE_TEXT[profile.defense_style]} defense. "
                    f"{profile.defensive_tactic.capitalize()} defensive style."
                ),
            }
        elif report == "offense":
            data = {"offense_rating": round(profile.offense_rating, 1)}
        else:
            data = {"defense_rating": round(profile.defense_rating, 1)}
        data["opponent_name"] = profile.name

        self.ledger.debit(SCOUTING_COSTS[report], memo=f"Scout {report}: {profile.name}", week=self.current_week)
        team.training_points = self.ledger.balance
        self.scouting.setdefault(self.current_week, {})[report] = data
        _log.info("Scouted %s report on %s", report, profile.name)
        return data

    def proceed_to_tactics(self) -> None:
        self._require_phase("open tactics", Phase.MANAGEMENT)
        self.phase = Phase.TACTICS_SELECTION

    # ---------------------------------------------------------------- tactics

    def select_tactics(self, offensive_tactic: str | None = None, defensive_tactic: str | None = None) -> TacticSelection:
        self._require_phase("select tactics", Phase.TACTICS_SELECTION)
        return self.tactics.select(offensive_tactic, defensive_tactic)

    def back_to_management(self) -> None:
        self._require_phase("return to training", Phase.TACTICS_SELECTION)
        self.phase = Phase.MANAGEMENT

    # ------------------------------------------------------------------ match

    def start_match(self) -> MatchResult:
        self._require_phase("start the match", Phase.TACTICS_SELECTION)
        team = self._require_team()
        if not self.tactics.is_complete():
            raise TacticsNotSelected("Select both offensive and defensive tactics.")
        matchup = self.current_matchup
        if matchup is None or matchup.is_bye or not matchup.opponent_name:
            raise InvalidPhaseTransition(f"No game scheduled for week {self.current_week}.")
        opponent = self.league.profile(matchup.opponent_name)
        result = resolve(
            team,
            self.tactics.selection,
            opponent,
            seed=self.match_seed(),
            difficulty=self.difficulty or "normal",
            week=self.current_week,
            is_home=matchup.is_home,
        )
        self.tactics.reset()
        self.pending_result = result
        self.phase = Phase.MATCH_IN_PROGRESS
        return result

    def finish_match(self) -> MatchResult:
        """Leave the match screen; skip-to-final and normal playback both land here."""
        self._require_phase("finish the match", Phase.MATCH_IN_PROGRESS)
        result = self.pending_result
        if result is None:
            raise CorruptState("Match in progress without a resolved result.")
        matchup = self.schedule[self.current_week - 1]
        matchup.result = GameScore(own_score=result.own_score, opp_score=result.opp_score)
        user_record = self.standings.get(self.league.user_team_name)
        if user_record is not None:
            user_record.register_game(result.own_score, result.opp_score)
        opponent_record = self.standings.get(result.opponent_name)
        if opponent_record is not None:
            opponent_record.register_game(result.opp_score, result.own_score)
        self._play_league_week(self.current_week, exclude={result.opponent_name})
        self.last_result = result
        self.pending_result = None
        self.phase = Phase.RESULTS
        _log.info(
            "Week %d %s vs %s %d-%d (+%d TP)",
            self.current_week,
            result.outcome,
            result.opponent_name,
            result.own_score,
            result.opp_score,
            result.training_points_awarded,
        )
        return result

    # ---------------------------------------------------------------- results

    def _credit_result(self) -> None:
        result = self.last_result
        if result is None:
            return
        self.ledger.credit(
            result.training_points_awarded,
            memo=f"Week {result.week} {result.outcome} vs {result.opponent_name}",
            week=result.week,
        )
        self._require_team().training_points = self.ledger.balance

    def continue_season(self) -> None:
        self._require_phase("continue the season", Phase.RESULTS)
        self._credit_result()
        if self.current_week >= SEASON_WEEKS:
            self._complete_season()
            return
        self.current_week += 1
        if self._skip_bye_weeks():
            self.catalog.restock(self.current_week)
            self.phase = Phase.MANAGEMENT

    def end_season(self) -> None:
        self._require_phase("end the season", Phase.MANAGEMENT, Phase.RESULTS)
        if self.phase == Phase.RESULTS:
            self._credit_result()
        self.tactics.reset()
        self._complete_season()

    def new_run(self) -> None:
        self._require_phase(
            "start a new run",
            Phase.SETUP,
            Phase.MANAGEMENT,
            Phase.TACTICS_SELECTION,
            Phase.RESULTS,
            Phase.SEASON_COMPLETE,
        )
        self.phase = Phase.SETUP
        self.offense_style = None
        self.defense_style = None
        self.difficulty = None
        self.team = None
        self.ledger = EconomyLedger()
        self.catalog = UpgradeCatalog(seed=self.seed, run_number=self.run_number)
        self.tactics.reset()
        self.schedule = []
        self.standings = {}
        self.last_result = None
        self.pending_result = None
        self.scouting = {}
        self.league_results = {}

    def _complete_season(self) -> None:
        self.phase = Phase.SEASON_COMPLETE
        record = self.standings.get(self.league.user_team_name)
        _log.info("Run %d complete at %s", self.run_number, record.record if record else "-")

    def _skip_bye_weeks(self) -> bool:
        """Process bye weeks at the current week. Returns False if the season ended."""
        while self.current_matchup is not None and self.current_matchup.is_bye:
            week = self.current_week
            self._play_league_week(week, exclude=set())
            _log.info("Week %d bye", week)
            if week >= SEASON_WEEKS:
                self._complete_season()
                return False
            self.current_week += 1
        return True

    def _play_league_week(self, week: int, exclude: set[str]) -> None:
        rng = random.Random(f"league:{self.seed}:{self.run_number}:{week}")
        names = [name for name in self.league.league_teams() if name not in exclude and name in self.standings]
        games: list[dict[str, Any]] = []
        for home, away in pair_weekly_games(names, rng):
            home_score, away_score = simulate_league_game(self.league.profile(home), self.league.profile(away), rng)
            self.standings[home].register_game(home_score, away_score)
            self.standings[away].register_game(away_score, home_score)
            games.append({"home": home, "away": away, "home_score": home_score, "away_score": away_score})
        self.league_results[week] = games

    # --------------------------------------------------------------- queries

    def get_standings(self) -> list[TeamRecord]:
        return sorted(
            self.standings.values(),
            key=lambda r: (-r.win_pct, -r.point_diff, -r.points_for, r.team_name),
        )

    def get_division_standings(self) -> dict[str, list[TeamRecord]]:
        ordered = self.get_standings()
        return {
            division: [rec for rec in ordered if rec.division == division]
            for division in self.league.divisions
        }

    def effective_stats(self, player_id: int) -> dict[str, int]:
        team = self._require_team()
        return {stat.value: value for stat, value in team.effective_stats(player_id).items()}

    def _player_view(self, team: Team, player: Player) -> dict[str, Any]:
        return {
            "player_id": player.player_id,
            "position": player.position.value,
            "name": player.name,
            "base_stats": {stat.value: value for stat, value in player.base_stats.items()},
            "stats": {stat.value: value for stat, value in team.effective_stats(player.player_id).items()},
            "upgrades": [serialize_application(app) for app in player.applied_upgrades],
        }

    def snapshot(self) -> dict[str, Any]:
        """Everything a presentation layer needs to render the current screen."""
        team = self.team
        team_view = None
        if team is not None:
            team_view = {
                "name": team.name,
                "offense_style": team.offense_style,
                "defense_style": team.defense_style,
                "ratings": {
                    "offense": round(offense_rating(team), 1),
                    "defense": round(defense_rating(team), 1),
                },
                "offense": [self._player_view(team, p) for p in team.offensive_players],
                "defense": [self._player_view(team, p) for p in team.defensive_players],
                "team_upgrades": [serialize_application(app) for app in team.applied_upgrades],
            }
        matchup = self.current_matchup
        return {
            "phase": self.phase.value,
            "run_number": self.run_number,
            "current_week": self.current_week,
            "offense_style": self.offense_style,
            "defense_style": self.defense_style,
            "difficulty": self.difficulty,
            "can_begin": self.can_begin,
            "training_points": self.ledger.balance,
            "team": team_view,
            "offers": [
                {**serialize_upgrade(u), "affordable": self.ledger.can_afford(u.cost)}
                for u in self.catalog.get_available()
            ],
            "refresh_cost": self.catalog.refresh_cost,
            "can_refresh": self.ledger.can_afford(self.catalog.refresh_cost),
            "scouting_costs": dict(SCOUTING_COSTS),
            "scouting": dict(self.scouting.get(self.current_week, {})),
            "tactics": {
                "offensive_tactic": self.tactics.selection.offensive_tactic,
                "defensive_tactic": self.tactics.selection.defensive_tactic,
                "state": self.tactics.state,
                "complete": self.tactics.is_complete(),
            },
            "current_matchup": (
                {**serialize_matchup(matchup), "label": matchup.label, "status": matchup.status}
                if matchup is not None
                else None
            ),
            "schedule": [
                {**serialize_matchup(m), "label": m.label, "status": m.status, "score": m.score_text}
                for m in self.schedule
            ],
            "standings": {
                division: [{**serialize_record(r), "record": r.record} for r in records]
                for division, records in self.get_division_standings().items()
            },
            "pending_result": serialize_result(self.pending_result) if self.pending_result else None,
            "last_result": serialize_result(self.last_result) if self.last_result else None,
            "ledger": [serialize_entry(entry) for entry in self.ledger.entries],
        }

    # ------------------------------------------------------------ persistence

    def to_state(self) -> dict[str, Any]:
        return {
            "save_version": SAVE_VERSION,
            "seed": self.seed,
            "phase": self.phase.value,
            "run_number": self.run_number,
            "current_week": self.current_week,
            "offense_style": self.offense_style,
            "defense_style": self.defense_style,
            "difficulty": self.difficulty,
            "team": serialize_team(self.team) if self.team is not None else None,
            "training_points": self.ledger.balance,
            "ledger": [serialize_entry(entry) for entry in self.ledger.entries],
            "offers": [u.upgrade_id for u in self.catalog.offers],
            "refresh_count": self.catalog.refresh_count,
            "tactics": {
                "offensive_tactic": self.tactics.selection.offensive_tactic,
                "defensive_tactic": self.tactics.selection.defensive_tactic,
            },
            "schedule": [serialize_matchup(m) for m in self.schedule],
            "standings": [serialize_record(r) for r in self.standings.values()],
            "last_result": serialize_result(self.last_result) if self.last_result else None,
            "pending_result": serialize_result(self.pending_result) if self.pending_result else None,
            "scouting": {str(week): reports for week, reports in self.scouting.items()},
            "league_results": {str(week): games for week, games in self.league_results.items()},
        }

    @classmethod
    def from_state(cls, raw: dict[str, Any], league: LeagueData | None = None) -> SeasonController:
        try:
            controller = cls._build_from_state(raw, league)
        except CorruptState:
            raise
        except (KeyError, TypeError, ValueError, AttributeError, InvalidSelection) as exc:
            raise CorruptState(f"Season state is invalid ({exc}).") from exc
        problems = controller.state_problems()
        if problems:
            raise CorruptState("Season state failed validation: " + "; ".join(problems))
        return controller

    @classmethod
    def _build_from_state(cls, raw: dict[str, Any], league: LeagueData | None) -> SeasonController:
        controller = cls(seed=int(raw["seed"]), league=league)
        controller.phase = Phase(raw["phase"])
        controller.run_number = int(raw.get("run_number", 0))
        controller.current_week = int(raw.get("current_week", 1))
        controller.offense_style = raw.get("offense_style")
        controller.defense_style = raw.get("defense_style")
        controller.difficulty = raw.get("difficulty")
        raw_team = raw.get("team")
        controller.team = deserialize_team(raw_team) if isinstance(raw_team, dict) else None
        entries = [deserialize_entry(row) for row in raw.get("ledger", [])]
        controller.ledger = EconomyLedger(balance=int(raw.get("training_points", 0)), entries=entries)
        catalog = UpgradeCatalog(seed=controller.seed, run_number=controller.run_number)
        catalog.refresh_count = int(raw.get("refresh_count", 0))
        for upgrade_id in raw.get("offers", []):
            upgrade = get_upgrade(int(upgrade_id))
            if upgrade is None:
                raise CorruptState(f"Offer references unknown upgrade {upgrade_id}.")
            catalog.offers.append(upgrade)
        controller.catalog = catalog
        raw_tactics = raw.get("tactics") or {}
        controller.tactics.select(raw_tactics.get("offensive_tactic"), raw_tactics.get("defensive_tactic"))
        controller.schedule = [deserialize_matchup(row) for row in raw.get("schedule", [])]
        controller.standings = {
            rec.team_name: rec for rec in (deserialize_record(row) for row in raw.get("standings", []))
        }
        raw_last = raw.get("last_result")
        controller.last_result = deserialize_result(raw_last) if isinstance(raw_last, dict) else None
        raw_pending = raw.get("pending_result")
        controller.pending_result = deserialize_result(raw_pending) if isinstance(raw_pending, dict) else None
        controller.scouting = {int(week): dict(reports) for week, reports in dict(raw.get("scouting", {})).items()}
        controller.league_results = {
            int(week): list(games) for week, games in dict(raw.get("league_results", {})).items()
        }
        return controller

    def state_problems(self) -> list[str]:
        problems: list[str] = []
        if self.ledger.balance < 0:
            problems.append("training points are negative")
        if self.phase == Phase.SETUP:
            return problems
        for label, value, allowed in (
            ("offensive style", self.offense_style, TEAM_STYLES),
            ("defensive style", self.defense_style, TEAM_STYLES),
            ("difficulty", self.difficulty, tuple(DIFFICULTY_TRAINING_POINTS)),
        ):
            if value not in allowed:
                problems.append(f"unknown {label} '{value}'")
        if self.run_number < 1:
            problems.append("run number must be at least 1")
        if self.team is None:
            problems.append("season in progress without a team")
        else:
            problems.extend(self.team.roster_problems())
            if self.team.training_points != self.ledger.balance:
                problems.append("team training points do not match the ledger")
        problems.extend(schedule_problems(self.schedule))
        if not 1 <= self.current_week <= SEASON_WEEKS:
            problems.append(f"current week {self.current_week} is out of range")
        elif self.phase in IN_SEASON_PHASES and self.current_week <= len(self.schedule):
            if self.schedule[self.current_week - 1].is_bye:
                problems.append(f"week {self.current_week} is a bye but the season is waiting on a game")
        for matchup in self.schedule:
            played = matchup.week < self.current_week or (
                matchup.week == self.current_week and self.phase in {Phase.RESULTS, Phase.SEASON_COMPLETE}
            )
            if matchup.result is not None and not played:
                problems.append(f"week {matchup.week} has a result before it was played")
        if self.phase == Phase.MATCH_IN_PROGRESS and self.pending_result is None:
            problems.append("match in progress without a result")
        if self.phase == Phase.RESULTS and self.last_result is None:
            problems.append("results phase without a result")
        return problems

    def save(self, path: str | Path) -> None:
        write_json_with_backup(Path(path), self.to_state())
        _log.debug("Saved season state to %s", path)

    @classmethod
    def load(cls, path: str | Path, league: LeagueData | None = None) -> SeasonController:
        controller = cls.from_state(read_state(Path(path)), league=league)
        _log.info("Loaded run %d week %d (%s) from %s", controller.run_number, controller.current_week, controller.phase.value, path)
        return controller

"""Static simulation configuration constants."""

SEASON_WEEKS = 17
OFFER_SET_SIZE = 4
REFRESH_COST = 15

TEAM_STYLES: tuple[str, ...] = ("pass", "run", "balanced")
TACTICS: tuple[str, ...] = ("aggressive", "conservative", "balanced")

DIFFICULTY_TRAINING_POINTS: dict[str, int] = {
    "underdog": 75,
    "normal": 125,
    "favorite": 200,
}

# Underdog runs earn more per game so the lower bankroll can catch up.
DIFFICULTY_REWARD_MULTIPLIER: dict[str, float] = {
    "underdog": 1.2,
    "normal": 1.0,
    "favorite": 0.8,
}

SCOUTING_COSTS: dict[str, int] = {
    "tendencies": 10,
    "offense": 25,
    "defense": 25,
}

WIN_BASE_REWARD = 50
# (max margin, bonus); the last tier covers every larger margin.
WIN_MARGIN_BONUS: tuple[tuple[int, int], ...] = (
    (8, 25),
    (16, 35),
    (999, 45),
)
TIE_REWARD = 40
LOSS_REWARD = 25
CLOSE_LOSS_MARGIN = 7
CLOSE_LOSS_BONUS = 10

OFFENSE_STYLE_WEIGHTS: dict[str, dict[str, float]] = {
    "pass": {
        "passing": 0.26,
        "receiving": 0.18,
        "route": 0.14,
        "speed": 0.10,
        "hands": 0.05,
        "blocking": 0.10,
        "rushing": 0.05,
        "leadership": 0.07,
        "stamina": 0.05,
    },
    "run": {
        "rushing": 0.28,
        "blocking": 0.26,
        "strength": 0.10,
        "technique": 0.06,
        "passing": 0.08,
        "receiving": 0.04,
        "speed": 0.06,
        "leadership": 0.07,
        "stamina": 0.05,
    },
}

DEFENSE_STYLE_WEIGHTS: dict[str, dict[str, float]] = {
    "pass": {
        "coverage": 0.32,
        "pass_rush": 0.24,
        "speed": 0.10,
        "range": 0.10,
        "tackling": 0.09,
        "run_stop": 0.10,
        "stamina": 0.05,
    },
    "run": {
        "run_stop": 0.34,
        "tackling": 0.24,
        "strength": 0.18,
        "pass_rush": 0.06,
        "coverage": 0.08,
        "range": 0.05,
        "stamina": 0.05,
    },
}

STYLE_COUNTER_BONUS = 4.0
STYLE_MISMATCH_PENALTY = 3.0

TACTIC_EFFECTS: dict[str, dict[str, float]] = {
    "balanced": {"variance": 1.00, "floor": 0.00, "ceiling": 0.00, "turnover": 0.00},
    "aggressive": {"variance": 1.20, "floor": -0.05, "ceiling": 0.20, "turnover": 0.04},
    "conservative": {"variance": 0.90, "floor": 0.05, "ceiling": -0.20, "turnover": -0.03},
}

BASE_POINTS = 21.0
POINTS_PER_RATING = 0.65
MIN_EXPECTED_POINTS = 6.0
MAX_EXPECTED_POINTS = 42.0
SCORE_STDDEV = 7.0
SCORE_FLOOR_RATIO = 0.35
SCORE_CEILING_RATIO = 1.80
DRIVES_PER_GAME = 11
BASE_TURNOVER_RATE = 0.08
TURNOVER_POINT_COST = 2.5
TAKEAWAY_POINT_GAIN = 1.5

PASS_SHARE_BY_STYLE: dict[str, float] = {
    "pass": 0.66,
    "run": 0.38,
    "balanced": 0.52,
}

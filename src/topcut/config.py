"""Centralized configuration for topcut.

All paths, statistical defaults, and settings in one place.
Environment variables can override defaults.

Path Constants:
    PROJECT_ROOT - Root directory of the project
    STORAGE_DIR - Storage for database and reports
    REPORTS_DIR - Backtest and analysis output
    DEFAULT_DB_PATH - SQLite database (overridable via TOPCUT_DB_PATH)

Statistical Constants:
    PRIOR_WIN_RATE - Prior win rate used for shrinkage (4-player pods -> 0.25)
    MIN_TRAIN_GAMES / MIN_TEST_GAMES - Backtest qualification thresholds
    MIN_QUALIFYING - Identities required before a candidate is scored

Environment Variables:
    TOPCUT_DB_PATH - Override default database path
    TOPCUT_PRIOR_WIN_RATE - Override the shrinkage prior
"""

from __future__ import annotations

import os
from pathlib import Path

# Project root (src/topcut/config.py -> topcut -> src -> project_root)
PROJECT_ROOT = Path(__file__).parent.parent.parent
STORAGE_DIR = PROJECT_ROOT / "storage"
REPORTS_DIR = STORAGE_DIR / "reports"

DEFAULT_DB_PATH = os.environ.get(
    "TOPCUT_DB_PATH",
    str(STORAGE_DIR / "tournaments.sqlite")
)

# Shrinkage prior. Commander pods seat four players, so a random
# entrant wins 1 game in 4.
PRIOR_WIN_RATE = float(os.environ.get("TOPCUT_PRIOR_WIN_RATE", "0.25"))

# Tournament filters
DEFAULT_MIN_SIZE = 16
LARGE_EVENT_SIZE = 100
POST_BAN_DATE = "2024-09-23"
ALL_TIME_START = "2020-01-01"

# Canonical commander-pair separator
COMMANDER_SEPARATOR = " / "

# Backtest protocol
TRAIN_FRACTION = 0.8
MIN_TRAIN_GAMES = 10
MIN_TEST_GAMES = 5
MIN_QUALIFYING = 50
MIN_BRACKET_SIZE = 20
GAME_THRESHOLDS = (10, 15, 20, 30, 40, 50)
PRIOR_GAME_SIZES = (5, 10, 20, 30, 50)
TARGET_GAME_SIZES = (20, 30, 40, 50)
BRACKET_TARGET_GAMES = 30
TOP_N_COMPARISON = 20

# (label, min_games, max_games) - inclusive bounds
EXPERIENCE_BRACKETS = (
    ("10-19 games", 10, 19),
    ("20-29 games", 20, 29),
    ("30-49 games", 30, 49),
    ("50-99 games", 50, 99),
    ("100+ games", 100, None),
)

# (label, min_players, max_players) - inclusive bounds
SIZE_BRACKETS = (
    ("16-29", 16, 29),
    ("30-49", 30, 49),
    ("50-99", 50, 99),
    ("100-199", 100, 199),
    ("200+", 200, None),
)

# Trend charts
ROLLING_WINDOW = 4
TREND_LOOKBACK_MONTHS = 6

# Data access
ENTRY_BATCH_SIZE = 100

# Scryfall API
SCRYFALL_BASE_URL = "https://api.scryfall.com"
REQUEST_DELAY = 0.1
MAX_RETRIES = 3
MAX_FETCH_WORKERS = 4

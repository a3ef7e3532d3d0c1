#!/usr/bin/env python3
"""Predictive Backtest - which win-rate estimate predicts the future?

Splits tournaments chronologically (earliest 80% train, latest 20% test)
and scores every candidate estimator by how well its training-period
estimate correlates with each identity's test-period win rate.

Question answered: Should leaderboards rank by raw win rate or a shrunk one?
Metrics: Pearson correlation, RMSE, per-experience-bracket correlation

Usage:
    python scripts/backtests/predictive_backtest.py
    python scripts/backtests/predictive_backtest.py --by commander --min-size 50
    python scripts/backtests/predictive_backtest.py --start 2024-09-23 --output storage/reports/backtest.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from topcut.config import (
    DEFAULT_MIN_SIZE,
    MIN_TEST_GAMES,
    MIN_TRAIN_GAMES,
    PRIOR_WIN_RATE,
    TRAIN_FRACTION,
)
from topcut.data import DataReader
from topcut.models import BacktestHarness
from topcut.stats import aggregate_by_commander, aggregate_by_player

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

AGGREGATORS = {
    "player": aggregate_by_player,
    "commander": aggregate_by_commander,
}


def main():
    """Run the predictive backtest against the local database."""
    parser = argparse.ArgumentParser(description="Backtest win-rate estimators on held-out tournaments")
    parser.add_argument("--db", default=None, help="Database path (default: from config)")
    parser.add_argument("--start", default=None, help="Earliest tournament date (YYYY-MM-DD)")
    parser.add_argument("--end", default=None, help="Latest tournament date (YYYY-MM-DD)")
    parser.add_argument("--min-size", type=int, default=DEFAULT_MIN_SIZE, help="Minimum tournament size")
    parser.add_argument("--by", choices=sorted(AGGREGATORS), default="player", help="Identity to evaluate")
    parser.add_argument("--train-fraction", type=float, default=TRAIN_FRACTION)
    parser.add_argument("--min-train-games", type=int, default=MIN_TRAIN_GAMES)
    parser.add_argument("--min-test-games", type=int, default=MIN_TEST_GAMES)
    parser.add_argument("--prior-rate", type=float, default=PRIOR_WIN_RATE, help="Shrinkage prior win rate")
    parser.add_argument("--output", default=None, help="Write results as JSON to this path")
    parser.add_argument("--quiet", action="store_true", help="Do not print the summary")
    args = parser.parse_args()

    try:
        reader = DataReader(args.db)
    except FileNotFoundError as e:
        logger.error(str(e))
        sys.exit(1)

    tournaments, entries = reader.fetch_period(start=args.start, end=args.end, min_size=args.min_size)
    logger.info(f"Loaded {len(tournaments)} tournaments, {len(entries)} entries")

    harness = BacktestHarness(
        train_fraction=args.train_fraction,
        min_train_games=args.min_train_games,
        min_test_games=args.min_test_games,
        prior_rate=args.prior_rate,
        aggregator=AGGREGATORS[args.by],
    )

    try:
        summary = harness.run(tournaments, entries, verbose=not args.quiet)
    except ValueError as e:
        logger.error(f"Backtest failed: {e}")
        sys.exit(1)

    if args.output:
        out_path = Path(args.output)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with open(out_path, "w") as f:
            json.dump({"by": args.by, **summary.to_dict()}, f, indent=2, default=float)
        logger.info(f"Saved results to {out_path}")


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""Player or commander leaderboard for a reporting period.

Usage:
    python scripts/analysis/leaderboard.py --by commander --period 3m --sort conv_vs_expected
    python scripts/analysis/leaderboard.py --by player --period post_ban --min-entries 10 --compare
    python scripts/analysis/leaderboard.py --period custom --start 2025-01-01 --end 2025-03-31
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import pandas as pd

sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from topcut.config import DEFAULT_MIN_SIZE
from topcut.data import DataReader
from topcut.stats import (
    aggregate_by_commander,
    aggregate_by_player,
    build_leaderboard,
    compare_periods,
    comparison_range,
    date_range,
    paginate,
)
from topcut.stats.leaderboard import SORT_KEYS
from topcut.stats.periods import PERIOD_LABELS

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

DISPLAY_COLUMNS = [
    "rank", "name", "entries", "win_rate", "conv_rate",
    "conv_vs_expected", "top4_vs_expected", "champ_vs_expected", "placement_pct",
]


def main():
    parser = argparse.ArgumentParser(description="Print a leaderboard for a reporting period")
    parser.add_argument("--db", default=None, help="Database path (default: from config)")
    parser.add_argument("--by", choices=sorted(AGGREGATORS), default="commander")
    parser.add_argument("--period", choices=sorted(PERIOD_LABELS), default="1y")
    parser.add_argument("--start", default=None, help="Custom period start (YYYY-MM-DD)")
    parser.add_argument("--end", default=None, help="Custom period end (YYYY-MM-DD)")
    parser.add_argument("--min-size", type=int, default=DEFAULT_MIN_SIZE, help="Minimum tournament size")
    parser.add_argument("--min-entries", type=int, default=1)
    parser.add_argument("--sort", choices=sorted(SORT_KEYS), default="entries")
    parser.add_argument("--asc", action="store_true", help="Sort ascending")
    parser.add_argument("--page", type=int, default=1)
    parser.add_argument("--per-page", type=int, default=25)
    parser.add_argument("--compare", action="store_true", help="Add deltas against the previous period")
    args = parser.parse_args()

    try:
        reader = DataReader(args.db)
    except FileNotFoundError as e:
        logger.error(str(e))
        sys.exit(1)

    aggregator = AGGREGATORS[args.by]
    window = date_range(args.period, custom_start=args.start, custom_end=args.end)
    _, entries = reader.fetch_period(start=window.start, end=window.end, min_size=args.min_size)
    stats = aggregator(entries)

    board = build_leaderboard(stats, sort=args.sort, ascending=args.asc, min_entries=args.min_entries)
    columns = list(DISPLAY_COLUMNS)

    previous_window = comparison_range(args.period) if args.compare else None
    if previous_window is not None:
        _, previous_entries = reader.fetch_period(
            start=previous_window.start, end=previous_window.end, min_size=args.min_size
        )
        deltas = compare_periods(stats, aggregator(previous_entries))
        board["delta_win_rate"] = board["key"].map(lambda k: deltas[k].delta_win_rate)
        board["is_new"] = board["key"].map(lambda k: deltas[k].is_new)
        columns += ["delta_win_rate", "is_new"]

    page, total_pages = paginate(board, page=args.page, per_page=args.per_page)

    print(f"\n{window.label}: {window.start} to {window.end} ({len(entries):,} entries)")
    print(f"{args.by.title()} leaderboard, sorted by {args.sort} | page {args.page}/{total_pages}\n")
    with pd.option_context("display.max_columns", None, "display.width", 200,
                           "display.float_format", "{:.3f}".format):
        print(page[columns].to_string(index=False))


if __name__ == "__main__":
    main()

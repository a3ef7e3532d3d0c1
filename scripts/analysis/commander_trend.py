#!/usr/bin/env python3
"""Rolling performance trend for one commander pair.

Usage:
    python scripts/analysis/commander_trend.py "Kraum, Ludevic's Opus / Tymna the Weaver"
    python scripts/analysis/commander_trend.py "Kinnan, Bonder Prodigy" --monthly --window 3
    python scripts/analysis/commander_trend.py "Tymna the Weaver / Kraum, Ludevic's Opus" --art
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

import pandas as pd

sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from topcut.config import DEFAULT_MIN_SIZE, PRIOR_WIN_RATE, ROLLING_WINDOW, TREND_LOOKBACK_MONTHS
from topcut.data import DataReader, ScryfallClient
from topcut.stats import (
    canonical_commander_pair,
    monthly_buckets,
    rolling_trend,
    rolling_window,
    split_commander_pair,
    trend_start,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

DISPLAY_COLUMNS = [
    "bucket_start", "entries", "avg_entries", "win_rate", "win_rate_vs_baseline",
    "conv_rate", "conv_rate_vs_baseline", "champ_rate",
]


def main():
    parser = argparse.ArgumentParser(description="Rolling trend for a commander pair")
    parser.add_argument("commander", help="Commander pair, names separated by ' / ' in any order")
    parser.add_argument("--db", default=None, help="Database path (default: from config)")
    parser.add_argument("--min-size", type=int, default=DEFAULT_MIN_SIZE, help="Minimum tournament size")
    parser.add_argument("--months", type=int, default=TREND_LOOKBACK_MONTHS, help="Lookback in months")
    parser.add_argument("--window", type=int, default=ROLLING_WINDOW, help="Rolling window in buckets")
    parser.add_argument("--monthly", action="store_true", help="Bucket by calendar month instead of week")
    parser.add_argument("--art", action="store_true", help="Also look up card art on Scryfall")
    args = parser.parse_args()

    pair = canonical_commander_pair(split_commander_pair(args.commander))
    if not pair:
        logger.error("No commander name given")
        sys.exit(1)

    try:
        reader = DataReader(args.db)
    except FileNotFoundError as e:
        logger.error(str(e))
        sys.exit(1)

    today = date.today()
    start = trend_start(today, args.months, monthly=args.monthly)
    _, entries = reader.fetch_period(start=start, min_size=args.min_size)
    entries = [e for e in entries if e.commander_pair == pair]
    logger.info(f"{len(entries)} entries for {pair}")

    if args.monthly:
        buckets = monthly_buckets(entries, today=today, lookback_months=args.months)
        trend = rolling_window(buckets, window_size=args.window, baseline_rate=PRIOR_WIN_RATE)
    else:
        trend = rolling_trend(entries, bucket_size_days=7, window_size=args.window,
                              today=today, lookback_months=args.months)

    print(f"\n{pair}: {args.window}-{'month' if args.monthly else 'week'} rolling trend\n")
    with pd.option_context("display.width", 200, "display.float_format", "{:.3f}".format):
        print(trend[DISPLAY_COLUMNS].to_string(index=False))

    if args.art:
        print()
        for images in ScryfallClient().fetch_card_images(split_commander_pair(pair)):
            print(f"{images.name}: {images.art or '(no art)'}")


if __name__ == "__main__":
    main()

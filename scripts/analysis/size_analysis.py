#!/usr/bin/env python3
"""Small vs large event performance.

Do players who win at small events keep winning at large ones?

Usage:
    python scripts/analysis/size_analysis.py
    python scripts/analysis/size_analysis.py --large-size 128 --output storage/reports/sizes.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from topcut.analysis import analyze_sizes
from topcut.config import DEFAULT_MIN_SIZE, LARGE_EVENT_SIZE
from topcut.data import DataReader

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Compare small-event and large-event performance")
    parser.add_argument("--db", default=None, help="Database path (default: from config)")
    parser.add_argument("--start", default=None, help="Earliest tournament date (YYYY-MM-DD)")
    parser.add_argument("--end", default=None, help="Latest tournament date (YYYY-MM-DD)")
    parser.add_argument("--min-size", type=int, default=DEFAULT_MIN_SIZE, help="Minimum tournament size")
    parser.add_argument("--large-size", type=int, default=LARGE_EVENT_SIZE,
                        help="Events with at least this many players count as large")
    parser.add_argument("--output", default=None, help="Write results as JSON to this path")
    args = parser.parse_args()

    try:
        reader = DataReader(args.db)
    except FileNotFoundError as e:
        logger.error(str(e))
        sys.exit(1)

    _, entries = reader.fetch_period(start=args.start, end=args.end, min_size=args.min_size)
    result = analyze_sizes(entries, large_event_size=args.large_size)
    result.print_summary()

    if args.output:
        out_path = Path(args.output)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with open(out_path, "w") as f:
            json.dump(result.to_dict(), f, indent=2, default=float)
        logger.info(f"Saved results to {out_path}")


if __name__ == "__main__":
    main()

"""Leaderboard tables built from aggregated statistics.

Turns a {key: AggregateStats} map into a pandas DataFrame, then filters,
sorts and pages it. Also computes period-over-period deltas.

Key Functions:
    to_frame() - AggregateStats map -> DataFrame of counters and rates
    build_leaderboard() - Filter by min entries and sort
    paginate() - Slice one page out of a sorted leaderboard
    compare_periods() - Per-identity deltas between two periods

Usage:
    from topcut.stats import aggregate_by_player
    from topcut.stats.leaderboard import build_leaderboard, paginate

    board = build_leaderboard(aggregate_by_player(entries), sort="conv_vs_expected", min_entries=5)
    page, total_pages = paginate(board, page=1, per_page=50)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

import pandas as pd

from topcut.stats.aggregator import AggregateStats

# sort key -> DataFrame column
SORT_KEYS = {
    "entries": "entries",
    "wins": "total_wins",
    "win_rate": "win_rate",
    "five_swiss": "five_swiss",
    "conversions": "conversions",
    "conv_rate": "conv_rate",
    "top4s": "top4s",
    "top4_rate": "top4_rate",
    "championships": "championships",
    "champ_rate": "champ_rate",
    "conv_vs_expected": "conv_vs_expected",
    "top4_vs_expected": "top4_vs_expected",
    "champ_vs_expected": "champ_vs_expected",
    "placement_pct": "placement_pct",
    "name": "name",
}

DEFAULT_PER_PAGE = 50


def to_frame(stats: Mapping[str, AggregateStats]) -> pd.DataFrame:
    """One row per identity with counters and derived rates."""
    rows = [s.to_dict() for s in stats.values()]
    if not rows:
        return pd.DataFrame(columns=list(AggregateStats(key="", name="").to_dict()))
    return pd.DataFrame(rows)


def sort_leaderboard(df: pd.DataFrame, sort: str = "entries", ascending: bool = False) -> pd.DataFrame:
    """Sort by a named key; missing values always go last.

    Raises:
        ValueError: If ``sort`` is not one of SORT_KEYS.
    """
    if sort not in SORT_KEYS:
        raise ValueError(f"Unknown sort key '{sort}'. Choose from: {sorted(SORT_KEYS)}")
    if df.empty:
        return df

    return df.sort_values(
        by=[SORT_KEYS[sort], "key"],
        ascending=[ascending, True],
        na_position="last",
        key=lambda s: s.str.lower() if s.name == "name" else s,
    ).reset_index(drop=True)


def build_leaderboard(
    stats: Mapping[str, AggregateStats],
    sort: str = "entries",
    ascending: bool = False,
    min_entries: int = 1,
) -> pd.DataFrame:
    """Filtered, sorted leaderboard with a 1-based ``rank`` column."""
    df = to_frame(stats)
    if not df.empty:
        df = df[df["entries"] >= min_entries].reset_index(drop=True)
    df = sort_leaderboard(df, sort=sort, ascending=ascending)
    df.insert(0, "rank", range(1, len(df) + 1))
    return df


def paginate(df: pd.DataFrame, page: int = 1, per_page: int = DEFAULT_PER_PAGE) -> Tuple[pd.DataFrame, int]:
    """Rows for a 1-based page, and the total number of pages.

    Pages past the end come back empty; page numbers below 1 are clamped.
    """
    if per_page < 1:
        raise ValueError(f"per_page must be >= 1, got {per_page}")
    total_pages = max(1, math.ceil(len(df) / per_page))
    page = max(1, page)
    offset = (page - 1) * per_page
    return df.iloc[offset:offset + per_page], total_pages


@dataclass(frozen=True)
class PeriodDelta:
    """Change in one identity's numbers relative to a previous period.

    Rate deltas are in percentage points and are None when the identity
    did not appear in the previous period.
    """

    key: str
    delta_entries: int
    delta_win_rate: Optional[float]
    delta_conv_rate: Optional[float]
    delta_top4_rate: Optional[float]
    delta_champ_rate: Optional[float]
    is_new: bool


def compare_periods(
    current: Mapping[str, AggregateStats],
    previous: Mapping[str, AggregateStats],
) -> Dict[str, PeriodDelta]:
    """Deltas for every identity in ``current``."""
    deltas = {}
    for key, now in current.items():
        before = previous.get(key)
        if before is None:
            deltas[key] = PeriodDelta(
                key=key,
                delta_entries=now.entries,
                delta_win_rate=None,
                delta_conv_rate=None,
                delta_top4_rate=None,
                delta_champ_rate=None,
                is_new=True,
            )
            continue
        deltas[key] = PeriodDelta(
            key=key,
            delta_entries=now.entries - before.entries,
            delta_win_rate=(now.win_rate - before.win_rate) * 100,
            delta_conv_rate=(now.conversion_rate - before.conversion_rate) * 100,
            delta_top4_rate=(now.top4_rate - before.top4_rate) * 100,
            delta_champ_rate=(now.champ_rate - before.champ_rate) * 100,
            is_new=False,
        )
    return deltas

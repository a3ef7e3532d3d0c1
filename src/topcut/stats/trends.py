"""Time-bucketed performance and trailing rolling windows for trend charts.

Entries are grouped by their tournament's start date into contiguous
buckets (weeks starting Monday, calendar months, or any fixed number of
days). Every bucket in the lookback window is present, empty ones with
zero counts, so the time axis has no gaps.

Rolling windows re-sum the raw counters of the last K buckets and then
recompute rates. Rates are never averaged directly, which would give a
week with two entries the same weight as a week with two hundred.

Key Functions:
    week_start() - Monday of the week containing a date
    trend_start() - First bucket start for a lookback window
    weekly_buckets() - Zero-filled weekly counters over the lookback window
    monthly_buckets() - Zero-filled calendar-month counters
    rolling_window() - Trailing window over bucket counters
    rolling_trend() - Bucket + roll in one call

Usage:
    from topcut.stats.trends import rolling_trend

    trend = rolling_trend(commander_entries, bucket_size_days=7, window_size=4)
    print(trend[["bucket_start", "win_rate", "win_rate_vs_baseline"]])
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Union

import numpy as np
import pandas as pd

from topcut.config import PRIOR_WIN_RATE, ROLLING_WINDOW, TREND_LOOKBACK_MONTHS
from topcut.data.schemas import EntrySchema
from topcut.stats.aggregator import summarize

DateLike = Union[str, date]

COUNTER_COLUMNS = [
    "entries", "wins", "losses", "draws",
    "conversions", "top4s", "championships",
]

# rate column -> (numerator, denominator)
RATE_COLUMNS = {
    "win_rate": ("wins", "games"),
    "conv_rate": ("conversions", "entries"),
    "top4_rate": ("top4s", "entries"),
    "champ_rate": ("championships", "entries"),
}


def week_start(d: date) -> date:
    """Monday of the week containing ``d``."""
    return d - timedelta(days=d.weekday())


def _to_date(d: DateLike) -> date:
    return pd.Timestamp(d).date()


def _lookback_start(today: date, lookback_months: int) -> date:
    return (pd.Timestamp(today) - pd.DateOffset(months=lookback_months)).date()


def trend_start(
    today: Optional[DateLike] = None,
    lookback_months: int = TREND_LOOKBACK_MONTHS,
    monthly: bool = False,
) -> date:
    """Start of the first bucket in a trend ending ``today``.

    Weekly trends start on the Monday on or before the lookback start,
    monthly ones on the first of that month. Load entries from this date
    so the first bucket is complete.
    """
    today = _to_date(today) if today is not None else date.today()
    start = _lookback_start(today, lookback_months)
    return start.replace(day=1) if monthly else week_start(start)


def _add_rates(df: pd.DataFrame) -> pd.DataFrame:
    df["games"] = df["wins"] + df["losses"] + df["draws"]
    for rate, (num, den) in RATE_COLUMNS.items():
        numerator = df[num].to_numpy(dtype=float)
        denominator = df[den].to_numpy(dtype=float)
        df[rate] = np.divide(
            numerator, denominator,
            out=np.zeros(len(df)), where=denominator > 0,
        )
    return df


def _bucket_frame(starts: List[date], groups: Dict[date, List[EntrySchema]]) -> pd.DataFrame:
    rows = []
    for start in starts:
        stats = summarize(groups.get(start, []))
        rows.append({
            "bucket_start": start,
            "entries": stats.entries,
            "wins": stats.total_wins,
            "losses": stats.total_losses,
            "draws": stats.total_draws,
            "conversions": stats.conversions,
            "top4s": stats.top4s,
            "championships": stats.championships,
        })
    df = pd.DataFrame(rows, columns=["bucket_start"] + COUNTER_COLUMNS)
    return _add_rates(df)


def bucket_by_days(
    entries: Iterable[EntrySchema],
    start: DateLike,
    end: DateLike,
    bucket_size_days: int = 7,
) -> pd.DataFrame:
    """Counters per fixed-width bucket from ``start`` through ``end``.

    Bucket i covers [start + i*size, start + (i+1)*size). Entries dated
    outside the window, or without a date, are ignored.
    """
    if bucket_size_days < 1:
        raise ValueError(f"bucket_size_days must be >= 1, got {bucket_size_days}")

    start, end = _to_date(start), _to_date(end)
    step = timedelta(days=bucket_size_days)

    starts = []
    current = start
    while current <= end:
        starts.append(current)
        current += step
    if not starts:
        return _bucket_frame([], {})

    window_end = starts[-1] + step
    groups: Dict[date, List[EntrySchema]] = defaultdict(list)
    for entry in entries:
        d = entry.start_date
        if d is None or d < start or d >= window_end:
            continue
        index = (d - start).days // bucket_size_days
        groups[starts[index]].append(entry)

    return _bucket_frame(starts, groups)


def weekly_buckets(
    entries: Iterable[EntrySchema],
    today: Optional[DateLike] = None,
    lookback_months: int = TREND_LOOKBACK_MONTHS,
) -> pd.DataFrame:
    """One row per Monday-starting week from the lookback start to this week."""
    today = _to_date(today) if today is not None else date.today()
    first = trend_start(today, lookback_months)
    return bucket_by_days(entries, first, week_start(today), bucket_size_days=7)


def monthly_buckets(
    entries: Iterable[EntrySchema],
    today: Optional[DateLike] = None,
    lookback_months: int = TREND_LOOKBACK_MONTHS,
) -> pd.DataFrame:
    """One row per calendar month from the lookback start to this month."""
    today = _to_date(today) if today is not None else date.today()
    first = trend_start(today, lookback_months, monthly=True)
    starts = [p.start_time.date() for p in pd.period_range(pd.Timestamp(first), pd.Timestamp(today), freq="M")]

    groups: Dict[date, List[EntrySchema]] = defaultdict(list)
    for entry in entries:
        d = entry.start_date
        if d is None or d < first or d > today:
            continue
        groups[d.replace(day=1)].append(entry)

    return _bucket_frame(starts, groups)


def rolling_window(
    buckets: pd.DataFrame,
    window_size: int = ROLLING_WINDOW,
    baseline_rate: float = PRIOR_WIN_RATE,
) -> pd.DataFrame:
    """Trailing window over bucket counters.

    Counters are summed over the last ``window_size`` buckets (fewer at
    the start of the series) and rates recomputed from the sums. Adds
    ``avg_entries`` and a ``<rate>_vs_baseline`` column for every rate,
    in percentage points.
    """
    if window_size < 1:
        raise ValueError(f"window_size must be >= 1, got {window_size}")

    rolled = buckets[COUNTER_COLUMNS].rolling(window_size, min_periods=1).sum()
    rolled = rolled.astype(int)
    rolled.insert(0, "bucket_start", buckets["bucket_start"].to_numpy())
    rolled["avg_entries"] = buckets["entries"].rolling(window_size, min_periods=1).mean()
    rolled = _add_rates(rolled)

    for rate in RATE_COLUMNS:
        rolled[f"{rate}_vs_baseline"] = (rolled[rate] - baseline_rate) * 100

    return rolled.reset_index(drop=True)


def rolling_trend(
    entries: Iterable[EntrySchema],
    bucket_size_days: int = 7,
    window_size: int = ROLLING_WINDOW,
    today: Optional[DateLike] = None,
    lookback_months: int = TREND_LOOKBACK_MONTHS,
    baseline_rate: float = PRIOR_WIN_RATE,
) -> pd.DataFrame:
    """Bucket entries and apply a trailing rolling window.

    Buckets are aligned to the Monday on or before the lookback start,
    so a 7-day bucket is exactly a calendar week.
    """
    today = _to_date(today) if today is not None else date.today()
    first = trend_start(today, lookback_months)
    buckets = bucket_by_days(entries, first, today, bucket_size_days)
    return rolling_window(buckets, window_size=window_size, baseline_rate=baseline_rate)

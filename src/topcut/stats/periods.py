"""Named reporting periods and their comparison windows.

Periods:
    all           - Since ALL_TIME_START
    post_ban      - Since POST_BAN_DATE
    last_week     - Last complete Monday-Sunday week
    current_month - First of this month to today
    prev_month    - The whole previous calendar month
    prev_month_2  - The whole calendar month before that
    1m            - Last 30 days
    3m / 6m / 1y  - Last 90 / 180 / 365 days (1y is the default)
    custom        - Explicit start and end dates

Both bounds of a DateRange are inclusive.

Usage:
    from topcut.stats.periods import date_range, comparison_range

    current = date_range("3m")
    previous = comparison_range("3m")
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional, Union

import pandas as pd

from topcut.config import ALL_TIME_START, POST_BAN_DATE

PERIOD_LABELS = {
    "all": "All Time",
    "post_ban": "Post-Ban Era",
    "last_week": "Last Week",
    "current_month": "This Month",
    "prev_month": "Last Month",
    "prev_month_2": "Two Months Ago",
    "1m": "Last 30 Days",
    "3m": "Last 3 Months",
    "6m": "Last 6 Months",
    "1y": "Last Year",
    "custom": "Custom Range",
}

DEFAULT_PERIOD = "1y"

# rolling period -> days back from today
ROLLING_DAYS = {
    "1m": 30,
    "3m": 90,
    "6m": 180,
    "1y": 365,
}

DateLike = Union[str, date]


@dataclass(frozen=True)
class DateRange:
    """Inclusive [start, end] date window."""

    start: date
    end: date
    label: str = ""

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1

    def contains(self, d: Optional[date]) -> bool:
        return d is not None and self.start <= d <= self.end


def _to_date(d: DateLike) -> date:
    return pd.Timestamp(d).date()


def _month_start(d: date, months_back: int = 0) -> date:
    return (pd.Timestamp(d).replace(day=1) - pd.DateOffset(months=months_back)).date()


def date_range(
    period: str = DEFAULT_PERIOD,
    today: Optional[DateLike] = None,
    custom_start: Optional[DateLike] = None,
    custom_end: Optional[DateLike] = None,
) -> DateRange:
    """Resolve a named period into a DateRange ending today.

    Unknown period names fall back to the last year.
    """
    today = _to_date(today) if today is not None else date.today()
    label = PERIOD_LABELS.get(period, PERIOD_LABELS[DEFAULT_PERIOD])

    if period == "custom" and custom_start and custom_end:
        return DateRange(_to_date(custom_start), _to_date(custom_end), label)
    if period == "all":
        return DateRange(_to_date(ALL_TIME_START), today, label)
    if period == "post_ban":
        return DateRange(_to_date(POST_BAN_DATE), today, label)
    if period == "last_week":
        this_monday = today - timedelta(days=today.weekday())
        return DateRange(this_monday - timedelta(days=7), this_monday - timedelta(days=1), label)
    if period == "current_month":
        return DateRange(_month_start(today), today, label)
    if period == "prev_month":
        return DateRange(_month_start(today, 1), _month_start(today) - timedelta(days=1), label)
    if period == "prev_month_2":
        return DateRange(_month_start(today, 2), _month_start(today, 1) - timedelta(days=1), label)
    days = ROLLING_DAYS.get(period, ROLLING_DAYS[DEFAULT_PERIOD])
    return DateRange(today - timedelta(days=days), today, label)


def comparison_range(period: str, today: Optional[DateLike] = None) -> Optional[DateRange]:
    """The window a period's deltas are measured against.

    Month views compare to the calendar month before; rolling windows
    compare to an equally long window ending the day before they start.
    ``all``, ``post_ban`` and ``custom`` have no comparison.
    """
    if period in ("all", "post_ban", "custom"):
        return None

    current = date_range(period, today)

    if period in ("current_month", "prev_month", "prev_month_2"):
        start = _month_start(current.start, 1)
        return DateRange(start, current.start - timedelta(days=1), "Previous Month")

    end = current.start - timedelta(days=1)
    return DateRange(end - timedelta(days=current.days - 1), end, "Previous Period")

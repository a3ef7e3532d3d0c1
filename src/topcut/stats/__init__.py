"""Statistics module - estimators, expected outcomes, aggregation, trends.

Public API:
    pearson, rmse - Agreement between predictions and outcomes
    wilson_lower_bound, bayesian_shrink, games_weighted_shrink - Win-rate estimators
    expected_outcome - Baseline probabilities for a random entrant
    aggregate, aggregate_by_player, aggregate_by_commander - Entry folds
    AggregateStats - Immutable per-identity counters with derived rates
    rolling_trend, weekly_buckets, monthly_buckets, rolling_window - Trend data
    date_range, comparison_range - Named reporting periods
"""

from topcut.data.schemas import canonical_commander_pair, split_commander_pair
from topcut.stats.estimators import (
    pearson,
    spearman,
    rmse,
    safe_rate,
    wilson_lower_bound,
    bayesian_shrink,
    games_weighted_shrink,
    z_for_confidence,
)
from topcut.stats.expected import ExpectedOutcome, expected_outcome, vs_expected
from topcut.stats.aggregator import (
    AggregateStats,
    aggregate,
    aggregate_by_player,
    aggregate_by_commander,
    summarize,
)
from topcut.stats.leaderboard import (
    PeriodDelta,
    build_leaderboard,
    compare_periods,
    paginate,
    to_frame,
)
from topcut.stats.periods import DateRange, date_range, comparison_range
from topcut.stats.trends import (
    monthly_buckets,
    rolling_trend,
    rolling_window,
    trend_start,
    week_start,
    weekly_buckets,
)

__all__ = [
    "canonical_commander_pair",
    "split_commander_pair",
    "pearson",
    "spearman",
    "rmse",
    "safe_rate",
    "wilson_lower_bound",
    "bayesian_shrink",
    "games_weighted_shrink",
    "z_for_confidence",
    "ExpectedOutcome",
    "expected_outcome",
    "vs_expected",
    "AggregateStats",
    "aggregate",
    "aggregate_by_player",
    "aggregate_by_commander",
    "summarize",
    "PeriodDelta",
    "build_leaderboard",
    "compare_periods",
    "paginate",
    "to_frame",
    "DateRange",
    "date_range",
    "comparison_range",
    "monthly_buckets",
    "rolling_trend",
    "rolling_window",
    "trend_start",
    "week_start",
    "weekly_buckets",
]

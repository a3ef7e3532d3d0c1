"""Candidate win-rate estimators scored by the backtest harness.

Each candidate turns an identity's training-period AggregateStats into a
predicted future win rate. Threshold candidates also restrict which
identities they are scored on, and are omitted when too few qualify.

Default candidates:
    Raw Win Rate              - wins / games
    Threshold N+ games        - Raw rate, only identities with N+ training games
    Wilson Lower Bound        - 95% Wilson score lower edge
    Bayesian (prior=P games)  - P pseudo-games at the prior rate
    Weighted Bayesian (target=T) - Blend to the prior by games / T
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

from topcut.config import (
    GAME_THRESHOLDS,
    MIN_QUALIFYING,
    PRIOR_GAME_SIZES,
    PRIOR_WIN_RATE,
    TARGET_GAME_SIZES,
)
from topcut.stats.aggregator import AggregateStats
from topcut.stats.estimators import (
    bayesian_shrink,
    games_weighted_shrink,
    wilson_lower_bound,
)


@dataclass(frozen=True)
class Candidate:
    """A named estimator plus the population it is scored on.

    Attributes:
        name: Method name shown in results.
        description: One-line explanation.
        estimate: Training stats -> predicted win rate.
        min_train_games: Only score identities with at least this many
            training games (None = every common identity).
        min_identities: Omit the candidate when fewer identities qualify.
    """
    name: str
    description: str
    estimate: Callable[[AggregateStats], float]
    min_train_games: Optional[int] = None
    min_identities: int = 0


def raw_rate(stats: AggregateStats) -> float:
    return stats.win_rate


def wilson(stats: AggregateStats) -> float:
    return wilson_lower_bound(stats.total_wins, stats.games)


def bayesian(prior_games: float, prior_rate: float = PRIOR_WIN_RATE) -> Callable[[AggregateStats], float]:
    prior_wins = prior_games * prior_rate

    def estimate(stats: AggregateStats) -> float:
        return bayesian_shrink(stats.total_wins, stats.games, prior_wins, prior_games)

    return estimate


def games_weighted(target_games: float, prior_rate: float = PRIOR_WIN_RATE) -> Callable[[AggregateStats], float]:
    def estimate(stats: AggregateStats) -> float:
        return games_weighted_shrink(stats.total_wins, stats.games, target_games, prior_rate)

    return estimate


def default_candidates(
    prior_rate: float = PRIOR_WIN_RATE,
    thresholds=GAME_THRESHOLDS,
    prior_sizes=PRIOR_GAME_SIZES,
    target_sizes=TARGET_GAME_SIZES,
    min_qualifying: int = MIN_QUALIFYING,
) -> List[Candidate]:
    """The standard estimator grid, in reporting order."""
    pct = f"{prior_rate:.0%}"
    candidates = [
        Candidate(
            name="Raw Win Rate",
            description="Simple wins/games from training period",
            estimate=raw_rate,
        )
    ]

    for threshold in thresholds:
        candidates.append(Candidate(
            name=f"Threshold {threshold}+ games",
            description=f"Only identities with {threshold}+ games",
            estimate=raw_rate,
            min_train_games=threshold,
            min_identities=min_qualifying,
        ))

    candidates.append(Candidate(
        name="Wilson Lower Bound",
        description="95% CI lower bound - penalizes low sample sizes",
        estimate=wilson,
    ))

    for prior_games in prior_sizes:
        candidates.append(Candidate(
            name=f"Bayesian (prior={prior_games} games)",
            description=f"Add {prior_games} pseudo-games at {pct} WR",
            estimate=bayesian(prior_games, prior_rate),
        ))

    for target in target_sizes:
        candidates.append(Candidate(
            name=f"Weighted Bayesian (target={target})",
            description=f"Blend to {pct} based on games/{target}",
            estimate=games_weighted(target, prior_rate),
        ))

    return candidates

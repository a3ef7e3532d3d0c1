"""Predictive backtest of win-rate estimators.

Answers the question: given an identity's results in the past, which
estimate of its win rate best predicts its results in the future?

Protocol:
    1. Split tournaments chronologically (earliest 80% train, rest test)
    2. Aggregate entries on each side into per-identity stats
    3. Keep identities present on both sides with enough games on each
    4. Score every candidate estimator: Pearson correlation and RMSE of
       the training-period estimate against the test-period raw win rate
    5. Rank candidates by correlation, best first
    6. Break the common identities down by training experience and
       compare raw vs games-weighted correlation per bracket
    7. Compare the top-N identities ranked by raw vs games-weighted rate

Candidates that qualify too few identities are reported as omitted,
not scored as zero.

Key Classes:
    BacktestHarness - Runs the protocol
    BacktestSummary - Ranked results, omissions, brackets, ranking check
    PredictionResult - One candidate's score

Usage:
    from topcut.models import BacktestHarness

    summary = BacktestHarness().run(tournaments, entries)
    print(summary.summary())
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

import numpy as np

from topcut.config import (
    BRACKET_TARGET_GAMES,
    EXPERIENCE_BRACKETS,
    MIN_BRACKET_SIZE,
    MIN_TEST_GAMES,
    MIN_TRAIN_GAMES,
    PRIOR_WIN_RATE,
    TOP_N_COMPARISON,
    TRAIN_FRACTION,
)
from topcut.data.schemas import EntrySchema, TournamentSchema
from topcut.models.candidates import Candidate, default_candidates
from topcut.models.train_test import partition_entries, split_tournaments
from topcut.stats.aggregator import AggregateStats, aggregate_by_player
from topcut.stats.estimators import games_weighted_shrink, pearson, rmse, spearman

logger = logging.getLogger(__name__)

Aggregator = Callable[[Sequence[EntrySchema]], Dict[str, AggregateStats]]


@dataclass(frozen=True)
class PredictionResult:
    """Score of one candidate estimator."""

    method: str
    correlation: float
    rmse: float
    description: str
    n_samples: int = 0
    spearman: float = 0.0


@dataclass(frozen=True)
class OmittedCandidate:
    """A candidate that was not scored because too few identities qualified."""

    method: str
    n_samples: int
    required: int


@dataclass(frozen=True)
class BracketResult:
    """Raw vs games-weighted correlation for one training-experience bracket."""

    label: str
    min_games: int
    max_games: Optional[int]
    n_samples: int
    sufficient: bool
    raw_correlation: Optional[float] = None
    shrunk_correlation: Optional[float] = None

    @property
    def improvement(self) -> Optional[float]:
        """Correlation gain of the shrunk estimate, in points."""
        if not self.sufficient:
            return None
        return (self.shrunk_correlation - self.raw_correlation) * 100


@dataclass(frozen=True)
class RankedIdentity:
    key: str
    games: int
    raw_rate: float
    shrunk_rate: float
    actual_rate: float


@dataclass
class RankingComparison:
    """Top-N by raw rate vs top-N by games-weighted rate.

    MAE is the mean absolute gap between each list's own estimate and
    the rate the identity actually achieved in the test period.
    """
    top_raw: List[RankedIdentity] = field(default_factory=list)
    top_shrunk: List[RankedIdentity] = field(default_factory=list)

    @property
    def raw_mae(self) -> float:
        if not self.top_raw:
            return 0.0
        return float(np.mean([abs(r.raw_rate - r.actual_rate) for r in self.top_raw]))

    @property
    def shrunk_mae(self) -> float:
        if not self.top_shrunk:
            return 0.0
        return float(np.mean([abs(r.shrunk_rate - r.actual_rate) for r in self.top_shrunk]))


@dataclass
class BacktestSummary:
    """Everything one harness run produced."""

    n_train_tournaments: int
    n_test_tournaments: int
    n_train_entries: int
    n_test_entries: int
    n_identities: int
    min_train_games: int
    min_test_games: int
    results: List[PredictionResult] = field(default_factory=list)
    omitted: List[OmittedCandidate] = field(default_factory=list)
    brackets: List[BracketResult] = field(default_factory=list)
    ranking: RankingComparison = field(default_factory=RankingComparison)

    @property
    def best(self) -> Optional[PredictionResult]:
        return self.results[0] if self.results else None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation."""
        return {
            "n_train_tournaments": self.n_train_tournaments,
            "n_test_tournaments": self.n_test_tournaments,
            "n_train_entries": self.n_train_entries,
            "n_test_entries": self.n_test_entries,
            "n_identities": self.n_identities,
            "min_train_games": self.min_train_games,
            "min_test_games": self.min_test_games,
            "results": [asdict(r) for r in self.results],
            "omitted": [asdict(o) for o in self.omitted],
            "brackets": [
                {**asdict(b), "improvement": b.improvement} for b in self.brackets
            ],
            "ranking": {
                "top_raw": [asdict(r) for r in self.ranking.top_raw],
                "top_shrunk": [asdict(r) for r in self.ranking.top_shrunk],
                "raw_mae": self.ranking.raw_mae,
                "shrunk_mae": self.ranking.shrunk_mae,
            },
        }

    def summary(self) -> str:
        """Human-readable summary."""
        lines = [
            f"\n{'=' * 90}",
            "PREDICTIVE POWER BACKTEST",
            f"{'=' * 90}",
            f"Tournaments: {self.n_train_tournaments} train / {self.n_test_tournaments} test",
            f"Entries:     {self.n_train_entries:,} train / {self.n_test_entries:,} test",
            f"Identities with {self.min_train_games}+ train games AND "
            f"{self.min_test_games}+ test games: {self.n_identities}",
            "",
            "RESULTS (sorted by correlation):",
            "Method".ljust(35) + "Corr".rjust(8) + "RMSE".rjust(8) + "  Description",
            "-" * 90,
        ]
        for r in self.results:
            lines.append(
                r.method.ljust(35) + f"{r.correlation:8.3f}" + f"{r.rmse:8.4f}"
                + f"  {r.description} (n={r.n_samples})"
            )
        for o in self.omitted:
            lines.append(f"{o.method.ljust(35)}  omitted: n={o.n_samples} < {o.required}")

        lines += ["", "BY TRAINING EXPERIENCE:"]
        for b in self.brackets:
            if not b.sufficient:
                lines.append(f"  {b.label.ljust(13)}insufficient data (n={b.n_samples})")
                continue
            lines.append(
                f"  {b.label.ljust(13)}n={str(b.n_samples).ljust(5)}"
                f"Raw corr: {b.raw_correlation:6.3f}  "
                f"Weighted corr: {b.shrunk_correlation:6.3f}  "
                f"Improvement: {b.improvement:+.1f}"
            )

        n_top = len(self.ranking.top_raw)
        lines += [
            "",
            f"TOP {n_top} PREDICTION ERROR (MAE):",
            f"  Raw WR rankings:      {self.ranking.raw_mae * 100:.2f} pp",
            f"  Weighted WR rankings: {self.ranking.shrunk_mae * 100:.2f} pp",
            f"{'=' * 90}",
        ]
        return "\n".join(lines)


class BacktestHarness:
    """Chronological train/test backtest over a set of candidate estimators.

    Example:
        harness = BacktestHarness(min_train_games=10, min_test_games=5)
        summary = harness.run(tournaments, entries, verbose=False)
        best = summary.best
    """

    def __init__(
        self,
        train_fraction: float = TRAIN_FRACTION,
        min_train_games: int = MIN_TRAIN_GAMES,
        min_test_games: int = MIN_TEST_GAMES,
        prior_rate: float = PRIOR_WIN_RATE,
        bracket_target_games: float = BRACKET_TARGET_GAMES,
        min_bracket_size: int = MIN_BRACKET_SIZE,
        top_n: int = TOP_N_COMPARISON,
        aggregator: Aggregator = aggregate_by_player,
    ):
        """
        Args:
            train_fraction: Share of tournaments (by date) used for training
            min_train_games: Games an identity needs in the training period
            min_test_games: Games an identity needs in the test period
            prior_rate: Prior win rate for the shrinkage candidates
            bracket_target_games: Target for the games-weighted estimate in
                bracket and ranking comparisons
            min_bracket_size: Identities a bracket needs to be scored
            top_n: Length of the ranking comparison lists
            aggregator: Groups entries into identities (players by default)
        """
        self.train_fraction = train_fraction
        self.min_train_games = min_train_games
        self.min_test_games = min_test_games
        self.prior_rate = prior_rate
        self.bracket_target_games = bracket_target_games
        self.min_bracket_size = min_bracket_size
        self.top_n = top_n
        self.aggregator = aggregator

    def common_identities(
        self,
        train_stats: Mapping[str, AggregateStats],
        test_stats: Mapping[str, AggregateStats],
    ) -> List[str]:
        """Identities on both sides with enough games on each, sorted."""
        return sorted(
            key for key, s in train_stats.items()
            if key in test_stats
            and s.games >= self.min_train_games
            and test_stats[key].games >= self.min_test_games
        )

    def score_candidate(
        self,
        candidate: Candidate,
        common: Sequence[str],
        train_stats: Mapping[str, AggregateStats],
        test_stats: Mapping[str, AggregateStats],
    ):
        """PredictionResult, or OmittedCandidate if too few identities qualify."""
        keys = common
        if candidate.min_train_games is not None:
            keys = [k for k in common if train_stats[k].games >= candidate.min_train_games]

        if len(keys) < candidate.min_identities:
            return OmittedCandidate(candidate.name, len(keys), candidate.min_identities)

        predicted = [candidate.estimate(train_stats[k]) for k in keys]
        actual = [test_stats[k].win_rate for k in keys]
        return PredictionResult(
            method=candidate.name,
            correlation=pearson(predicted, actual),
            rmse=rmse(predicted, actual),
            description=candidate.description,
            n_samples=len(keys),
            spearman=spearman(predicted, actual),
        )

    def _shrunk(self, stats: AggregateStats) -> float:
        return games_weighted_shrink(
            stats.total_wins, stats.games, self.bracket_target_games, self.prior_rate
        )

    def bracket_breakdown(
        self,
        common: Sequence[str],
        train_stats: Mapping[str, AggregateStats],
        test_stats: Mapping[str, AggregateStats],
        brackets=EXPERIENCE_BRACKETS,
    ) -> List[BracketResult]:
        """Raw vs games-weighted correlation within each training-games bracket."""
        results = []
        for label, lo, hi in brackets:
            keys = [
                k for k in common
                if train_stats[k].games >= lo and (hi is None or train_stats[k].games <= hi)
            ]
            if len(keys) < self.min_bracket_size:
                results.append(BracketResult(label, lo, hi, len(keys), sufficient=False))
                continue

            actual = [test_stats[k].win_rate for k in keys]
            raw = [train_stats[k].win_rate for k in keys]
            shrunk = [self._shrunk(train_stats[k]) for k in keys]
            results.append(BracketResult(
                label, lo, hi, len(keys), sufficient=True,
                raw_correlation=pearson(raw, actual),
                shrunk_correlation=pearson(shrunk, actual),
            ))
        return results

    def ranking_comparison(
        self,
        common: Sequence[str],
        train_stats: Mapping[str, AggregateStats],
        test_stats: Mapping[str, AggregateStats],
    ) -> RankingComparison:
        """Top-N identities by raw rate and by games-weighted rate."""
        rows = [
            RankedIdentity(
                key=k,
                games=train_stats[k].games,
                raw_rate=train_stats[k].win_rate,
                shrunk_rate=self._shrunk(train_stats[k]),
                actual_rate=test_stats[k].win_rate,
            )
            for k in common
        ]
        top_raw = sorted(rows, key=lambda r: (-r.raw_rate, r.key))[:self.top_n]
        top_shrunk = sorted(rows, key=lambda r: (-r.shrunk_rate, r.key))[:self.top_n]
        return RankingComparison(top_raw=top_raw, top_shrunk=top_shrunk)

    def run(
        self,
        tournaments: Sequence[TournamentSchema],
        entries: Sequence[EntrySchema],
        candidates: Optional[Sequence[Candidate]] = None,
        verbose: bool = True,
    ) -> BacktestSummary:
        """
        Run the backtest.

        Args:
            tournaments: Tournament metadata (any order; sorted by date here)
            entries: Entries for those tournaments
            candidates: Estimators to score (default: default_candidates())
            verbose: Print the summary when done

        Returns:
            BacktestSummary with candidates ranked by correlation
        """
        if candidates is None:
            candidates = default_candidates(prior_rate=self.prior_rate)

        split = split_tournaments(tournaments, self.train_fraction)
        train_entries, test_entries = partition_entries(entries, split)
        logger.info(
            f"Split {len(split.train) + len(split.test)} tournaments: "
            f"{len(split.train)} train ({len(train_entries)} entries), "
            f"{len(split.test)} test ({len(test_entries)} entries)"
        )

        train_stats = self.aggregator(train_entries)
        test_stats = self.aggregator(test_entries)
        common = self.common_identities(train_stats, test_stats)
        logger.info(
            f"{len(common)} identities with {self.min_train_games}+ train and "
            f"{self.min_test_games}+ test games"
        )

        results: List[PredictionResult] = []
        omitted: List[OmittedCandidate] = []
        for candidate in candidates:
            outcome = self.score_candidate(candidate, common, train_stats, test_stats)
            if isinstance(outcome, OmittedCandidate):
                logger.info(f"Omitting {outcome.method}: only {outcome.n_samples} identities qualify")
                omitted.append(outcome)
            else:
                results.append(outcome)

        # Stable sort keeps reporting order among equal correlations
        results.sort(key=lambda r: r.correlation, reverse=True)

        summary = BacktestSummary(
            n_train_tournaments=len(split.train),
            n_test_tournaments=len(split.test),
            n_train_entries=len(train_entries),
            n_test_entries=len(test_entries),
            n_identities=len(common),
            min_train_games=self.min_train_games,
            min_test_games=self.min_test_games,
            results=results,
            omitted=omitted,
            brackets=self.bracket_breakdown(common, train_stats, test_stats),
            ranking=self.ranking_comparison(common, train_stats, test_stats),
        )

        if verbose:
            print(summary.summary())

        return summary


def backtest(
    tournaments: Sequence[TournamentSchema],
    entries: Sequence[EntrySchema],
    candidates: Optional[Sequence[Candidate]] = None,
    **kwargs,
) -> List[PredictionResult]:
    """Ranked PredictionResults for the candidates; omitted ones are left out.

    Keyword arguments are passed to BacktestHarness.
    """
    harness = BacktestHarness(**kwargs)
    return harness.run(tournaments, entries, candidates, verbose=False).results

"""Models module - chronological split, candidate estimators, backtesting.

This module contains:
- train_test: Chronological train/test split of tournaments
- candidates: Win-rate estimators scored by the backtest
- backtest: Predictive backtest harness and its result types
"""

from topcut.models.train_test import TournamentSplit, partition_entries, split_tournaments
from topcut.models.candidates import Candidate, default_candidates
from topcut.models.backtest import (
    BacktestHarness,
    BacktestSummary,
    BracketResult,
    OmittedCandidate,
    PredictionResult,
    RankingComparison,
    backtest,
)

__all__ = [
    # Split
    "TournamentSplit",
    "partition_entries",
    "split_tournaments",
    # Candidates
    "Candidate",
    "default_candidates",
    # Backtest
    "BacktestHarness",
    "BacktestSummary",
    "BracketResult",
    "OmittedCandidate",
    "PredictionResult",
    "RankingComparison",
    "backtest",
]

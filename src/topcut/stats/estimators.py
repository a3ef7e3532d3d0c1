"""Win-rate estimators and agreement metrics.

Pure functions over counts and numeric sequences. Nothing here keeps
state, and no function raises on a zero denominator: each one falls
back to a documented default instead of producing NaN.

Key Functions:
    pearson() - Pearson product-moment correlation
    spearman() - Rank correlation (ordering agreement only)
    rmse() - Root mean square error
    wilson_lower_bound() - Lower edge of the Wilson score interval
    bayesian_shrink() - Add pseudo-games at a prior rate
    games_weighted_shrink() - Blend raw rate and prior by games/target
    safe_rate() - numerator / denominator, 0 when the denominator is 0

Estimators Explained:
    Raw rate: wins / games. Noisy for small samples.
    Wilson: conservative; penalizes small samples by widening the interval.
    Bayesian: (wins + k*p) / (games + k); the prior never fully vanishes.
    Games-weighted: weight = min(1, games / target); the prior vanishes
        once games >= target.

Usage:
    from topcut.stats.estimators import pearson, games_weighted_shrink

    corr = pearson(predicted, actual)
    estimate = games_weighted_shrink(wins=12, games=30, target_games=30)
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from scipy.stats import norm, spearmanr
from sklearn.metrics import mean_squared_error

from topcut.config import PRIOR_WIN_RATE


def safe_rate(numerator: float, denominator: float) -> float:
    """numerator / denominator, or 0.0 when the denominator is 0."""
    return numerator / denominator if denominator else 0.0


def _paired(x: Sequence[float], y: Sequence[float]):
    x = np.asarray(x, dtype=float).flatten()
    y = np.asarray(y, dtype=float).flatten()
    if len(x) != len(y):
        raise ValueError(f"Sequences must have equal length, got {len(x)} and {len(y)}")
    return x, y


def pearson(x: Sequence[float], y: Sequence[float]) -> float:
    """Pearson correlation of two equal-length sequences.

    Returns 0.0 for empty input and when either sequence is constant
    (zero variance), rather than dividing by zero.

    Raises:
        ValueError: If the sequences differ in length.
    """
    x, y = _paired(x, y)
    if len(x) == 0:
        return 0.0

    # Exact check: centring a constant sequence can leave rounding residue
    if np.all(x == x[0]) or np.all(y == y[0]):
        return 0.0

    dx = x - x.mean()
    dy = y - y.mean()
    den = np.sqrt(np.sum(dx * dx) * np.sum(dy * dy))
    if den == 0 or not np.isfinite(den):
        return 0.0

    r = float(np.sum(dx * dy) / den)
    return max(-1.0, min(1.0, r))


def spearman(x: Sequence[float], y: Sequence[float]) -> float:
    """Spearman rank correlation, with the same degenerate cases as pearson()."""
    x, y = _paired(x, y)
    if len(x) < 2 or np.all(x == x[0]) or np.all(y == y[0]):
        return 0.0
    corr, _ = spearmanr(x, y)
    return float(corr) if np.isfinite(corr) else 0.0


def rmse(predicted: Sequence[float], actual: Sequence[float]) -> float:
    """Root mean square error; 0.0 for empty input.

    Raises:
        ValueError: If the sequences differ in length.
    """
    predicted, actual = _paired(predicted, actual)
    if len(predicted) == 0:
        return 0.0
    return float(np.sqrt(mean_squared_error(actual, predicted)))


def z_for_confidence(confidence: float = 0.95) -> float:
    """Two-sided normal critical value, e.g. 0.95 -> 1.96."""
    if not 0 < confidence < 1:
        raise ValueError(f"confidence must be in (0, 1), got {confidence}")
    return float(norm.ppf(1 - (1 - confidence) / 2))


def wilson_lower_bound(wins: int, games: int, z: float = 1.96) -> float:
    """Lower edge of the Wilson score interval for wins / games.

    Never exceeds the raw rate. 0.0 when no games were played or no
    game was won.
    """
    if games <= 0 or wins <= 0:
        return 0.0

    p = wins / games
    z2 = z * z
    denominator = 1 + z2 / games
    centre = p + z2 / (2 * games)
    adjustment = z * np.sqrt((p * (1 - p) + z2 / (4 * games)) / games)
    lower = (centre - adjustment) / denominator
    return float(min(p, max(0.0, lower)))


def bayesian_shrink(wins: int, games: int, prior_wins: float, prior_games: float) -> float:
    """(wins + prior_wins) / (games + prior_games).

    With zero games this is exactly the prior rate prior_wins / prior_games.
    """
    return safe_rate(wins + prior_wins, games + prior_games)


def games_weighted_shrink(
    wins: int,
    games: int,
    target_games: float,
    prior_rate: float = PRIOR_WIN_RATE,
) -> float:
    """Blend the raw rate with the prior, weighting the raw rate by games / target.

    The weight is capped at 1, so from ``target_games`` onward the
    estimate is the raw rate. With zero games it is the prior exactly.
    """
    if games <= 0:
        return prior_rate
    weight = min(1.0, games / target_games) if target_games > 0 else 1.0
    raw = wins / games
    return weight * raw + (1 - weight) * prior_rate

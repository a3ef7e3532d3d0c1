"""Tests for win-rate estimators and agreement metrics."""

import numpy as np
import pytest

from topcut.stats.estimators import (
    bayesian_shrink,
    games_weighted_shrink,
    pearson,
    rmse,
    safe_rate,
    spearman,
    wilson_lower_bound,
    z_for_confidence,
)


class TestPearson:

    def test_self_correlation_is_one(self):
        x = [0.1, 0.35, 0.2, 0.5, 0.27]
        assert pearson(x, x) == pytest.approx(1.0)

    def test_perfect_negative(self):
        x = [1.0, 2.0, 3.0, 4.0]
        assert pearson(x, [-v for v in x]) == pytest.approx(-1.0)

    def test_matches_numpy(self):
        rng = np.random.default_rng(0)
        x, y = rng.normal(size=50), rng.normal(size=50)
        assert pearson(x, y) == pytest.approx(np.corrcoef(x, y)[0, 1])

    def test_empty_is_zero(self):
        assert pearson([], []) == 0.0

    def test_constant_sequences_are_zero(self):
        assert pearson([0.5, 0.5], [0.5, 0.5]) == 0.0
        assert pearson([0.1, 0.1, 0.1], [0.2, 0.4, 0.3]) == 0.0

    def test_unequal_lengths_raise(self):
        with pytest.raises(ValueError):
            pearson([1, 2, 3], [1, 2])


class TestSpearman:

    def test_monotonic_is_one(self):
        assert spearman([1, 2, 3, 4], [10, 20, 300, 4000]) == pytest.approx(1.0)

    def test_degenerate_is_zero(self):
        assert spearman([1.0], [2.0]) == 0.0
        assert spearman([1, 1, 1], [1, 2, 3]) == 0.0


class TestRmse:

    def test_identical_is_zero(self):
        x = [0.2, 0.3, 0.4]
        assert rmse(x, x) == 0.0

    def test_known_value(self):
        assert rmse([0.0, 0.0], [3.0, 4.0]) == pytest.approx(np.sqrt(12.5))

    def test_empty_is_zero(self):
        assert rmse([], []) == 0.0

    def test_unequal_lengths_raise(self):
        with pytest.raises(ValueError):
            rmse([1.0], [1.0, 2.0])


class TestWilson:

    def test_zero_games(self):
        assert wilson_lower_bound(0, 0) == 0.0

    def test_zero_wins(self):
        assert wilson_lower_bound(0, 25) == 0.0

    @pytest.mark.parametrize("wins,games", [(1, 1), (3, 10), (10, 10), (25, 100), (200, 1000)])
    def test_never_exceeds_raw_rate(self, wins, games):
        lower = wilson_lower_bound(wins, games)
        assert 0.0 <= lower <= wins / games

    def test_tightens_with_sample_size(self):
        # Same 30% rate, more games -> bound closer to 0.30
        assert wilson_lower_bound(3, 10) < wilson_lower_bound(30, 100) < wilson_lower_bound(300, 1000)

    def test_z_for_95_percent(self):
        assert z_for_confidence(0.95) == pytest.approx(1.96, abs=1e-3)

    def test_z_rejects_bad_confidence(self):
        with pytest.raises(ValueError):
            z_for_confidence(1.5)


class TestBayesianShrink:

    def test_zero_games_is_prior(self):
        assert bayesian_shrink(0, 0, 2.5, 10) == pytest.approx(0.25)

    def test_formula(self):
        assert bayesian_shrink(6, 10, 2.5, 10) == pytest.approx(8.5 / 20)

    def test_zero_denominator_is_zero(self):
        assert bayesian_shrink(0, 0, 0, 0) == 0.0


class TestGamesWeightedShrink:

    def test_zero_games_is_prior(self):
        assert games_weighted_shrink(0, 0, target_games=30) == 0.25
        assert games_weighted_shrink(0, 0, target_games=30, prior_rate=0.4) == 0.4

    def test_at_or_past_target_is_raw(self):
        assert games_weighted_shrink(12, 30, target_games=30) == pytest.approx(0.4)
        assert games_weighted_shrink(40, 100, target_games=30) == pytest.approx(0.4)

    def test_halfway_blends_evenly(self):
        # weight 0.5: 0.5 * 0.6 + 0.5 * 0.25
        assert games_weighted_shrink(9, 15, target_games=30) == pytest.approx(0.425)

    def test_converges_toward_prior_with_few_games(self):
        few = games_weighted_shrink(1, 1, target_games=30)
        more = games_weighted_shrink(10, 10, target_games=30)
        assert 0.25 < few < more <= 1.0


def test_safe_rate():
    assert safe_rate(1, 4) == 0.25
    assert safe_rate(3, 0) == 0.0

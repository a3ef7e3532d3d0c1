"""Tests for the candidate estimator grid."""

import pytest

from topcut.models.candidates import (
    bayesian,
    default_candidates,
    games_weighted,
    raw_rate,
    wilson,
)
from topcut.stats.aggregator import AggregateStats


@pytest.fixture
def stats():
    return AggregateStats(key="p", name="p", entries=2, total_wins=6, total_losses=4)


def test_default_grid_order():
    names = [c.name for c in default_candidates()]
    assert names[0] == "Raw Win Rate"
    assert names[1:7] == [f"Threshold {n}+ games" for n in (10, 15, 20, 30, 40, 50)]
    assert names[7] == "Wilson Lower Bound"
    assert names[8:13] == [f"Bayesian (prior={n} games)" for n in (5, 10, 20, 30, 50)]
    assert names[13:] == [f"Weighted Bayesian (target={n})" for n in (20, 30, 40, 50)]


def test_only_thresholds_restrict_population():
    for candidate in default_candidates(min_qualifying=50):
        if candidate.name.startswith("Threshold"):
            assert candidate.min_train_games is not None
            assert candidate.min_identities == 50
        else:
            assert candidate.min_train_games is None
            assert candidate.min_identities == 0


def test_prior_rate_in_descriptions():
    candidates = default_candidates(prior_rate=0.3)
    assert "30% WR" in candidates[8].description


def test_estimates(stats):
    assert raw_rate(stats) == pytest.approx(0.6)
    assert 0 < wilson(stats) < 0.6
    assert bayesian(10, 0.25)(stats) == pytest.approx(8.5 / 20)
    # 10 of 20 target games -> even blend
    assert games_weighted(20, 0.25)(stats) == pytest.approx(0.425)


def test_custom_prior_flows_through(stats):
    candidates = {c.name: c for c in default_candidates(prior_rate=0.5)}
    assert candidates["Bayesian (prior=10 games)"].estimate(stats) == pytest.approx(11 / 20)

"""Tests for the predictive backtest harness."""

from datetime import date

import pytest

from topcut.data.schemas import TournamentSchema
from topcut.models.backtest import BacktestHarness, OmittedCandidate, backtest
from topcut.models.candidates import Candidate, raw_rate
from topcut.stats.aggregator import aggregate_by_commander


@pytest.fixture
def summary(population):
    tournaments, entries = population
    return BacktestHarness().run(tournaments, entries, verbose=False)


class TestPopulationRun:

    def test_split_counts(self, summary, population):
        _, entries = population
        assert summary.n_train_tournaments == 16
        assert summary.n_test_tournaments == 4
        assert summary.n_train_entries + summary.n_test_entries == len(entries)

    def test_results_sorted_by_correlation(self, summary):
        correlations = [r.correlation for r in summary.results]
        assert correlations == sorted(correlations, reverse=True)

    def test_every_candidate_accounted_for(self, summary):
        names = {r.method for r in summary.results} | {o.method for o in summary.omitted}
        assert len(names) == 17
        assert "Raw Win Rate" in names

    def test_skill_is_predictive(self, summary):
        raw = next(r for r in summary.results if r.method == "Raw Win Rate")
        assert raw.n_samples == summary.n_identities
        assert raw.correlation > 0
        assert -1.0 <= summary.best.correlation <= 1.0
        assert summary.best.rmse >= 0

    def test_brackets(self, summary):
        labels = [b.label for b in summary.brackets]
        assert labels == ["10-19 games", "20-29 games", "30-49 games", "50-99 games", "100+ games"]
        short = summary.brackets[0]
        assert not short.sufficient
        assert short.improvement is None
        for bracket in summary.brackets:
            if bracket.sufficient:
                assert bracket.n_samples >= 20
                assert bracket.improvement is not None

    def test_ranking_comparison(self, summary):
        ranking = summary.ranking
        assert len(ranking.top_raw) == min(20, summary.n_identities)
        raw_rates = [r.raw_rate for r in ranking.top_raw]
        assert raw_rates == sorted(raw_rates, reverse=True)
        shrunk_rates = [r.shrunk_rate for r in ranking.top_shrunk]
        assert shrunk_rates == sorted(shrunk_rates, reverse=True)
        assert ranking.raw_mae >= 0
        assert ranking.shrunk_mae >= 0

    def test_summary_text_and_dict(self, summary):
        text = summary.summary()
        assert "PREDICTIVE POWER BACKTEST" in text
        assert "BY TRAINING EXPERIENCE" in text
        data = summary.to_dict()
        assert len(data["results"]) == len(summary.results)
        assert len(data["brackets"]) == 5


def test_candidate_omitted_when_too_few_qualify(population):
    tournaments, entries = population
    strict = Candidate(
        name="Threshold 10+ games",
        description="",
        estimate=raw_rate,
        min_train_games=10,
        min_identities=10_000,
    )
    summary = BacktestHarness().run(tournaments, entries, candidates=[strict], verbose=False)
    assert summary.results == []
    assert len(summary.omitted) == 1
    omitted = summary.omitted[0]
    assert isinstance(omitted, OmittedCandidate)
    assert omitted.required == 10_000
    assert omitted.n_samples == summary.n_identities


def test_constant_rates_score_zero(make_entry):
    tournaments = [
        TournamentSchema(tid="t1", total_players=16, top_cut=4, start_date=date(2025, 1, 1)),
        TournamentSchema(tid="t2", total_players=16, top_cut=4, start_date=date(2025, 2, 1)),
    ]
    entries = [
        make_entry(player_id=p, tid=t, wins=1, losses=1)
        for p in ("a", "b") for t in ("t1", "t2")
    ]
    harness = BacktestHarness(train_fraction=0.5, min_train_games=1, min_test_games=1)
    summary = harness.run(tournaments, entries, verbose=False)
    assert summary.n_identities == 2
    raw = next(r for r in summary.results if r.method == "Raw Win Rate")
    assert raw.correlation == 0.0
    assert raw.rmse == 0.0


def test_backtest_returns_ranked_list(population):
    tournaments, entries = population
    results = backtest(tournaments, entries)
    assert isinstance(results, list)
    assert [r.correlation for r in results] == sorted((r.correlation for r in results), reverse=True)


def test_commander_identities(population):
    tournaments, entries = population
    summary = BacktestHarness(aggregator=aggregate_by_commander).run(
        tournaments, entries, verbose=False
    )
    # population uses 12 commander identities
    assert summary.n_identities == 12


def test_needs_two_tournaments(make_entry):
    one = [TournamentSchema(tid="t1", start_date=date(2025, 1, 1))]
    with pytest.raises(ValueError):
        BacktestHarness().run(one, [make_entry()], verbose=False)

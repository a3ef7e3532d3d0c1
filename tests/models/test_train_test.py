"""Tests for the chronological tournament split."""

from datetime import date

import pytest

from topcut.data.schemas import TournamentSchema
from topcut.models.train_test import partition_entries, split_tournaments


def _tournament(tid, day):
    return TournamentSchema(tid=tid, total_players=32, top_cut=8, start_date=day)


@pytest.fixture
def five():
    # Deliberately out of order
    return [
        _tournament("c", date(2025, 3, 1)),
        _tournament("a", date(2025, 1, 1)),
        _tournament("e", date(2025, 5, 1)),
        _tournament("b", date(2025, 2, 1)),
        _tournament("d", date(2025, 4, 1)),
    ]


def test_earliest_tournaments_train(five):
    split = split_tournaments(five, train_fraction=0.8)
    assert [t.tid for t in split.train] == ["a", "b", "c", "d"]
    assert [t.tid for t in split.test] == ["e"]


def test_split_index_is_floored(five):
    split = split_tournaments(five, train_fraction=0.5)
    assert len(split.train) == 2
    assert len(split.test) == 3


def test_same_day_keeps_input_order():
    day = date(2025, 1, 1)
    tournaments = [_tournament(tid, day) for tid in ("x", "y", "z", "w")]
    split = split_tournaments(tournaments, train_fraction=0.5)
    assert [t.tid for t in split.train] == ["x", "y"]


def test_undated_tournaments_dropped(five, caplog):
    with caplog.at_level("WARNING"):
        split = split_tournaments(five + [TournamentSchema(tid="nodate")], train_fraction=0.8)
    assert "nodate" not in split.train_ids | split.test_ids
    assert "without a start date" in caplog.text


def test_too_few_tournaments():
    with pytest.raises(ValueError):
        split_tournaments([_tournament("a", date(2025, 1, 1))])
    with pytest.raises(ValueError):
        split_tournaments([_tournament("a", date(2025, 1, 1)), TournamentSchema(tid="b")])


@pytest.mark.parametrize("fraction", [0.0, 1.0, 1.5, -0.2])
def test_fraction_out_of_range(five, fraction):
    with pytest.raises(ValueError):
        split_tournaments(five, train_fraction=fraction)


def test_fraction_leaving_empty_side(five):
    with pytest.raises(ValueError):
        split_tournaments(five, train_fraction=0.1)


def test_partition_entries(five, make_entry):
    split = split_tournaments(five, train_fraction=0.8)
    entries = [make_entry(tid="a"), make_entry(tid="e"), make_entry(tid="d"), make_entry(tid="zz")]
    train, test = partition_entries(entries, split)
    assert [e.tournament_id for e in train] == ["a", "d"]
    assert [e.tournament_id for e in test] == ["e"]

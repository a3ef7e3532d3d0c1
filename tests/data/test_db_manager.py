"""Tests for the database write layer."""

import sqlite3

import pytest

from topcut.data.db_manager import TournamentDatabaseManager


@pytest.fixture
def db(tmp_path):
    return TournamentDatabaseManager(str(tmp_path / "nested" / "results.sqlite"))


def _count(db, table):
    conn = sqlite3.connect(db.db_path)
    try:
        return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
    finally:
        conn.close()


def test_schema_created(db):
    assert db.db_path.exists()
    conn = sqlite3.connect(db.db_path)
    try:
        tables = {r[0] for r in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    finally:
        conn.close()
    assert {"tournaments", "players", "tournament_entries", "deck_commanders"} <= tables


def test_invalid_tournaments_skipped(db):
    conn = db.get_connection()
    written = db.update_tournaments(conn, [
        {"tid": "ok", "total_players": 32, "top_cut": 8, "start_date": "2025-01-01"},
        {"tid": "bad", "total_players": -5},
    ])
    conn.commit()
    conn.close()
    assert written == 1
    assert _count(db, "tournaments") == 1


def test_entries_and_commanders(db):
    conn = db.get_connection()
    written = db.update_entries(conn, [
        {"entry_id": "e1", "player_id": "p1", "tid": "t1", "wins": 2, "losses": 1,
         "commanders": "Thrasios, Triton Hero / Tymna the Weaver"},
        {"entry_id": "e2", "player_id": "p2", "tid": "t1", "wins": 0, "losses": 3,
         "commanders": ["Kinnan, Bonder Prodigy"]},
        {"player_id": "p3", "tid": "t1"},
        {"entry_id": "e4", "player_id": "p4", "tid": "t1", "standing": 0},
    ])
    conn.commit()
    conn.close()
    assert written == 2
    assert _count(db, "tournament_entries") == 2
    assert _count(db, "deck_commanders") == 3


def test_missing_commander_name_keeps_entry(db):
    conn = db.get_connection()
    written = db.update_entries(conn, [
        {"entry_id": "e1", "player_id": "p1", "tid": "t1", "wins": 4, "losses": 1,
         "commanders": ["Kinnan, Bonder Prodigy", None]},
    ])
    conn.commit()
    conn.close()
    assert written == 1
    assert _count(db, "tournament_entries") == 1
    assert _count(db, "deck_commanders") == 1


def test_oversized_top_cut_is_capped(db):
    conn = db.get_connection()
    written = db.update_tournaments(conn, [
        {"tid": "pod", "total_players": 4, "top_cut": 16, "start_date": "2025-01-01"},
    ])
    conn.commit()
    conn.close()
    assert written == 1

    conn = sqlite3.connect(db.db_path)
    try:
        row = conn.execute("SELECT total_players, top_cut FROM tournaments").fetchone()
    finally:
        conn.close()
    assert row == (4, 4)


def test_upsert_replaces(db):
    row = {"entry_id": "e1", "player_id": "p1", "tid": "t1", "wins": 1, "losses": 2,
           "commanders": ["Kinnan, Bonder Prodigy"]}
    for wins in (1, 3):
        conn = db.get_connection()
        db.update_entries(conn, [{**row, "wins": wins}])
        conn.commit()
        conn.close()

    conn = sqlite3.connect(db.db_path)
    try:
        rows = conn.execute("SELECT wins FROM tournament_entries").fetchall()
    finally:
        conn.close()
    assert rows == [(3,)]
    assert _count(db, "deck_commanders") == 1


def test_players(db):
    conn = db.get_connection()
    written = db.update_players(conn, [
        {"player_id": 1, "player_name": "Alice"},
        {"player_name": "No Id"},
    ])
    conn.commit()
    conn.close()
    assert written == 1

"""Pytest fixtures/config for topcut tests."""

import os
import sys
from datetime import date, timedelta

import pytest


def pytest_sessionstart(session) -> None:  # type: ignore[unused-argument]
    repo_root = os.path.dirname(os.path.dirname(__file__))
    src_path = os.path.join(repo_root, "src")
    if src_path not in sys.path:
        sys.path.insert(0, src_path)


@pytest.fixture
def make_entry():
    """Factory for EntrySchema rows with sensible defaults."""
    from topcut.data.schemas import EntrySchema

    def _make(
        player_id="p1",
        tid="t1",
        wins=1,
        losses=2,
        draws=0,
        standing=None,
        commanders=("Tymna the Weaver", "Kraum, Ludevic's Opus"),
        total_players=16,
        top_cut=4,
        start_date=date(2025, 3, 1),
        player_name=None,
    ):
        return EntrySchema(
            player_id=player_id,
            tid=tid,
            wins=wins,
            losses=losses,
            draws=draws,
            standing=standing,
            commanders=commanders,
            total_players=total_players,
            top_cut=top_cut,
            start_date=start_date,
            player_name=player_name,
        )

    return _make


@pytest.fixture
def sample_export():
    """Small results export: 3 tournaments, 4 players, 9 entries (one bye)."""
    tournaments = [
        {"tid": "t1", "tournament_name": "Spring Open", "total_players": 16, "top_cut": 4,
         "start_date": "2025-03-01", "is_league": False},
        {"tid": "t2", "tournament_name": "Summer Major", "total_players": 120, "top_cut": 16,
         "start_date": "2025-06-14", "is_league": False},
        {"tid": "t3", "tournament_name": "Weekly League", "total_players": 24, "top_cut": 0,
         "start_date": "2025-04-10", "is_league": True},
    ]
    players = [
        {"player_id": "p1", "player_name": "Alice"},
        {"player_id": "p2", "player_name": "Bob"},
        {"player_id": "p3", "player_name": "Cara"},
        {"player_id": "p4", "player_name": "Dev"},
    ]
    entries = [
        {"entry_id": "e1", "player_id": "p1", "tid": "t1", "wins": 3, "losses": 1, "draws": 1,
         "standing": 1, "commanders": ["Tymna the Weaver", "Kraum, Ludevic's Opus"]},
        {"entry_id": "e2", "player_id": "p2", "tid": "t1", "wins": 2, "losses": 2, "draws": 1,
         "standing": 3, "commanders": ["Kinnan, Bonder Prodigy"]},
        {"entry_id": "e3", "player_id": "p3", "tid": "t1", "wins": 1, "losses": 4, "draws": 0,
         "standing": 9, "commanders": ["Kraum, Ludevic's Opus", "Tymna the Weaver"]},
        {"entry_id": "e4", "player_id": "p4", "tid": "t1", "wins": 0, "losses": 0, "draws": 0,
         "standing": 16, "commanders": ["Kinnan, Bonder Prodigy"]},
        {"entry_id": "e5", "player_id": "p1", "tid": "t2", "wins": 4, "losses": 2, "draws": 1,
         "standing": 5, "commanders": ["Kinnan, Bonder Prodigy"]},
        {"entry_id": "e6", "player_id": "p2", "tid": "t2", "wins": 2, "losses": 5, "draws": 0,
         "standing": 70, "commanders": ["Kinnan, Bonder Prodigy"]},
        {"entry_id": "e7", "player_id": "p3", "tid": "t2", "wins": 5, "losses": 1, "draws": 1,
         "standing": 1, "commanders": ["Tymna the Weaver", "Kraum, Ludevic's Opus"]},
        {"entry_id": "e8", "player_id": "p1", "tid": "t3", "wins": 3, "losses": 2, "draws": 0,
         "standing": 2, "commanders": []},
        {"entry_id": "e9", "player_id": "p4", "tid": "t3", "wins": 1, "losses": 3, "draws": 1,
         "standing": 12, "commanders": ["Kinnan, Bonder Prodigy"]},
    ]
    return {"tournaments": tournaments, "players": players, "entries": entries}


@pytest.fixture
def sample_db(tmp_path, sample_export):
    """SQLite database populated from sample_export; returns its path."""
    from topcut.data.db_manager import TournamentDatabaseManager

    db_path = tmp_path / "tournaments.sqlite"
    db = TournamentDatabaseManager(str(db_path))
    conn = db.get_connection()
    try:
        db.update_tournaments(conn, sample_export["tournaments"])
        db.update_players(conn, sample_export["players"])
        db.update_entries(conn, sample_export["entries"])
        conn.commit()
    finally:
        conn.close()
    return db_path


def build_population(
    n_tournaments=20,
    n_players=80,
    players_per_event=40,
    start=date(2024, 1, 6),
    seed=7,
):
    """Synthetic tournaments and entries with a stable per-player skill.

    Each player has a true win probability; every event, a random subset
    of players enters and plays 7 games. Returns (tournaments, entries).
    """
    import numpy as np

    from topcut.data.schemas import EntrySchema, TournamentSchema

    rng = np.random.default_rng(seed)
    skill = rng.uniform(0.1, 0.45, size=n_players)
    tournaments, entries = [], []

    for t in range(n_tournaments):
        tid = f"t{t:03d}"
        day = start + timedelta(days=7 * t)
        tournament = TournamentSchema(
            tid=tid, tournament_name=f"Event {t}", total_players=players_per_event,
            top_cut=8, start_date=day,
        )
        tournaments.append(tournament)

        entrants = rng.choice(n_players, size=players_per_event, replace=False)
        wins = {int(p): int(rng.binomial(7, skill[p])) for p in entrants}
        ranked = sorted(wins, key=lambda p: (-wins[p], p))
        for standing, p in enumerate(ranked, start=1):
            w = wins[p]
            entries.append(EntrySchema(
                player_id=f"p{p:03d}", tid=tid, wins=w, losses=7 - w, draws=0,
                standing=standing, commanders=(f"Commander {p % 12}",),
                total_players=players_per_event, top_cut=8, start_date=day,
            ))

    return tournaments, entries


@pytest.fixture
def population():
    return build_population()

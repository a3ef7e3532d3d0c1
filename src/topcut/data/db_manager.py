"""Database manager for tournament results storage.

Handles all SQLite write operations including:
- Schema initialization
- Validated upserts for tournaments, players, entries and deck commanders

Key Classes:
    TournamentDatabaseManager - Database operations for tournament data

Usage:
    from topcut.data.db_manager import TournamentDatabaseManager

    db = TournamentDatabaseManager()
    with db.get_connection() as conn:
        db.update_tournaments(conn, tournaments)
        db.update_entries(conn, entries)
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import ValidationError

from topcut.config import DEFAULT_DB_PATH
from topcut.data.schemas import EntrySchema, TournamentSchema, schema_to_create_table

logger = logging.getLogger(__name__)


class TournamentDatabaseManager:
    """Manages SQLite database for tournament results."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = Path(db_path or DEFAULT_DB_PATH)
        self._init_database()

    def _init_database(self) -> None:
        """Create database schema if it doesn't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        self._create_tournaments_table(cursor)
        self._create_players_table(cursor)
        self._create_entries_table(cursor)
        self._create_commanders_table(cursor)
        self._create_indexes(cursor)

        conn.commit()
        conn.close()
        logger.info(f"Database initialized: {self.db_path}")

    def _create_tournaments_table(self, cursor: sqlite3.Cursor) -> None:
        """Create tournaments table from TournamentSchema."""
        sql = schema_to_create_table("tournaments", TournamentSchema, primary_key="tid")
        cursor.execute(sql)

    def _create_players_table(self, cursor: sqlite3.Cursor) -> None:
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS players (
                player_id TEXT PRIMARY KEY,
                player_name TEXT
            )
        """)

    def _create_entries_table(self, cursor: sqlite3.Cursor) -> None:
        """Create tournament_entries table from EntrySchema.

        Tournament size, cut and date live on the tournaments table and
        are joined back in by DataReader.
        """
        sql = schema_to_create_table(
            "tournament_entries",
            EntrySchema,
            exclude=("tournament_id", "commanders", "total_players", "top_cut",
                     "start_date", "player_name"),
            extra_columns=[
                "entry_id TEXT PRIMARY KEY",
                "tid TEXT REFERENCES tournaments(tid)",
            ],
        )
        cursor.execute(sql)

    def _create_commanders_table(self, cursor: sqlite3.Cursor) -> None:
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS deck_commanders (
                entry_id TEXT REFERENCES tournament_entries(entry_id),
                commander_name TEXT,
                UNIQUE(entry_id, commander_name)
            )
        """)

    def _create_indexes(self, cursor: sqlite3.Cursor) -> None:
        """Create database indexes for common query patterns."""
        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_entries_tid
            ON tournament_entries(tid)
        """)  # Entries for a tournament batch
        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_entries_player
            ON tournament_entries(player_id)
        """)  # Player history
        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_tournaments_date_size
            ON tournaments(start_date, total_players)
        """)  # Period + min-size filters
        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_commanders_entry
            ON deck_commanders(entry_id)
        """)

    def get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        return sqlite3.connect(self.db_path)

    def _bulk_upsert(
        self,
        cursor: sqlite3.Cursor,
        table: str,
        columns: List[str],
        rows: List[tuple],
    ) -> None:
        """Bulk insert/replace rows efficiently."""
        if not rows:
            return
        placeholders = ", ".join("?" * len(columns))
        cols = ", ".join(columns)
        cursor.executemany(
            f"INSERT OR REPLACE INTO {table} ({cols}) VALUES ({placeholders})",
            rows,
        )

    def update_tournaments(self, conn: sqlite3.Connection, tournaments: List[Dict]) -> int:
        """Upsert tournament rows with schema validation.

        Returns:
            Number of rows written
        """
        logger.info(f"Validating and updating {len(tournaments)} tournaments...")

        columns = ["tid", "tournament_name", "total_players", "top_cut", "start_date", "is_league"]
        rows = []
        errors = []

        for t in tournaments:
            try:
                tournament = TournamentSchema.model_validate(t)
                rows.append((
                    tournament.tid,
                    tournament.tournament_name,
                    tournament.total_players,
                    tournament.top_cut,
                    tournament.start_date.isoformat() if tournament.start_date else None,
                    1 if tournament.is_league else 0,
                ))
            except ValidationError as e:
                errors.append((t.get("tid", "unknown"), str(e)))

        if errors:
            logger.warning(f"Skipped {len(errors)} tournaments with invalid schema: {errors[:3]}...")

        self._bulk_upsert(conn.cursor(), "tournaments", columns, rows)
        return len(rows)

    def update_players(self, conn: sqlite3.Connection, players: List[Dict]) -> int:
        """Upsert player_id -> player_name rows."""
        rows = [
            (str(p["player_id"]), p.get("player_name"))
            for p in players
            if p.get("player_id") is not None
        ]
        self._bulk_upsert(conn.cursor(), "players", ["player_id", "player_name"], rows)
        return len(rows)

    def update_entries(self, conn: sqlite3.Connection, entries: List[Dict]) -> int:
        """Upsert tournament entries and their deck commanders.

        Each row needs an ``entry_id`` plus the EntrySchema fields;
        ``commanders`` may be a list of names or a canonical pair string.

        Returns:
            Number of entries written
        """
        logger.info(f"Validating and updating {len(entries)} entries...")

        columns = ["entry_id", "player_id", "tid", "wins", "losses", "draws", "standing"]
        rows = []
        commander_rows = []
        errors = []

        for e in entries:
            entry_id = e.get("entry_id")
            if entry_id is None:
                errors.append(("unknown", "Missing entry_id"))
                continue
            try:
                entry = EntrySchema.model_validate(e)
            except ValidationError as exc:
                errors.append((entry_id, str(exc)))
                continue

            rows.append((
                str(entry_id), entry.player_id, entry.tournament_id,
                entry.wins, entry.losses, entry.draws, entry.standing,
            ))
            for name in entry.commanders:
                commander_rows.append((str(entry_id), name))

        if errors:
            logger.warning(f"Skipped {len(errors)} entries with invalid schema: {errors[:3]}...")

        cursor = conn.cursor()
        self._bulk_upsert(cursor, "tournament_entries", columns, rows)
        self._bulk_upsert(cursor, "deck_commanders", ["entry_id", "commander_name"], commander_rows)
        return len(rows)

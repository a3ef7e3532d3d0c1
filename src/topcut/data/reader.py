"""Read-only access layer for the tournament SQLite database.

Provides DataReader, the collaborator that delivers raw rows to the
statistics core. Every entry comes back as an EntrySchema already
carrying its tournament's size, top cut and start date.

Key Methods:
    fetch_tournaments() - Tournaments in a date range / size filter, oldest first
    fetch_entries() - Entries for a set of tournament ids (batched)
    fetch_period() - Both of the above for one date range
    query() - Execute raw SQL and return list of dicts

Usage:
    from topcut.data import DataReader

    reader = DataReader()
    tournaments = reader.fetch_tournaments(start="2025-01-01", min_size=50)
    entries = reader.fetch_entries([t.tid for t in tournaments])
"""

from __future__ import annotations

import logging
import os
import sqlite3
from collections import defaultdict
from contextlib import contextmanager
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from topcut.config import DEFAULT_DB_PATH, DEFAULT_MIN_SIZE, ENTRY_BATCH_SIZE
from topcut.data import queries as Q
from topcut.data.schemas import EntrySchema, TournamentSchema

logger = logging.getLogger(__name__)

DateLike = Union[str, date, None]


def _dict_factory(cursor, row):
    mapping = {}
    for idx, col in enumerate(cursor.description):
        mapping[col[0]] = row[idx]
    return mapping


def _iso(d: DateLike) -> Optional[str]:
    if d is None:
        return None
    return d.isoformat() if isinstance(d, date) else str(d)


class DataReader:
    """Lightweight SQLite client for tournament data access."""

    def __init__(self, db_path: Optional[str] = None, batch_size: int = ENTRY_BATCH_SIZE) -> None:
        self.db_path = str(db_path or DEFAULT_DB_PATH)
        if not os.path.exists(self.db_path):
            raise FileNotFoundError(f"Database not found: {self.db_path}")
        self.batch_size = batch_size

    @contextmanager
    def _conn(self):
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = _dict_factory
        try:
            yield conn
        finally:
            conn.close()

    def query(self, sql: str, params: tuple = ()) -> List[Dict[str, Any]]:
        """Execute raw SQL and return list of dicts."""
        with self._conn() as conn:
            cur = conn.execute(sql, params)
            return cur.fetchall()

    # -------------------------------------------------------------------------
    # Tournament queries
    # -------------------------------------------------------------------------

    def get_tournament(self, tid: str) -> Optional[TournamentSchema]:
        """Get tournament by ID."""
        rows = self.query(Q.TOURNAMENT_BY_ID, (tid,))
        return TournamentSchema.model_validate(rows[0]) if rows else None

    def fetch_tournaments(
        self,
        start: DateLike = None,
        end: DateLike = None,
        min_size: int = DEFAULT_MIN_SIZE,
        include_leagues: bool = False,
    ) -> List[TournamentSchema]:
        """Tournaments matching the filters, ordered by start date.

        Args:
            start: Inclusive earliest start date
            end: Inclusive latest start date
            min_size: Minimum total_players
            include_leagues: Keep league events (excluded by default)
        """
        sql = Q.TOURNAMENTS_BASE
        params: List[Any] = []

        if start:
            sql += " AND start_date >= ?"
            params.append(_iso(start))
        if end:
            sql += " AND start_date <= ?"
            params.append(_iso(end))
        if min_size:
            sql += " AND total_players >= ?"
            params.append(min_size)
        if not include_leagues:
            sql += " AND COALESCE(is_league, 0) = 0"

        sql += Q.TOURNAMENTS_ORDER

        tournaments = []
        for row in self.query(sql, tuple(params)):
            try:
                tournaments.append(TournamentSchema.model_validate(row))
            except ValidationError as e:
                logger.warning(f"Skipping tournament {row.get('tid')}: {e}")
        return tournaments

    # -------------------------------------------------------------------------
    # Entry queries
    # -------------------------------------------------------------------------

    def fetch_entries(self, tournament_ids: Iterable[str]) -> List[EntrySchema]:
        """Entries for the given tournaments, with commanders attached.

        Ids are queried in batches to stay under SQLite's bound-parameter
        limit. Zero-game rows are filtered out by the query; rows that fail
        validation are logged and skipped.
        """
        unique_ids = list(dict.fromkeys(str(t) for t in tournament_ids))
        if not unique_ids:
            return []

        entries: List[EntrySchema] = []
        errors = []

        for i in range(0, len(unique_ids), self.batch_size):
            batch = unique_ids[i:i + self.batch_size]
            rows, commanders = self._fetch_batch(batch)
            for row in rows:
                row["commanders"] = commanders.get(row["entry_id"], [])
                try:
                    entries.append(EntrySchema.model_validate(row))
                except ValidationError as e:
                    errors.append((row.get("entry_id"), str(e)))

        if errors:
            logger.warning(f"Skipped {len(errors)} entries with invalid schema: {errors[:3]}...")

        logger.info(f"Fetched {len(entries)} entries from {len(unique_ids)} tournaments")
        return entries

    def _fetch_batch(self, batch: Sequence[str]) -> Tuple[List[Dict], Dict[Any, List[str]]]:
        placeholders = ",".join("?" for _ in batch)
        rows = self.query(Q.ENTRIES_FOR_TOURNAMENTS.format(placeholders=placeholders), tuple(batch))

        commanders: Dict[Any, List[str]] = defaultdict(list)
        for c in self.query(Q.COMMANDERS_FOR_TOURNAMENTS.format(placeholders=placeholders), tuple(batch)):
            if c["commander_name"]:
                commanders[c["entry_id"]].append(c["commander_name"])
        return rows, commanders

    def fetch_period(
        self,
        start: DateLike = None,
        end: DateLike = None,
        min_size: int = DEFAULT_MIN_SIZE,
    ) -> Tuple[List[TournamentSchema], List[EntrySchema]]:
        """Tournaments and their entries for one date range."""
        tournaments = self.fetch_tournaments(start=start, end=end, min_size=min_size)
        entries = self.fetch_entries(t.tid for t in tournaments)
        return tournaments, entries

    # -------------------------------------------------------------------------
    # Player / commander lookups
    # -------------------------------------------------------------------------

    def get_player(self, identifier: str) -> Optional[Dict]:
        """Get player by id, falling back to a case-insensitive name match."""
        rows = self.query(Q.PLAYER_BY_ID, (identifier,))
        if not rows:
            rows = self.query(Q.PLAYER_BY_NAME, (identifier,))
        return rows[0] if rows else None

    def get_commander_names(self) -> List[str]:
        """All distinct commander card names seen in decklists."""
        return [r["commander_name"] for r in self.query(Q.COMMANDER_NAMES)]

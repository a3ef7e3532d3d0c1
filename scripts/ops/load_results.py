#!/usr/bin/env python3
"""Load a tournament results export into the local database.

The export is a JSON file with three lists:

    {
      "tournaments": [{"tid": ..., "tournament_name": ..., "total_players": ...,
                       "top_cut": ..., "start_date": "YYYY-MM-DD", "is_league": false}],
      "players":     [{"player_id": ..., "player_name": ...}],
      "entries":     [{"entry_id": ..., "player_id": ..., "tid": ..., "wins": ...,
                       "losses": ..., "draws": ..., "standing": ...,
                       "commanders": ["Name A", "Name B"]}]
    }

Rows that fail validation are logged and skipped.

Usage:
    python scripts/ops/load_results.py export.json
    python scripts/ops/load_results.py export.json --db storage/test.sqlite

Environment:
    TOPCUT_DB_PATH: Path to SQLite database (default: storage/tournaments.sqlite)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from topcut.data import TournamentDatabaseManager

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def main():
    """Validate and upsert an export file."""
    parser = argparse.ArgumentParser(description="Load tournament results into SQLite")
    parser.add_argument("export", help="JSON export file")
    parser.add_argument("--db", default=None, help="Database path (default: from config)")
    args = parser.parse_args()

    export_path = Path(args.export)
    if not export_path.exists():
        logger.error(f"Export not found: {export_path}")
        sys.exit(1)

    with open(export_path) as f:
        data = json.load(f)

    db = TournamentDatabaseManager(args.db)
    conn = db.get_connection()
    try:
        n_tournaments = db.update_tournaments(conn, data.get("tournaments", []))
        n_players = db.update_players(conn, data.get("players", []))
        n_entries = db.update_entries(conn, data.get("entries", []))
        conn.commit()
    finally:
        conn.close()

    logger.info(
        f"Loaded {n_tournaments} tournaments, {n_players} players, "
        f"{n_entries} entries into {db.db_path}"
    )


if __name__ == "__main__":
    main()

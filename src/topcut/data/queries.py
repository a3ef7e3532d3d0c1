"""Centralized SQL queries for the tournament database.

All SQL statements used by DataReader and scripts live here.
Named constants for clarity and single source of truth.
"""

# -----------------------------------------------------------------------------
# Tournament queries
# -----------------------------------------------------------------------------

TOURNAMENT_BY_ID = "SELECT * FROM tournaments WHERE tid = ?"

# Filters are appended by DataReader.fetch_tournaments()
TOURNAMENTS_BASE = """
SELECT tid, tournament_name, total_players, top_cut, start_date, is_league
FROM tournaments
WHERE 1=1
"""

TOURNAMENTS_ORDER = " ORDER BY start_date ASC, tid ASC"

# -----------------------------------------------------------------------------
# Entry queries
# -----------------------------------------------------------------------------

# Placeholder count must be filled: .format(placeholders=",".join("?" for _ in ids))
# Rows with no games played (byes, no-shows) are excluded at the source.
ENTRIES_FOR_TOURNAMENTS = """
SELECT e.entry_id, e.player_id, e.tid, e.wins, e.losses, e.draws, e.standing,
       p.player_name, t.total_players, t.top_cut, t.start_date
FROM tournament_entries e
JOIN tournaments t ON e.tid = t.tid
LEFT JOIN players p ON e.player_id = p.player_id
WHERE e.tid IN ({placeholders})
  AND (COALESCE(e.wins, 0) > 0 OR COALESCE(e.losses, 0) > 0 OR COALESCE(e.draws, 0) > 0)
ORDER BY e.entry_id
"""

COMMANDERS_FOR_TOURNAMENTS = """
SELECT d.entry_id, d.commander_name
FROM deck_commanders d
JOIN tournament_entries e ON d.entry_id = e.entry_id
WHERE e.tid IN ({placeholders})
"""

# -----------------------------------------------------------------------------
# Player queries
# -----------------------------------------------------------------------------

PLAYER_BY_ID = "SELECT * FROM players WHERE player_id = ?"

PLAYER_BY_NAME = "SELECT * FROM players WHERE player_name = ? COLLATE NOCASE"

# -----------------------------------------------------------------------------
# Commander queries
# -----------------------------------------------------------------------------

COMMANDER_NAMES = """
SELECT DISTINCT commander_name FROM deck_commanders ORDER BY commander_name
"""

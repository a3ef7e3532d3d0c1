"""Data module - data access, API, and schemas.

Public API:
    DataReader - SQLite database access (tournaments, entries)
    TournamentDatabaseManager - SQLite write operations
    ScryfallClient - HTTP client for commander card art
    EntrySchema, TournamentSchema - Pydantic row models
"""

from topcut.data.reader import DataReader
from topcut.data.db_manager import TournamentDatabaseManager
from topcut.data.api_client import CardImages, ScryfallClient
from topcut.data.schemas import (
    EntrySchema,
    TournamentSchema,
    canonical_commander_pair,
    split_commander_pair,
    Entry,
    Tournament,
)

__all__ = [
    "DataReader",
    "TournamentDatabaseManager",
    "ScryfallClient",
    "CardImages",
    "EntrySchema",
    "TournamentSchema",
    "canonical_commander_pair",
    "split_commander_pair",
    "Entry",
    "Tournament",
]

"""Pydantic schemas for tournament data validation.

Defines Pydantic models for tournament rows and per-player entries.
Rows come from the results store with nullable numeric columns; the
schemas coerce those to 0 so nothing downstream sees a None count.

Models:
    TournamentSchema - Tournament metadata (size, top cut, date)
    EntrySchema - One player's record in one tournament, carrying the
        originating tournament's size and top cut

Usage:
    from topcut.data.schemas import EntrySchema

    entry = EntrySchema.model_validate(row)
    print(entry.games, entry.commander_pair)
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Tuple, Type, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from topcut.config import COMMANDER_SEPARATOR


# Type mapping from Python types to SQLite types
PYTHON_TO_SQLITE: Dict[Type, str] = {
    int: "INTEGER",
    float: "REAL",
    str: "TEXT",
    bool: "INTEGER",
    date: "TEXT",
}


def pydantic_to_sqlite_column(field_name: str, field_info: Any, primary_key: str) -> str:
    """Convert a Pydantic field to SQLite column definition.

    Args:
        field_name: Name of the field
        field_info: Pydantic FieldInfo object
        primary_key: Name of the primary key column

    Returns:
        SQLite column definition string
    """
    annotation = field_info.annotation

    # Optional is Union[X, None]
    args = get_args(annotation)
    if type(None) in args:
        annotation = next(a for a in args if a is not type(None))

    sqlite_type = PYTHON_TO_SQLITE.get(annotation, "TEXT")

    if field_name == primary_key:
        return f"{field_name} {sqlite_type} PRIMARY KEY"

    return f"{field_name} {sqlite_type}"


def schema_to_create_table(
    table_name: str,
    schema: Type[BaseModel],
    primary_key: str = "id",
    exclude: Iterable[str] = (),
    extra_columns: Optional[List[str]] = None,
) -> str:
    """Generate CREATE TABLE SQL from Pydantic schema.

    Args:
        table_name: Name of the SQL table
        schema: Pydantic model class
        primary_key: Column to mark as PRIMARY KEY
        exclude: Schema fields that are not stored in this table
        extra_columns: Additional column definitions not in schema

    Returns:
        CREATE TABLE IF NOT EXISTS SQL statement
    """
    skip = set(exclude)
    columns = [
        pydantic_to_sqlite_column(name, info, primary_key)
        for name, info in schema.model_fields.items()
        if name not in skip
    ]

    if extra_columns:
        columns.extend(extra_columns)

    columns_sql = ",\n                ".join(columns)
    return f"""
            CREATE TABLE IF NOT EXISTS {table_name} (
                {columns_sql}
            )
        """


def canonical_commander_pair(names: Iterable[Optional[str]]) -> str:
    """Order-independent identity for a deck's commanders.

    Blank names are dropped, the rest are sorted and joined, so
    "B / A" and "A / B" collapse to the same key. Returns "" when no
    commander is named.
    """
    cleaned = sorted(n.strip() for n in names if n and n.strip())
    return COMMANDER_SEPARATOR.join(cleaned)


def split_commander_pair(pair: str) -> List[str]:
    """Inverse of canonical_commander_pair."""
    return [n.strip() for n in pair.split(COMMANDER_SEPARATOR) if n.strip()]


def _as_int(v: Any) -> Optional[int]:
    try:
        return int(v)
    except (TypeError, ValueError):
        return None


def _clamp_top_cut(data: Any) -> Any:
    """Cap top_cut at total_players when the field size is known."""
    if not isinstance(data, dict):
        return data
    total, cut = _as_int(data.get("total_players")), _as_int(data.get("top_cut"))
    if total is not None and cut is not None and 0 < total < cut:
        return {**data, "top_cut": total}
    return data


class TournamentSchema(BaseModel):
    """Tournament metadata."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    tid: str
    tournament_name: Optional[str] = None
    total_players: int = Field(0, ge=0)
    top_cut: int = Field(0, ge=0)
    start_date: Optional[date] = None
    is_league: bool = False

    @field_validator("tid", mode="before")
    @classmethod
    def _tid_as_str(cls, v):
        return str(v) if v is not None else v

    @field_validator("total_players", "top_cut", mode="before")
    @classmethod
    def _null_to_zero(cls, v):
        return 0 if v is None else v

    @field_validator("is_league", mode="before")
    @classmethod
    def _null_to_false(cls, v):
        return False if v is None else v

    @model_validator(mode="before")
    @classmethod
    def _cut_within_field(cls, data):
        return _clamp_top_cut(data)


class EntrySchema(BaseModel):
    """One player's participation record in one tournament.

    The tournament's size and top cut travel with the entry because every
    expected-outcome term is computed per entry.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    player_id: str
    tournament_id: str = Field(alias="tid")
    wins: int = Field(0, ge=0)
    losses: int = Field(0, ge=0)
    draws: int = Field(0, ge=0)
    standing: Optional[int] = Field(None, ge=1)
    commanders: Tuple[str, ...] = ()
    total_players: int = Field(0, ge=0)
    top_cut: int = Field(0, ge=0)
    start_date: Optional[date] = None
    player_name: Optional[str] = None

    @field_validator("player_id", "tournament_id", mode="before")
    @classmethod
    def _id_as_str(cls, v):
        return str(v) if v is not None else v

    @field_validator("wins", "losses", "draws", "total_players", "top_cut", mode="before")
    @classmethod
    def _null_to_zero(cls, v):
        return 0 if v is None else v

    @field_validator("commanders", mode="before")
    @classmethod
    def _commanders_tuple(cls, v):
        if v is None:
            return ()
        if isinstance(v, str):
            return tuple(split_commander_pair(v))
        return tuple(str(n).strip() for n in v if n is not None and str(n).strip())

    @model_validator(mode="before")
    @classmethod
    def _cut_within_field(cls, data):
        return _clamp_top_cut(data)

    @property
    def games(self) -> int:
        return self.wins + self.losses + self.draws

    @property
    def commander_pair(self) -> str:
        return canonical_commander_pair(self.commanders)

    @property
    def converted(self) -> bool:
        """Finished inside the top cut."""
        return self.top_cut > 0 and self.standing is not None and self.standing <= self.top_cut

    @property
    def made_top4(self) -> bool:
        return self.top_cut >= 4 and self.standing is not None and self.standing <= 4

    @property
    def won_event(self) -> bool:
        return self.standing == 1

    @property
    def placement_pct(self) -> Optional[float]:
        """Placement percentile: 100 = first place, 0 = last place."""
        if self.standing is None or self.total_players <= 1:
            return None
        return 100.0 * (self.total_players - self.standing) / (self.total_players - 1)

    def with_tournament(self, tournament: TournamentSchema) -> "EntrySchema":
        """Copy of this entry carrying the tournament's size, cut and date."""
        return self.model_copy(update={
            "total_players": tournament.total_players,
            "top_cut": tournament.top_cut,
            "start_date": tournament.start_date,
        })


# Short aliases
Tournament = TournamentSchema
Entry = EntrySchema

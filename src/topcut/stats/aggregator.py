"""Fold tournament entries into per-identity statistics.

One pass over a sequence of entries produces one AggregateStats per
identity (a player id or a canonical commander pair). Only counters are
stored; every rate is derived from them on read, so a rate can never
disagree with the counts behind it.

Entries with zero games (byes, no-shows) and entries whose identity key
is empty are skipped.

Key Classes:
    AggregateStats - Immutable counters plus derived rates

Key Functions:
    aggregate() - Group entries by an arbitrary key function
    aggregate_by_player() - Group by player_id
    aggregate_by_commander() - Group by canonical commander pair
    summarize() - Fold every entry into a single AggregateStats

Usage:
    from topcut.stats import aggregate_by_commander

    stats = aggregate_by_commander(entries)
    for pair, s in stats.items():
        print(pair, s.entries, f"{s.win_rate:.1%}", f"{s.conv_vs_expected:+.1f}")
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, Iterable, Optional, Set

from topcut.data.schemas import EntrySchema
from topcut.stats.estimators import safe_rate
from topcut.stats.expected import expected_outcome, vs_expected

# Fewer games than this and the swiss projection is meaningless
MIN_FIVE_SWISS_GAMES = 7

KeyFunc = Callable[[EntrySchema], Optional[str]]


@dataclass(frozen=True)
class AggregateStats:
    """Cumulative counters for one identity.

    Attributes:
        key: Player id or commander pair this row describes.
        name: Display name (most frequent player name, or the pair itself).
        entries: Entries with at least one game.
        conversions: Entries finishing inside the top cut.
        top4s: Entries finishing top 4 in events with a cut of 4 or more.
        championships: Entries finishing first.
        expected_conv / expected_top4 / expected_champ: Per-entry baseline
            probabilities, summed.
        unique_pilots: Distinct player ids across the entries.
        placement_sum / placement_entries: Sum and count of per-entry
            placement percentiles.
        main_commander: Most played commander pair, None if none named.
    """

    key: str
    name: str
    entries: int = 0
    total_wins: int = 0
    total_losses: int = 0
    total_draws: int = 0
    conversions: int = 0
    top4s: int = 0
    championships: int = 0
    expected_conv: float = 0.0
    expected_top4: float = 0.0
    expected_champ: float = 0.0
    unique_pilots: int = 0
    placement_sum: float = 0.0
    placement_entries: int = 0
    main_commander: Optional[str] = None
    main_commander_entries: int = 0

    @property
    def games(self) -> int:
        return self.total_wins + self.total_losses + self.total_draws

    @property
    def win_rate(self) -> float:
        return safe_rate(self.total_wins, self.games)

    @property
    def draw_rate(self) -> float:
        return safe_rate(self.total_draws, self.games)

    @property
    def conversion_rate(self) -> float:
        return safe_rate(self.conversions, self.entries)

    @property
    def top4_rate(self) -> float:
        return safe_rate(self.top4s, self.entries)

    @property
    def champ_rate(self) -> float:
        return safe_rate(self.championships, self.entries)

    @property
    def conv_vs_expected(self) -> float:
        return vs_expected(self.conversions, self.expected_conv, self.entries)

    @property
    def top4_vs_expected(self) -> float:
        return vs_expected(self.top4s, self.expected_top4, self.entries)

    @property
    def champ_vs_expected(self) -> float:
        return vs_expected(self.championships, self.expected_champ, self.entries)

    @property
    def five_swiss(self) -> Optional[float]:
        """Projected points over five swiss rounds (win = 5 pts, draw = 1)."""
        if self.games < MIN_FIVE_SWISS_GAMES:
            return None
        return 5 * self.win_rate + self.draw_rate

    @property
    def avg_placement_pct(self) -> Optional[float]:
        if not self.placement_entries:
            return None
        return self.placement_sum / self.placement_entries

    @property
    def main_commander_pct(self) -> Optional[float]:
        if self.main_commander is None:
            return None
        return safe_rate(self.main_commander_entries, self.entries) * 100

    def to_dict(self) -> Dict[str, Any]:
        """Counters and derived rates as a flat dict."""
        row = asdict(self)
        row.update({
            "games": self.games,
            "win_rate": self.win_rate,
            "draw_rate": self.draw_rate,
            "conv_rate": self.conversion_rate,
            "top4_rate": self.top4_rate,
            "champ_rate": self.champ_rate,
            "conv_vs_expected": self.conv_vs_expected,
            "top4_vs_expected": self.top4_vs_expected,
            "champ_vs_expected": self.champ_vs_expected,
            "five_swiss": self.five_swiss,
            "placement_pct": self.avg_placement_pct,
            "main_commander_pct": self.main_commander_pct,
        })
        return row


def _most_common(counts: Counter) -> Optional[str]:
    # Ties resolve alphabetically so the result is independent of input order
    if not counts:
        return None
    return min(counts.items(), key=lambda kv: (-kv[1], kv[0]))[0]


class _Accumulator:
    """Mutable counters for one identity, frozen into AggregateStats at the end."""

    def __init__(self, key: str):
        self.key = key
        self.entries = 0
        self.wins = 0
        self.losses = 0
        self.draws = 0
        self.conversions = 0
        self.top4s = 0
        self.championships = 0
        self.expected_conv = 0.0
        self.expected_top4 = 0.0
        self.expected_champ = 0.0
        self.placement_sum = 0.0
        self.placement_entries = 0
        self.pilots: Set[str] = set()
        self.names: Counter = Counter()
        self.commanders: Counter = Counter()

    def add(self, entry: EntrySchema, display_name: Optional[str] = None) -> None:
        self.entries += 1
        self.wins += entry.wins
        self.losses += entry.losses
        self.draws += entry.draws

        expected = expected_outcome(entry.total_players, entry.top_cut)
        self.expected_conv += expected.conversion
        self.expected_top4 += expected.top4
        self.expected_champ += expected.championship

        if entry.converted:
            self.conversions += 1
        if entry.made_top4:
            self.top4s += 1
        if entry.won_event:
            self.championships += 1

        placement = entry.placement_pct
        if placement is not None:
            self.placement_sum += placement
            self.placement_entries += 1

        self.pilots.add(entry.player_id)
        if display_name:
            self.names[display_name] += 1
        pair = entry.commander_pair
        if pair:
            self.commanders[pair] += 1

    def freeze(self) -> AggregateStats:
        main = _most_common(self.commanders)
        return AggregateStats(
            key=self.key,
            name=_most_common(self.names) or self.key,
            entries=self.entries,
            total_wins=self.wins,
            total_losses=self.losses,
            total_draws=self.draws,
            conversions=self.conversions,
            top4s=self.top4s,
            championships=self.championships,
            expected_conv=self.expected_conv,
            expected_top4=self.expected_top4,
            expected_champ=self.expected_champ,
            unique_pilots=len(self.pilots),
            placement_sum=self.placement_sum,
            placement_entries=self.placement_entries,
            main_commander=main,
            main_commander_entries=self.commanders[main] if main else 0,
        )


def aggregate(
    entries: Iterable[EntrySchema],
    key: KeyFunc,
    display_name: Optional[KeyFunc] = None,
) -> Dict[str, AggregateStats]:
    """Group entries by ``key(entry)`` and fold each group.

    Args:
        entries: Entries carrying their tournament's size and top cut.
        key: Maps an entry to its identity; falsy keys are skipped.
        display_name: Maps an entry to a display name; the most frequent
            one becomes ``AggregateStats.name`` (default: the key itself).

    Returns:
        {identity: AggregateStats}, ordered by identity.
    """
    accumulators: Dict[str, _Accumulator] = {}
    for entry in entries:
        if entry.games == 0:
            continue
        identity = key(entry)
        if not identity:
            continue
        acc = accumulators.get(identity)
        if acc is None:
            acc = accumulators[identity] = _Accumulator(identity)
        acc.add(entry, display_name(entry) if display_name else None)

    return {k: accumulators[k].freeze() for k in sorted(accumulators)}


def aggregate_by_player(entries: Iterable[EntrySchema]) -> Dict[str, AggregateStats]:
    return aggregate(entries, key=lambda e: e.player_id, display_name=lambda e: e.player_name)


def aggregate_by_commander(entries: Iterable[EntrySchema]) -> Dict[str, AggregateStats]:
    return aggregate(entries, key=lambda e: e.commander_pair)


def summarize(entries: Iterable[EntrySchema], label: str = "all") -> AggregateStats:
    """Fold every playable entry into one AggregateStats under ``label``."""
    stats = aggregate(entries, key=lambda e: label)
    return stats.get(label, AggregateStats(key=label, name=label))

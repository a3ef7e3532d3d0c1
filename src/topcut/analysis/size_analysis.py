"""Does performance at small events carry over to large ones?

Splits every player's entries into small (< LARGE_EVENT_SIZE players)
and large events, aggregates each side separately, and measures how well
small-event results track large-event results.

Sections:
    Paired correlation - Players with 3+ entries on both sides: Pearson
        correlation of win rate and of conversion rate
    High-performing newcomers - Over 30% win rate in 10-29 games; how
        their win rate holds up at large events
    Experienced players - 50+ games with 3+ entries on both sides
    Size brackets - Pooled win rate per tournament-size bracket

Usage:
    from topcut.analysis import analyze_sizes

    result = analyze_sizes(entries)
    result.print_summary()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from topcut.config import LARGE_EVENT_SIZE, SIZE_BRACKETS
from topcut.data.schemas import EntrySchema
from topcut.stats.aggregator import aggregate_by_player, summarize
from topcut.stats.estimators import pearson

logger = logging.getLogger(__name__)

MIN_ENTRIES_EACH_SIDE = 3
NEWCOMER_MIN_WIN_RATE = 0.30
NEWCOMER_GAMES = (10, 30)  # [min, max)
EXPERIENCED_MIN_GAMES = 50
MIN_EXPERIENCED_FOR_CORRELATION = 6


@dataclass(frozen=True)
class SizeBracketStats:
    label: str
    entries: int
    games: int
    win_rate: Optional[float]


@dataclass(frozen=True)
class CohortComparison:
    """Average small- vs large-event win rate for a group of players."""

    count: int
    avg_small_win_rate: Optional[float] = None
    avg_large_win_rate: Optional[float] = None
    correlation: Optional[float] = None

    @property
    def difference(self) -> Optional[float]:
        if self.avg_small_win_rate is None or self.avg_large_win_rate is None:
            return None
        return self.avg_large_win_rate - self.avg_small_win_rate


@dataclass
class SizeAnalysisResult:
    large_event_size: int
    n_entries: int
    paired: pd.DataFrame
    win_rate_correlation: float
    conv_rate_correlation: float
    newcomers: int
    newcomers_with_large: CohortComparison
    experienced: CohortComparison
    brackets: List[SizeBracketStats] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "large_event_size": self.large_event_size,
            "n_entries": self.n_entries,
            "n_paired": len(self.paired),
            "win_rate_correlation": self.win_rate_correlation,
            "conv_rate_correlation": self.conv_rate_correlation,
            "newcomers": self.newcomers,
            "newcomers_with_large": {
                "count": self.newcomers_with_large.count,
                "avg_small_win_rate": self.newcomers_with_large.avg_small_win_rate,
                "avg_large_win_rate": self.newcomers_with_large.avg_large_win_rate,
            },
            "experienced": {
                "count": self.experienced.count,
                "avg_small_win_rate": self.experienced.avg_small_win_rate,
                "avg_large_win_rate": self.experienced.avg_large_win_rate,
                "correlation": self.experienced.correlation,
            },
            "brackets": [
                {"label": b.label, "entries": b.entries, "games": b.games, "win_rate": b.win_rate}
                for b in self.brackets
            ],
        }

    def print_summary(self) -> None:
        """Print formatted analysis to console."""
        size = self.large_event_size
        print("\n" + "=" * 60)
        print("SMALL vs LARGE EVENT PERFORMANCE")
        print("=" * 60)
        print(f"Entries: {self.n_entries:,}")
        print(f"Players with {MIN_ENTRIES_EACH_SIDE}+ entries in both small (<{size}) "
              f"and large ({size}+) events: {len(self.paired)}")

        print("\n--- Correlation: small -> large ---")
        print(f"Win rate:        {self.win_rate_correlation:.3f}")
        print(f"Conversion rate: {self.conv_rate_correlation:.3f}")

        print("\n--- High-performing newcomers (>30% WR, 10-29 games) ---")
        print(f"Count: {self.newcomers}")
        cohort = self.newcomers_with_large
        print(f"With large-event experience: {cohort.count}")
        if cohort.difference is not None:
            print(f"  Avg WR small: {cohort.avg_small_win_rate:.1%}")
            print(f"  Avg WR large: {cohort.avg_large_win_rate:.1%}")
            print(f"  Difference:   {cohort.difference * 100:+.1f} pp")

        print(f"\n--- Experienced ({EXPERIENCED_MIN_GAMES}+ games) with both ---")
        print(f"Count: {self.experienced.count}")
        if self.experienced.correlation is not None:
            print(f"  Win rate correlation: {self.experienced.correlation:.3f}")
            print(f"  Avg WR small: {self.experienced.avg_small_win_rate:.1%}")
            print(f"  Avg WR large: {self.experienced.avg_large_win_rate:.1%}")

        print("\n--- Win rate by tournament size ---")
        for b in self.brackets:
            wr = f"{b.win_rate:.1%}" if b.win_rate is not None else "N/A"
            print(f"{b.label:>8}: {wr} WR ({b.entries:,} entries, {b.games:,} games)")
        print("=" * 60)


def _player_frame(entries: Sequence[EntrySchema], large_event_size: int) -> pd.DataFrame:
    """Per-player small and large counters side by side."""
    small = aggregate_by_player(e for e in entries if e.total_players < large_event_size)
    large = aggregate_by_player(e for e in entries if e.total_players >= large_event_size)

    rows = []
    for pid in sorted(set(small) | set(large)):
        sm, lg = small.get(pid), large.get(pid)
        rows.append({
            "player_id": pid,
            "small_entries": sm.entries if sm else 0,
            "small_wins": sm.total_wins if sm else 0,
            "small_games": sm.games if sm else 0,
            "small_win_rate": sm.win_rate if sm else 0.0,
            "small_conv_rate": sm.conversion_rate if sm else 0.0,
            "large_entries": lg.entries if lg else 0,
            "large_wins": lg.total_wins if lg else 0,
            "large_games": lg.games if lg else 0,
            "large_win_rate": lg.win_rate if lg else 0.0,
            "large_conv_rate": lg.conversion_rate if lg else 0.0,
        })

    columns = [
        "player_id",
        "small_entries", "small_wins", "small_games", "small_win_rate", "small_conv_rate",
        "large_entries", "large_wins", "large_games", "large_win_rate", "large_conv_rate",
    ]
    df = pd.DataFrame(rows, columns=columns)
    df["total_games"] = df["small_games"] + df["large_games"]
    total_wins = df["small_wins"] + df["large_wins"]
    df["total_win_rate"] = (total_wins / df["total_games"].where(df["total_games"] > 0)).fillna(0.0)
    return df


def size_brackets(entries: Sequence[EntrySchema], brackets=SIZE_BRACKETS) -> List[SizeBracketStats]:
    """Pooled win rate of all entries in each tournament-size bracket."""
    results = []
    for label, lo, hi in brackets:
        stats = summarize(
            e for e in entries
            if e.total_players >= lo and (hi is None or e.total_players <= hi)
        )
        results.append(SizeBracketStats(
            label=label,
            entries=stats.entries,
            games=stats.games,
            win_rate=stats.win_rate if stats.games else None,
        ))
    return results


def analyze_sizes(
    entries: Sequence[EntrySchema],
    large_event_size: int = LARGE_EVENT_SIZE,
) -> SizeAnalysisResult:
    """Run the full small-vs-large analysis over a set of entries."""
    entries = [e for e in entries if e.games > 0]
    players = _player_frame(entries, large_event_size)
    logger.info(f"Size analysis over {len(entries)} entries, {len(players)} players")

    both = (players["small_entries"] >= MIN_ENTRIES_EACH_SIDE) & (
        players["large_entries"] >= MIN_ENTRIES_EACH_SIDE
    )
    paired = players[both].reset_index(drop=True)

    lo, hi = NEWCOMER_GAMES
    newcomers = players[
        (players["total_win_rate"] > NEWCOMER_MIN_WIN_RATE)
        & (players["total_games"] >= lo)
        & (players["total_games"] < hi)
    ]
    with_large = newcomers[(newcomers["small_games"] > 0) & (newcomers["large_games"] > 0)]
    newcomer_cohort = CohortComparison(count=len(with_large))
    if len(with_large):
        newcomer_cohort = CohortComparison(
            count=newcomer_cohort.count,
            avg_small_win_rate=float(with_large["small_win_rate"].mean()),
            avg_large_win_rate=float(with_large["large_win_rate"].mean()),
        )

    experienced = paired[paired["total_games"] >= EXPERIENCED_MIN_GAMES]
    experienced_cohort = CohortComparison(count=len(experienced))
    if len(experienced) >= MIN_EXPERIENCED_FOR_CORRELATION:
        experienced_cohort = CohortComparison(
            count=len(experienced),
            avg_small_win_rate=float(experienced["small_win_rate"].mean()),
            avg_large_win_rate=float(experienced["large_win_rate"].mean()),
            correlation=pearson(experienced["small_win_rate"], experienced["large_win_rate"]),
        )

    return SizeAnalysisResult(
        large_event_size=large_event_size,
        n_entries=len(entries),
        paired=paired,
        win_rate_correlation=pearson(paired["small_win_rate"], paired["large_win_rate"]),
        conv_rate_correlation=pearson(paired["small_conv_rate"], paired["large_conv_rate"]),
        newcomers=len(newcomers),
        newcomers_with_large=newcomer_cohort,
        experienced=experienced_cohort,
        brackets=size_brackets(entries),
    )

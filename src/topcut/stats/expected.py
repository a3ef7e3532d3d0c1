"""Expected-outcome baseline for a uniformly random entrant.

For an entry in a tournament of N players with a top cut of C:

    conversion    C / N   (0 when there is no cut)
    top 4         4 / N   (0 when the cut is narrower than 4)
    championship  1 / N

N == 0 is treated as N == 1 so that no term is ever NaN, and no term
exceeds 1 even when the recorded cut is wider than the field. The terms
are summed per entry, since one identity's entries span tournaments of
different sizes and cuts.
"""

from __future__ import annotations

from typing import NamedTuple


class ExpectedOutcome(NamedTuple):
    """Probabilities that a random entrant converts, top-4s, or wins."""

    conversion: float
    top4: float
    championship: float


def players_denominator(total_players: int) -> int:
    """Field size guarded against 0."""
    return total_players or 1


def expected_conversion(total_players: int, top_cut: int) -> float:
    if top_cut <= 0:
        return 0.0
    return min(1.0, top_cut / players_denominator(total_players))


def expected_top4(total_players: int, top_cut: int) -> float:
    if top_cut < 4:
        return 0.0
    return min(1.0, 4 / players_denominator(total_players))


def expected_championship(total_players: int) -> float:
    return 1 / players_denominator(total_players)


def expected_outcome(total_players: int, top_cut: int) -> ExpectedOutcome:
    """All three baseline terms for one entry."""
    return ExpectedOutcome(
        conversion=expected_conversion(total_players, top_cut),
        top4=expected_top4(total_players, top_cut),
        championship=expected_championship(total_players),
    )


def vs_expected(actual: float, expected: float, entries: int) -> float:
    """(actual - expected) / entries, in percentage points; 0 with no entries."""
    if entries <= 0:
        return 0.0
    return (actual - expected) / entries * 100

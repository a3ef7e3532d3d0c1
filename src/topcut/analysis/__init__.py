"""Analysis module - one-off studies built on the statistics core."""

from topcut.analysis.size_analysis import (
    CohortComparison,
    SizeAnalysisResult,
    SizeBracketStats,
    analyze_sizes,
    size_brackets,
)

__all__ = [
    "CohortComparison",
    "SizeAnalysisResult",
    "SizeBracketStats",
    "analyze_sizes",
    "size_brackets",
]

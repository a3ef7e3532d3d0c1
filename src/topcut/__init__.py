"""
Topcut - Tournament statistics for competitive Commander

Win rates that hold up under small samples, results measured against
what a random entrant would expect, and a backtest that shows which
estimate actually predicts future performance.

Structure:
    data/      - SQLite access, row schemas, card-art client
    stats/     - Estimators, expected outcomes, aggregation, trends
    models/    - Chronological split and predictive backtest
    analysis/  - Small vs large event study

Usage:
    from topcut.data import DataReader
    from topcut.stats import aggregate_by_commander
    from topcut.models import BacktestHarness
"""

__all__ = ["__version__"]
__version__ = "0.1.0"

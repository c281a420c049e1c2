"""Engine modules for TaDa List integration.

Contains specialized computation engines:
- streak_engine: Daily progress reconciliation and streak bookkeeping
- statistics_engine: Read-only progress summaries and leaderboard
"""

# Use relative imports within package to avoid mypy module resolution issues
from .statistics_engine import StatisticsEngine
from .streak_engine import StreakEngine

__all__ = [
    "StatisticsEngine",
    "StreakEngine",
]

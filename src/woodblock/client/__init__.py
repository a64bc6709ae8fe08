"""Leaderboard service client and background score reporting."""

from .api import ApiError, LeaderboardClient
from .reporter import ScoreReporter

__all__ = ["ApiError", "LeaderboardClient", "ScoreReporter"]

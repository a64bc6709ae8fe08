"""Wood Block: a 10x10 block placement puzzle with a small leaderboard service."""

__version__ = "0.1.0"

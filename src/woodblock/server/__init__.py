"""Account and leaderboard HTTP service (FastAPI)."""

from .app import create_app
from .config import ServerConfig

__all__ = ["create_app", "ServerConfig"]

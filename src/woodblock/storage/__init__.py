"""Local persistence for Wood Block: game snapshot and small preferences."""

from .local_store import LocalStore
from .persistence import BlockSnapshot, Preferences, SessionSnapshot, SessionStore

__all__ = [
    "LocalStore",
    "BlockSnapshot",
    "Preferences",
    "SessionSnapshot",
    "SessionStore",
]

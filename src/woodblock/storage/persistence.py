from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from woodblock.game.shapes import Block, Difficulty, resolve_difficulty

from .local_store import LocalStore


logger = logging.getLogger(__name__)

STATE_KEY = "game_state"
HIGH_SCORE_KEY = "high_score"
DIFFICULTY_KEY = "difficulty"
SOUND_ENABLED_KEY = "sound_enabled"
TOKEN_KEY = "auth_token"
CURRENT_USER_KEY = "current_user"


def _check_binary_matrix(matrix: List[List[int]], what: str) -> None:
    if not matrix or not matrix[0]:
        raise ValueError(f"{what} must not be empty")
    width = len(matrix[0])
    for row in matrix:
        if len(row) != width:
            raise ValueError(f"{what} rows must all have the same length")
        if any(cell not in (0, 1) for cell in row):
            raise ValueError(f"{what} cells must be 0 or 1")


class BlockSnapshot(BaseModel, frozen=True):
    shape: List[List[int]]
    height: int
    width: int

    @model_validator(mode="after")
    def _check_shape(self) -> "BlockSnapshot":
        _check_binary_matrix(self.shape, "block shape")
        if not any(any(row) for row in self.shape):
            raise ValueError("block shape has no filled cells")
        if self.height != len(self.shape) or self.width != len(self.shape[0]):
            raise ValueError("block dimensions do not match its shape")
        return self

    @classmethod
    def from_block(cls, block: Block) -> "BlockSnapshot":
        return cls(shape=block.to_list(), height=block.height, width=block.width)

    def to_block(self) -> Block:
        return Block.from_shape(self.shape)


class SessionSnapshot(BaseModel, frozen=True):
    """Persisted game state. Undo history is never part of it."""

    grid: List[List[int]]
    score: int = Field(ge=0)
    level: int = Field(ge=1)
    difficulty: str = Difficulty.NORMAL.value
    active: BlockSnapshot
    pending: BlockSnapshot

    @field_validator("grid")
    @classmethod
    def _check_grid(cls, value: List[List[int]]) -> List[List[int]]:
        _check_binary_matrix(value, "grid")
        return value

    @field_validator("difficulty")
    @classmethod
    def _known_difficulty(cls, value: str) -> str:
        return resolve_difficulty(value).value

    @property
    def dimensions(self) -> tuple[int, int]:
        return len(self.grid), len(self.grid[0])


class SessionStore:
    """Best-effort save/load of the session snapshot under a single key."""

    def __init__(self, store: LocalStore, rows: int = 10, cols: int = 10, key: str = STATE_KEY) -> None:
        self.store = store
        self.rows = rows
        self.cols = cols
        self.key = key

    def save(self, snapshot: SessionSnapshot) -> bool:
        try:
            self.store.set(self.key, snapshot.model_dump_json())
        except (OSError, ValueError) as exc:
            logger.warning("Could not save game state: %s", exc)
            return False
        return True

    def load(self) -> Optional[SessionSnapshot]:
        """Return the saved snapshot, or None when absent or unusable."""
        try:
            raw = self.store.get(self.key)
        except (OSError, ValueError) as exc:
            logger.warning("Could not read game state: %s", exc)
            return None
        if raw is None:
            return None
        try:
            snapshot = SessionSnapshot.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning("Discarding malformed game state: %d error(s)", exc.error_count())
            return None
        if snapshot.dimensions != (self.rows, self.cols):
            logger.warning("Discarding game state with grid %s, expected %s", snapshot.dimensions, (self.rows, self.cols))
            return None
        return snapshot

    def clear(self) -> None:
        try:
            self.store.remove(self.key)
        except OSError as exc:
            logger.warning("Could not clear game state: %s", exc)


class Preferences:
    """Small values kept next to the game state, each under its own key."""

    def __init__(self, store: LocalStore) -> None:
        self.store = store

    def _read(self, key: str, default: Any) -> Any:
        try:
            raw = self.store.get(key)
            if raw is None:
                return default
            return json.loads(raw)
        except (OSError, ValueError) as exc:
            logger.warning("Could not read %s: %s", key, exc)
            return default

    def _write(self, key: str, value: Any) -> bool:
        try:
            if value is None:
                self.store.remove(key)
            else:
                self.store.set(key, json.dumps(value))
        except (OSError, ValueError) as exc:
            logger.warning("Could not write %s: %s", key, exc)
            return False
        return True

    def high_score(self) -> int:
        value = self._read(HIGH_SCORE_KEY, 0)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return 0
        return max(0, int(value))

    def set_high_score(self, value: int) -> bool:
        return self._write(HIGH_SCORE_KEY, int(value))

    def difficulty(self) -> str:
        value = self._read(DIFFICULTY_KEY, Difficulty.NORMAL.value)
        return resolve_difficulty(value if isinstance(value, str) else None).value

    def set_difficulty(self, value: str) -> bool:
        return self._write(DIFFICULTY_KEY, resolve_difficulty(value).value)

    def sound_enabled(self) -> bool:
        value = self._read(SOUND_ENABLED_KEY, True)
        return value if isinstance(value, bool) else True

    def set_sound_enabled(self, enabled: bool) -> bool:
        return self._write(SOUND_ENABLED_KEY, bool(enabled))

    def token(self) -> Optional[str]:
        value = self._read(TOKEN_KEY, None)
        return value if isinstance(value, str) else None

    def set_token(self, token: Optional[str]) -> bool:
        return self._write(TOKEN_KEY, token)

    def current_user(self) -> Optional[Dict[str, Any]]:
        value = self._read(CURRENT_USER_KEY, None)
        return value if isinstance(value, dict) else None

    def set_current_user(self, user: Optional[Dict[str, Any]]) -> bool:
        return self._write(CURRENT_USER_KEY, user)

from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Callable, List, Optional

from .grid import ClearResult, Coordinate, Grid
from .reachability import is_dead_position
from .rules import ScoringRules
from .shapes import Block, Difficulty, draw_block, resolve_difficulty

if TYPE_CHECKING:
    from woodblock.storage.persistence import SessionSnapshot, SessionStore


logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    PLAYING = "playing"
    GAME_OVER = "game_over"


@dataclass
class GameConfig:
    rows: int = 10
    cols: int = 10
    random_seed: Optional[int] = None
    difficulty: str = Difficulty.NORMAL.value


@dataclass
class PlacementResult:
    placed: bool
    points: int = 0
    filled_cells: List[Coordinate] = field(default_factory=list)
    cleared: ClearResult = field(default_factory=ClearResult)
    game_over: bool = False


GameOverHook = Callable[[int], None]


class GameSession:
    """Owns the grid, the two live blocks, score, level and undo history."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        store: Optional["SessionStore"] = None,
        on_game_over: Optional[GameOverHook] = None,
        high_score: int = 0,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.store = store
        self.on_game_over = on_game_over
        self.rng = random.Random(self.config.random_seed)
        self.difficulty = resolve_difficulty(self.config.difficulty)
        self.grid = Grid(self.config.rows, self.config.cols)
        self.high_score = int(high_score)
        self.score = 0
        self.level = 1
        self.state = SessionState.PLAYING
        self.active: Optional[Block] = None
        self.pending: Optional[Block] = None
        self.undo_stack: List[Grid] = []
        self._lock = threading.RLock()
        self._new_game()

    # ---------- Helpers ----------
    def _new_game(self) -> None:
        self.grid = Grid(self.config.rows, self.config.cols)
        self.score = 0
        self.level = 1
        self.state = SessionState.PLAYING
        self.undo_stack = []
        self.active = draw_block(self.difficulty, self.rng)
        self.pending = draw_block(self.difficulty, self.rng)

    def _add_points(self, points: int) -> None:
        self.score += points
        self.level = self.rules.level_for_score(self.score)
        if self.score > self.high_score:
            self.high_score = self.score

    def _advance_blocks(self) -> None:
        self.active = self.pending
        self.pending = draw_block(self.difficulty, self.rng)

    def _persist(self) -> None:
        if self.store is not None:
            self.store.save(self.snapshot())

    @property
    def game_over(self) -> bool:
        return self.state is SessionState.GAME_OVER

    def has_moves(self) -> bool:
        return not is_dead_position(self.grid, self.active, self.pending)

    # ---------- Transitions ----------
    def place(self, row: int, col: int) -> PlacementResult:
        with self._lock:
            if self.state is not SessionState.PLAYING or self.active is None:
                return PlacementResult(placed=False)
            shape = self.active.shape
            if not self.grid.can_place(shape, row, col):
                return PlacementResult(placed=False)

            self.undo_stack.append(self.grid.copy())
            filled = self.grid.commit(shape, row, col)
            points = self.rules.base_placement_points
            cleared = self.grid.clear_completed_lines()
            points += self.rules.score_for_lines(cleared.lines)
            self._add_points(points)

            self._advance_blocks()

            # Reachability only after the clear and the advance
            if not self.has_moves():
                self.state = SessionState.GAME_OVER
                logger.info("Game over with score %d", self.score)
                if self.on_game_over is not None:
                    self.on_game_over(self.score)

            self._persist()
            return PlacementResult(
                placed=True,
                points=points,
                filled_cells=filled,
                cleared=cleared,
                game_over=self.game_over,
            )

    def rotate_active(self) -> bool:
        with self._lock:
            if self.state is not SessionState.PLAYING or self.active is None:
                return False
            self.active.rotate()
            self._persist()
            return True

    def undo(self) -> bool:
        """Restore the previous grid. Score, level and blocks are left as they are."""
        with self._lock:
            if not self.undo_stack:
                return False
            self.grid = self.undo_stack.pop()
            self._persist()
            return True

    def restart(self, difficulty: Optional[str | Difficulty] = None) -> None:
        with self._lock:
            if difficulty is not None:
                self.difficulty = resolve_difficulty(difficulty)
            self._new_game()
            self._persist()

    def preview(self, row: int, col: int) -> bool:
        """Read-only validity check for ghost previews."""
        if self.state is not SessionState.PLAYING or self.active is None:
            return False
        return self.grid.can_place(self.active.shape, row, col)

    def adopt_high_score(self, value: int) -> None:
        # The leaderboard service is authoritative
        with self._lock:
            self.high_score = int(value)

    # ---------- Snapshots ----------
    def snapshot(self) -> "SessionSnapshot":
        from woodblock.storage.persistence import BlockSnapshot, SessionSnapshot

        return SessionSnapshot(
            grid=self.grid.to_list(),
            score=self.score,
            level=self.level,
            difficulty=self.difficulty.value,
            active=BlockSnapshot.from_block(self.active),
            pending=BlockSnapshot.from_block(self.pending),
        )

    @classmethod
    def restore(
        cls,
        snapshot: "SessionSnapshot",
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        store: Optional["SessionStore"] = None,
        on_game_over: Optional[GameOverHook] = None,
        high_score: int = 0,
    ) -> "GameSession":
        """Rebuild a session from a validated snapshot.

        A saved dead position comes back as GAME_OVER; the score is not
        reported again.
        """
        config = replace(config or GameConfig(), difficulty=snapshot.difficulty)
        session = cls(config=config, rules=rules, store=store, on_game_over=on_game_over, high_score=high_score)
        session.grid = Grid.from_array(snapshot.grid)
        session.score = snapshot.score
        session.level = session.rules.level_for_score(snapshot.score)
        session.active = snapshot.active.to_block()
        session.pending = snapshot.pending.to_block()
        session.high_score = max(session.high_score, session.score)
        if not session.has_moves():
            session.state = SessionState.GAME_OVER
        return session

from __future__ import annotations

import logging
from concurrent.futures import Future
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from woodblock.client import ApiError, ScoreReporter
from woodblock.game import GameConfig, GameSession
from woodblock.game.input import BoardGeometry, Restart, SelectDifficulty, ToggleSound, dispatch
from woodblock.storage import LocalStore, Preferences, SessionStore


logger = logging.getLogger(__name__)


@dataclass
class GameApp:
    """A session wired to local storage and, optionally, score reporting."""

    session: GameSession
    preferences: Preferences
    reporter: Optional[ScoreReporter] = None
    sound_enabled: bool = True
    leaderboard: List[Dict[str, Any]] = field(default_factory=list)
    _saved_high_score: int = field(default=0, repr=False)
    _leaderboard_job: Optional[Future] = field(default=None, repr=False)

    def handle(self, event: object, geometry: Optional[BoardGeometry] = None):
        if self.reporter is not None and isinstance(event, (Restart, SelectDifficulty)):
            # A new game supersedes any report still in flight
            self.reporter.abandon()
        result = dispatch(self.session, event, geometry, self.preferences)
        if isinstance(event, ToggleSound) and result is not None:
            self.sound_enabled = result
        return result

    def refresh_leaderboard(self) -> bool:
        """Start loading the top scores unless a load is already running."""
        if self.reporter is None:
            return False
        if self._leaderboard_job is not None and not self._leaderboard_job.done():
            return False
        self._leaderboard_job = self.reporter.fetch_leaderboard()
        return True

    def _collect_leaderboard(self) -> None:
        job = self._leaderboard_job
        if job is None or not job.done():
            return
        self._leaderboard_job = None
        if job.cancelled():
            return
        try:
            self.leaderboard = list(job.result())
        except ApiError as exc:
            logger.warning("Leaderboard refresh failed: %s", exc.message)
        except Exception:
            logger.exception("Leaderboard refresh failed")

    def sync_high_score(self) -> int:
        """Apply finished score reports and save the high score when it moved.

        A successful report also reloads the leaderboard.
        """
        if self.reporter is not None:
            authoritative = self.reporter.poll()
            if authoritative is not None:
                self.session.adopt_high_score(authoritative)
                self.refresh_leaderboard()
            self._collect_leaderboard()
        if self.session.high_score != self._saved_high_score:
            if self.preferences.set_high_score(self.session.high_score):
                self._saved_high_score = self.session.high_score
        return self.session.high_score


def open_game(
    data_dir: str | Path,
    reporter: Optional[ScoreReporter] = None,
    config: Optional[GameConfig] = None,
) -> GameApp:
    """Load the saved session from `data_dir`, or start a fresh one."""
    store = LocalStore(data_dir)
    preferences = Preferences(store)
    config = config or GameConfig(difficulty=preferences.difficulty())
    session_store = SessionStore(store, rows=config.rows, cols=config.cols)
    on_game_over = reporter.report if reporter is not None else None
    high_score = preferences.high_score()

    snapshot = session_store.load()
    if snapshot is not None:
        session = GameSession.restore(
            snapshot, config=config, store=session_store, on_game_over=on_game_over, high_score=high_score
        )
        preferences.set_difficulty(session.difficulty.value)
        logger.info("Restored saved game (score %d)", session.score)
    else:
        session = GameSession(config=config, store=session_store, on_game_over=on_game_over, high_score=high_score)
        session_store.save(session.snapshot())
    return GameApp(
        session=session,
        preferences=preferences,
        reporter=reporter,
        sound_enabled=preferences.sound_enabled(),
        _saved_high_score=high_score,
    )

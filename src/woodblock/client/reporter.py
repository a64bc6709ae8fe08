from __future__ import annotations

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import List, Optional

from .api import ApiError, LeaderboardClient


logger = logging.getLogger(__name__)


class ScoreReporter:
    """Sends final scores in the background.

    `report` returns at once. Results are picked up on the caller's thread by
    `poll`, so nothing here ever touches a game session.
    """

    def __init__(self, client: LeaderboardClient, executor: Optional[Executor] = None) -> None:
        self.client = client
        self._owns_executor = executor is None
        self.executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="score-report")
        self._pending: List[Future] = []

    def report(self, score: int) -> Optional[Future]:
        if not self.client.is_authenticated:
            logger.info("Not logged in, score %d not reported", score)
            return None
        logger.info("Reporting final score %d", score)
        future = self.executor.submit(self.client.update_score, score)
        self._pending.append(future)
        return future

    def poll(self) -> Optional[int]:
        """Latest high score from finished reports, or None if none finished."""
        latest: Optional[int] = None
        still_running: List[Future] = []
        for future in self._pending:
            if not future.done():
                still_running.append(future)
                continue
            if future.cancelled():
                continue
            try:
                result = future.result()
            except ApiError as exc:
                logger.warning("Score report failed: %s", exc.message)
                continue
            except Exception:
                logger.exception("Score report failed")
                continue
            if result is not None:
                latest = result
        self._pending = still_running
        return latest

    def fetch_leaderboard(self) -> Future:
        """Load the top scores on the report worker; the caller collects the result."""
        return self.executor.submit(self.client.leaderboard)

    def abandon(self) -> None:
        """Drop reports still in flight; their results are ignored."""
        for future in self._pending:
            future.cancel()
        if self._pending:
            logger.debug("Abandoned %d score report(s)", len(self._pending))
        self._pending = []

    @property
    def busy(self) -> bool:
        return any(not f.done() for f in self._pending)

    def close(self) -> None:
        self.abandon()
        if self._owns_executor:
            self.executor.shutdown(wait=False)

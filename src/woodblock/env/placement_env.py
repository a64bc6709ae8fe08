from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from woodblock.game import Block, GameConfig, GameSession, rotate90, valid_moves


PREVIEW_SIZE = 5
MAX_TURNS = 4


def _rotated(block: Block, turns: int) -> np.ndarray:
    shape = block.shape
    for _ in range(turns % MAX_TURNS):
        shape = rotate90(shape)
    return shape


def _block_mask(block: Optional[Block]) -> np.ndarray:
    mask = np.zeros((PREVIEW_SIZE, PREVIEW_SIZE), dtype=np.int8)
    if block is not None:
        mask[: block.height, : block.width] = block.shape
    return mask


def compute_action_mask(session: GameSession) -> np.ndarray:
    """Boolean mask over (turns, row, col) of legal placements for the active block."""
    rows, cols = session.grid.rows, session.grid.cols
    mask = np.zeros((MAX_TURNS, rows, cols), dtype=np.bool_)
    if session.game_over or session.active is None:
        return mask
    for turns in range(MAX_TURNS):
        shape = _rotated(session.active, turns)
        h, w = shape.shape
        for r in range(rows - h + 1):
            for c in range(cols - w + 1):
                if session.grid.can_place(shape, r, c):
                    mask[turns, r, c] = True
    return mask


class WoodBlockEnv(gym.Env):
    """
    Placement environment over a GameSession.

    Action (turns, row, col): rotate the active block clockwise `turns` times,
    then place its top-left at (row, col). Rotation is only applied when the
    placement is legal; illegal actions leave the session untouched.
    Reward is the score gained.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        invalid_action_penalty: float = -1.0,
        max_episode_steps: int = 10000,
    ) -> None:
        super().__init__()
        self.config = config or GameConfig()
        self.session = GameSession(self.config)
        self.render_mode = render_mode
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.max_episode_steps = int(max_episode_steps)

        rows, cols = self.config.rows, self.config.cols
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=1, shape=(rows, cols), dtype=np.int8),
                "active": spaces.Box(low=0, high=1, shape=(PREVIEW_SIZE, PREVIEW_SIZE), dtype=np.int8),
                "pending": spaces.Box(low=0, high=1, shape=(PREVIEW_SIZE, PREVIEW_SIZE), dtype=np.int8),
            }
        )
        self.action_space = spaces.MultiDiscrete((MAX_TURNS, rows, cols))
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        return {
            "grid": self.session.grid.cells.astype(np.int8),
            "active": _block_mask(self.session.active),
            "pending": _block_mask(self.session.pending),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": compute_action_mask(self.session),
            "valid_actions": valid_moves(self.session.grid, self.session.active) if not self.session.game_over else [],
            "score": self.session.score,
            "level": self.session.level,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.session.rng.seed(seed)
        self.session.restart((options or {}).get("difficulty"))
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action):
        turns, row, col = map(int, action)
        self._steps += 1
        reward = self.invalid_action_penalty
        placed = False

        active = self.session.active
        if active is not None and not self.session.game_over:
            shape = _rotated(active, turns)
            if self.session.grid.can_place(shape, row, col):
                for _ in range(turns % MAX_TURNS):
                    self.session.rotate_active()
                result = self.session.place(row, col)
                placed = result.placed
                reward = float(result.points)

        terminated = self.session.game_over
        truncated = self._steps >= self.max_episode_steps
        info = self._get_info()
        info["placed"] = placed
        return self._get_obs(), reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        grid = self.session.grid.cells
        cell = 12
        h, w = grid.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                color = (196, 142, 84) if grid[y, x] else (60, 44, 30)
                img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
        return img

    def close(self) -> None:
        pass

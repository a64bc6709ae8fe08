from __future__ import annotations

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .placement_env import compute_action_mask


class FlattenDiscreteActionWrapper(gym.ActionWrapper):
    """Flattens MultiDiscrete (turns, row, col) -> Discrete(N).

    Also exposes `get_action_mask()` returning a 1D boolean mask of shape (N,).
    Order: turns, row, col (C-order flattening).
    """

    def __init__(self, env: gym.Env):
        super().__init__(env)
        assert isinstance(env.action_space, spaces.MultiDiscrete)
        self.turns, self.rows, self.cols = map(int, env.action_space.nvec)
        self.n = int(self.turns * self.rows * self.cols)
        self.action_space = spaces.Discrete(self.n)

    def _unflatten(self, idx: int) -> tuple[int, int, int]:
        col = idx % self.cols
        idx //= self.cols
        row = idx % self.rows
        turns = idx // self.rows
        return int(turns), int(row), int(col)

    def action(self, action: int):  # type: ignore[override]
        return np.array(self._unflatten(int(action)), dtype=np.int64)

    def get_action_mask(self) -> np.ndarray:
        return compute_action_mask(self.env.unwrapped.session).reshape(-1)

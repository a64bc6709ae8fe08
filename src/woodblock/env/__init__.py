"""Gymnasium environments for Wood Block."""

from __future__ import annotations

from gymnasium.envs.registration import register

from .placement_env import WoodBlockEnv, compute_action_mask
from .wrappers import FlattenDiscreteActionWrapper

register(
    id="WoodBlock-10x10-v0",
    entry_point="woodblock.env.placement_env:WoodBlockEnv",
)

__all__ = ["WoodBlockEnv", "FlattenDiscreteActionWrapper", "compute_action_mask"]

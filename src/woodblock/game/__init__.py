"""Game module for Wood Block.

Exports the core game engine and supporting classes:
- Grid: occupancy matrix, placement and row/column clearing
- Block, Difficulty, draw_block: shape catalog and block instances
- rotate90, unique_rotations: rotation engine
- has_any_valid_move: reachability / game-over predicate
- ScoringRules: scoring configuration and helpers
- GameSession: state machine tying it all together
"""

from .grid import ClearResult, Grid
from .rotation import rotate90, unique_rotations
from .shapes import CATALOG, Block, Difficulty, draw_block, resolve_difficulty, shapes_for
from .reachability import has_any_valid_move, is_dead_position, valid_moves, valid_origins
from .rules import ScoringRules
from .session import GameConfig, GameSession, PlacementResult, SessionState

__all__ = [
    "ClearResult",
    "Grid",
    "rotate90",
    "unique_rotations",
    "CATALOG",
    "Block",
    "Difficulty",
    "draw_block",
    "resolve_difficulty",
    "shapes_for",
    "has_any_valid_move",
    "is_dead_position",
    "valid_moves",
    "valid_origins",
    "ScoringRules",
    "GameConfig",
    "GameSession",
    "PlacementResult",
    "SessionState",
]

from __future__ import annotations

from typing import List, Optional, Tuple

from .grid import Coordinate, Grid
from .rotation import Shape, unique_rotations
from .shapes import Block


def valid_origins(grid: Grid, shape: Shape) -> List[Coordinate]:
    """All (row, col) origins where `shape` fits as-is."""
    h, w = shape.shape
    origins: List[Coordinate] = []
    for r in range(grid.rows - h + 1):
        for c in range(grid.cols - w + 1):
            if grid.can_place(shape, r, c):
                origins.append((r, c))
    return origins


def valid_moves(grid: Grid, block: Block) -> List[Tuple[int, int, int]]:
    """List of (quarter_turns, row, col) for every distinct orientation of `block`."""
    moves: List[Tuple[int, int, int]] = []
    for turns, shape in enumerate(unique_rotations(block.shape)):
        for r, c in valid_origins(grid, shape):
            moves.append((turns, r, c))
    return moves


def has_any_valid_move(grid: Grid, block: Optional[Block]) -> bool:
    if block is None:
        return False
    for shape in unique_rotations(block.shape):
        h, w = shape.shape
        for r in range(grid.rows - h + 1):
            for c in range(grid.cols - w + 1):
                if grid.can_place(shape, r, c):
                    return True
    return False


def is_dead_position(grid: Grid, active: Optional[Block], pending: Optional[Block]) -> bool:
    """True when neither live block fits anywhere in any rotation."""
    return not has_any_valid_move(grid, active) and not has_any_valid_move(grid, pending)

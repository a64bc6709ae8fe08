import numpy as np
import pytest

from woodblock.game import CATALOG, Block, Difficulty, Grid, has_any_valid_move, is_dead_position, valid_moves
from woodblock.game.shapes import DOT, LINE4_H, PLUS, SQUARE


def checkerboard() -> Grid:
    # Empty cells never touch orthogonally
    cells = np.array([[0 if (r + c) % 2 == 0 else 1 for c in range(10)] for r in range(10)], dtype=np.int8)
    return Grid.from_array(cells)


@pytest.mark.parametrize("shape", CATALOG[Difficulty.HARD])
def test_every_shape_fits_on_empty_board(shape):
    assert has_any_valid_move(Grid(), Block.from_shape(shape))


def test_none_block_has_no_move():
    assert not has_any_valid_move(Grid(), None)


def test_only_dot_fits_on_checkerboard():
    grid = checkerboard()
    assert has_any_valid_move(grid, Block.from_shape(DOT))
    assert not has_any_valid_move(grid, Block.from_shape(SQUARE))
    assert not has_any_valid_move(grid, Block.from_shape(PLUS))
    assert is_dead_position(grid, Block.from_shape(PLUS), Block.from_shape(SQUARE))
    assert not is_dead_position(grid, Block.from_shape(PLUS), Block.from_shape(DOT))


def test_rotation_makes_vertical_gap_reachable():
    grid = Grid.from_array(np.ones((10, 10), dtype=np.int8))
    grid.cells[2:6, 7] = 0
    block = Block.from_shape(LINE4_H)
    assert has_any_valid_move(grid, block)
    assert valid_moves(grid, block) == [(1, 2, 7)]

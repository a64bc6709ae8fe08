import random

import numpy as np

from woodblock.game import CATALOG, Block, Difficulty, draw_block, resolve_difficulty, shapes_for


def _keys(shapes):
    return {(s.shape, s.tobytes()) for s in shapes}


def test_tiers_are_nested():
    easy = _keys(CATALOG[Difficulty.EASY])
    normal = _keys(CATALOG[Difficulty.NORMAL])
    hard = _keys(CATALOG[Difficulty.HARD])
    assert easy <= normal <= hard
    assert len(easy) == 4 and len(normal) == 10 and len(hard) == 13


def test_unknown_tier_falls_back_to_normal():
    assert resolve_difficulty("impossible") is Difficulty.NORMAL
    assert resolve_difficulty(None) is Difficulty.NORMAL
    assert shapes_for("nope") == CATALOG[Difficulty.NORMAL]


def test_draw_block_returns_independent_copy():
    block = draw_block("easy", random.Random(3))
    assert _keys([block.shape]) <= _keys(CATALOG[Difficulty.EASY])
    assert block.shape.flags.writeable
    block.shape[0, 0] = 0
    # catalog constants are untouched
    assert all(s.any() for s in CATALOG[Difficulty.EASY])


def test_draw_block_covers_whole_tier():
    rng = random.Random(0)
    seen = _keys(draw_block("hard", rng).shape for _ in range(500))
    assert seen == _keys(CATALOG[Difficulty.HARD])


def test_block_rotate_updates_dimensions():
    block = Block.from_shape([[1, 1, 1]])
    block.rotate()
    assert (block.height, block.width) == (3, 1)
    assert np.array_equal(block.shape, [[1], [1], [1]])

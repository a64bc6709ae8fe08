from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from .rotation import Shape, rotate90


class Difficulty(str, Enum):
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"


def _const(rows: Sequence[Sequence[int]]) -> Shape:
    arr = np.array(rows, dtype=np.int8)
    arr.flags.writeable = False
    return arr


# Easy shapes: small and beginner friendly
DOT = _const([[1]])
DOMINO_H = _const([[1, 1]])
DOMINO_V = _const([[1], [1]])
SQUARE = _const([[1, 1], [1, 1]])

# Medium shapes
LINE3_H = _const([[1, 1, 1]])
LINE3_V = _const([[1], [1], [1]])
SMALL_L = _const([[1, 1], [1, 0]])
SMALL_L_MIRROR = _const([[1, 0], [1, 1]])
T_SHAPE = _const([[0, 1, 0], [1, 1, 1]])
ZIGZAG = _const([[1, 1, 0], [0, 1, 1]])

# Large shapes
LINE4_H = _const([[1, 1, 1, 1]])
LINE4_V = _const([[1], [1], [1], [1]])
PLUS = _const([[0, 1, 0], [1, 1, 1], [0, 1, 0]])

SHAPES_EASY: Tuple[Shape, ...] = (DOT, DOMINO_H, DOMINO_V, SQUARE)
SHAPES_NORMAL: Tuple[Shape, ...] = SHAPES_EASY + (
    LINE3_H,
    LINE3_V,
    SMALL_L,
    SMALL_L_MIRROR,
    T_SHAPE,
    ZIGZAG,
)
SHAPES_HARD: Tuple[Shape, ...] = SHAPES_NORMAL + (LINE4_H, LINE4_V, PLUS)

CATALOG: Dict[Difficulty, Tuple[Shape, ...]] = {
    Difficulty.EASY: SHAPES_EASY,
    Difficulty.NORMAL: SHAPES_NORMAL,
    Difficulty.HARD: SHAPES_HARD,
}


def resolve_difficulty(value: Optional[str | Difficulty]) -> Difficulty:
    """Map a tier name to a Difficulty; anything unknown falls back to normal."""
    if isinstance(value, Difficulty):
        return value
    try:
        return Difficulty(value)
    except ValueError:
        return Difficulty.NORMAL


def shapes_for(tier: Optional[str | Difficulty]) -> Tuple[Shape, ...]:
    return CATALOG[resolve_difficulty(tier)]


@dataclass
class Block:
    """A live block instance. Only rotation mutates it."""

    shape: Shape
    height: int
    width: int

    @classmethod
    def from_shape(cls, matrix) -> "Block":
        shape = np.array(matrix, dtype=np.int8)
        h, w = shape.shape
        return cls(shape=shape, height=int(h), width=int(w))

    def rotate(self) -> None:
        self.shape = rotate90(self.shape)
        self.height, self.width = (int(d) for d in self.shape.shape)

    def cell_count(self) -> int:
        return int(np.count_nonzero(self.shape))

    def copy(self) -> "Block":
        return Block(shape=self.shape.copy(), height=self.height, width=self.width)

    def to_list(self) -> list:
        return self.shape.tolist()


def draw_block(tier: Optional[str | Difficulty], rng: Optional[random.Random] = None) -> Block:
    """Pick a shape uniformly from the tier and return a fresh block."""
    rng = rng or random.Random()
    shape = rng.choice(shapes_for(tier))
    return Block.from_shape(shape)

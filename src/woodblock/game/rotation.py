from __future__ import annotations

from typing import List, Tuple

import numpy as np


Shape = np.ndarray


def rotate90(shape: Shape) -> Shape:
    """Rotate a shape 90 degrees clockwise: ``result[c, h-1-r] = shape[r, c]``."""
    return np.rot90(shape, 1, axes=(1, 0)).copy()


def _canonical(shape: Shape) -> Tuple[Tuple[int, int], bytes]:
    return shape.shape, np.ascontiguousarray(shape, dtype=np.int8).tobytes()


def unique_rotations(shape: Shape) -> List[Shape]:
    """Distinct orientations of ``shape`` in generation order, input first."""
    rotations: List[Shape] = []
    seen = set()
    current = np.asarray(shape, dtype=np.int8)
    for _ in range(4):
        key = _canonical(current)
        if key not in seen:
            seen.add(key)
            rotations.append(current)
        current = rotate90(current)
    return rotations

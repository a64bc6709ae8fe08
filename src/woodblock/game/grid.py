from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np

from .rotation import Shape


Coordinate = Tuple[int, int]


@dataclass
class ClearResult:
    lines: int = 0
    rows: List[int] = field(default_factory=list)
    cols: List[int] = field(default_factory=list)
    cells: List[Coordinate] = field(default_factory=list)


class Grid:
    """Fixed-size occupancy matrix for block placement.

    Cells hold 0 (empty) or 1 (occupied). Coordinates are (row, col) with
    row 0 at the top.
    """

    def __init__(self, rows: int = 10, cols: int = 10) -> None:
        self.rows = int(rows)
        self.cols = int(cols)
        self.cells = np.zeros((self.rows, self.cols), dtype=np.int8)

    @classmethod
    def from_array(cls, matrix) -> "Grid":
        arr = np.array(matrix, dtype=np.int8)
        grid = cls(*arr.shape)
        grid.cells = arr
        return grid

    def reset(self) -> None:
        self.cells.fill(0)

    def is_inside(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def can_place(self, shape: Shape, origin_row: int, origin_col: int) -> bool:
        """Check that every set cell of `shape` lands in bounds on an empty cell."""
        h, w = shape.shape
        for rr in range(h):
            for cc in range(w):
                if not shape[rr, cc]:
                    continue
                r = origin_row + rr
                c = origin_col + cc
                if not self.is_inside(r, c):
                    return False
                if self.cells[r, c] != 0:
                    return False
        return True

    def commit(self, shape: Shape, origin_row: int, origin_col: int) -> List[Coordinate]:
        """
        Fill the cells covered by `shape` and return them.
        Assumes the placement was already validated with `can_place`.
        """
        filled: List[Coordinate] = []
        h, w = shape.shape
        for rr in range(h):
            for cc in range(w):
                if shape[rr, cc]:
                    r = origin_row + rr
                    c = origin_col + cc
                    self.cells[r, c] = 1
                    filled.append((r, c))
        return filled

    def clear_completed_lines(self) -> ClearResult:
        """
        Clear complete rows and columns.

        Both sets are read from the same pre-clear state, so a full row and a
        full column crossing it are both cleared.
        """
        occupied = self.cells != 0
        full_rows = [int(r) for r in np.flatnonzero(np.all(occupied, axis=1))]
        full_cols = [int(c) for c in np.flatnonzero(np.all(occupied, axis=0))]
        if not full_rows and not full_cols:
            return ClearResult()

        mask = np.zeros_like(occupied)
        mask[full_rows, :] = True
        mask[:, full_cols] = True
        cleared = [(int(r), int(c)) for r, c in np.argwhere(mask & occupied)]
        self.cells[mask] = 0
        return ClearResult(
            lines=len(full_rows) + len(full_cols),
            rows=full_rows,
            cols=full_cols,
            cells=cleared,
        )

    def filled_ratio(self) -> float:
        return float(np.count_nonzero(self.cells)) / float(self.rows * self.cols)

    def copy(self) -> "Grid":
        new_grid = Grid(self.rows, self.cols)
        new_grid.cells = self.cells.copy()
        return new_grid

    def to_list(self) -> List[List[int]]:
        return self.cells.tolist()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self.cells.shape == other.cells.shape and bool(np.array_equal(self.cells, other.cells))

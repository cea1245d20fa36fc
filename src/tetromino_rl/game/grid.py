from __future__ import annotations

import numpy as np

from .shapes import Shape


BOARD_WIDTH = 10
BOARD_HEIGHT = 20

FREE = 0


class Board:
    """Fixed-size occupancy grid.

    The grid uses 0 for Free cells and the piece kind value (1..7) for
    Occupied cells, which doubles as the cell's color code. Row 0 is the top.
    """

    def __init__(self, width: int = BOARD_WIDTH, height: int = BOARD_HEIGHT) -> None:
        self.width = int(width)
        self.height = int(height)
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(FREE)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_occupied(self, x: int, y: int) -> bool:
        return self.grid[y, x] != FREE

    def can_fit(self, origin_x: int, origin_y: int, shape: Shape) -> bool:
        # Only set cells are checked, so a bounding box may hang off the board.
        for dy, dx in np.argwhere(shape):
            x = origin_x + int(dx)
            y = origin_y + int(dy)
            if not self.is_inside(x, y):
                return False
            if self.grid[y, x] != FREE:
                return False
        return True

    def commit(self, origin_x: int, origin_y: int, shape: Shape, color: int) -> None:
        """Write ``color`` into every set cell of ``shape`` placed at the origin."""
        if not self.can_fit(origin_x, origin_y, shape):
            raise ValueError(f"cannot commit shape at ({origin_x}, {origin_y}): placement does not fit")
        for dy, dx in np.argwhere(shape):
            self.grid[origin_y + int(dy), origin_x + int(dx)] = color

    def full_rows(self) -> np.ndarray:
        return np.where(np.all(self.grid != FREE, axis=1))[0]

    def clear_full_rows(self) -> int:
        full_rows = self.full_rows()
        if full_rows.size == 0:
            return 0
        num = int(full_rows.size)
        # Drop every full row at once and stack fresh Free rows on top, so
        # non-adjacent rows are each shifted exactly once.
        kept = np.delete(self.grid, full_rows, axis=0)
        new_rows = np.zeros((num, self.width), dtype=np.int8)
        self.grid = np.vstack((new_rows, kept))
        return num

    def row_is_empty(self, y: int) -> bool:
        return not np.any(self.grid[y] != FREE)

    def stack_height(self) -> int:
        """Rows from the floor up to the highest Occupied cell."""
        occupied_rows = np.flatnonzero((self.grid != FREE).any(axis=1))
        if occupied_rows.size == 0:
            return 0
        return self.height - int(occupied_rows[0])

    def count_holes(self) -> int:
        """Free cells with an Occupied cell somewhere above them in the same column."""
        filled = self.grid != FREE
        covered = np.logical_or.accumulate(filled, axis=0)
        return int(np.count_nonzero(covered & ~filled))

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()

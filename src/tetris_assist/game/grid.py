from __future__ import annotations

from typing import Iterable, List, Tuple

import numpy as np

from .pieces import NUM_COLORS


Coordinate = Tuple[int, int]


class GameGrid:
    """Fixed-size 2D board for falling pieces.

    The grid uses 0 for empty cells and 1..7 for locked color classes.
    Rows are indexed top (0) to bottom (height - 1). Cells above the top
    edge (negative rows) are never stored and always count as empty.
    """

    def __init__(self, width: int = 10, height: int = 20) -> None:
        self.width = int(width)
        self.height = int(height)
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(0)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_valid_position(self, cells: Iterable[Coordinate]) -> bool:
        for x, y in cells:
            if x < 0 or x >= self.width or y >= self.height:
                return False
            if y >= 0 and self.grid[y, x] != 0:
                return False
        return True

    def lock(self, cells: Iterable[Coordinate], value: int) -> None:
        """Write `value` into every in-grid cell; cells above the grid are skipped."""
        if not 1 <= int(value) <= NUM_COLORS:
            raise ValueError(f"color class must be in 1..{NUM_COLORS}, got {value}")
        for x, y in cells:
            if self.is_inside(x, y):
                self.grid[y, x] = value

    def is_row_full(self, row: int) -> bool:
        return bool(np.all(self.grid[row] != 0))

    def clear_full_lines(self) -> int:
        cleared = 0
        row = self.height - 1
        while row >= 0:
            if self.is_row_full(row):
                cleared += 1
                # Shift everything above down one; the same row index is re-checked.
                self.grid[1 : row + 1] = self.grid[0:row].copy()
                self.grid[0].fill(0)
            else:
                row -= 1
        return cleared

    def count_full_lines(self) -> int:
        return int(np.count_nonzero(np.all(self.grid != 0, axis=1)))

    def column_heights(self) -> List[int]:
        heights: List[int] = []
        for x in range(self.width):
            filled = np.flatnonzero(self.grid[:, x])
            heights.append(0 if filled.size == 0 else self.height - int(filled[0]))
        return heights

    def get_max_height(self) -> int:
        non_empty_rows = np.where(np.any(self.grid != 0, axis=1))[0]
        if non_empty_rows.size == 0:
            return 0
        return self.height - int(non_empty_rows[0])

    def count_holes(self) -> int:
        holes = 0
        for x in range(self.width):
            column = self.grid[:, x]
            seen_block = False
            for cell in column:
                if cell != 0:
                    seen_block = True
                elif seen_block:
                    holes += 1
        return holes

    def copy(self) -> "GameGrid":
        new_grid = GameGrid(self.width, self.height)
        new_grid.grid = self.grid.copy()
        return new_grid

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()

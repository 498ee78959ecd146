from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple

from .grid import GameGrid


LINE_WEIGHT = 100
HEIGHT_WEIGHT = 2
HOLE_WEIGHT = 5


@dataclass(frozen=True)
class PlacementEvaluation:
    lines_cleared: int
    total_height: int
    holes: int

    @property
    def score(self) -> int:
        return self.lines_cleared * LINE_WEIGHT - self.total_height * HEIGHT_WEIGHT - self.holes * HOLE_WEIGHT


def evaluate_board(grid: GameGrid) -> PlacementEvaluation:
    """Score a finished board snapshot. Full rows are counted but not removed."""
    return PlacementEvaluation(
        lines_cleared=grid.count_full_lines(),
        total_height=sum(grid.column_heights()),
        holes=grid.count_holes(),
    )


def evaluate_placement(grid: GameGrid, cells: Iterable[Tuple[int, int]], value: int = 1) -> PlacementEvaluation:
    temp_grid = grid.copy()
    temp_grid.lock(cells, value)
    return evaluate_board(temp_grid)

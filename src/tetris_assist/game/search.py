"""Best-drop search for the active piece.

Every rotation (0..3) and anchor column in ``[-margin, width + margin)`` is
hard-dropped from the spawn row against the current board and scored with
:func:`tetris_assist.game.rules.evaluate_placement`. The first candidate in
enumeration order wins ties. Nothing here mutates the board or the piece
passed in.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from .errors import InvalidPlacement
from .grid import GameGrid
from .pieces import Coordinate, Piece
from .rules import PlacementEvaluation, evaluate_placement


SEARCH_MARGIN = 5


@dataclass(frozen=True)
class Candidate:
    rotation: int
    column: int


@dataclass(frozen=True)
class Suggestion:
    candidate: Candidate
    evaluation: PlacementEvaluation
    cells: Tuple[Coordinate, ...]
    source: str = "local"

    @property
    def score(self) -> int:
        return self.evaluation.score


def iter_candidates(width: int, margin: int = SEARCH_MARGIN) -> Iterator[Candidate]:
    for rotation in range(4):
        for column in range(-margin, width + margin):
            yield Candidate(rotation, column)


def hard_drop(grid: GameGrid, piece: Piece) -> None:
    """Move `piece` down in place until one more row would be invalid."""
    while grid.is_valid_position(piece.cells_at(piece.x, piece.y + 1)):
        piece.y += 1


def simulate_drop(grid: GameGrid, piece: Piece, candidate: Candidate, spawn_row: int = 0) -> Piece:
    """Return a dropped copy of `piece` for `candidate`.

    Raises InvalidPlacement if the rotated piece does not fit at the spawn row.
    """
    sim = piece.clone()
    sim.rotate(candidate.rotation)
    sim.x = candidate.column
    sim.y = spawn_row
    if not grid.is_valid_position(sim.cells()):
        raise InvalidPlacement(f"{sim.kind.name} does not fit at rotation {candidate.rotation}, column {candidate.column}")
    hard_drop(grid, sim)
    return sim


def build_suggestion(grid: GameGrid, piece: Piece, candidate: Candidate, spawn_row: int = 0,
                     source: str = "local") -> Suggestion:
    dropped = simulate_drop(grid, piece, candidate, spawn_row)
    cells = dropped.cells()
    evaluation = evaluate_placement(grid, cells, dropped.color)
    visible = tuple((x, y) for x, y in cells if grid.is_inside(x, y))
    return Suggestion(candidate=candidate, evaluation=evaluation, cells=visible, source=source)


def best_drop(grid: GameGrid, piece: Piece, spawn_row: int = 0, margin: int = SEARCH_MARGIN) -> Optional[Suggestion]:
    """Return the best placement for `piece`, or None if no candidate fits."""
    best: Optional[Candidate] = None
    best_score = 0
    for candidate in iter_candidates(grid.width, margin):
        try:
            dropped = simulate_drop(grid, piece, candidate, spawn_row)
        except InvalidPlacement:
            continue
        score = evaluate_placement(grid, dropped.cells(), dropped.color).score
        if best is None or score > best_score:
            best = candidate
            best_score = score
    if best is None:
        return None
    return build_suggestion(grid, piece, best, spawn_row)

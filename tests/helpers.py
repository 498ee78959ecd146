from __future__ import annotations

from typing import Iterable, Tuple

from tetris_assist.game import GameConfig, GameGrid, Piece, TetrisGame, TetrominoType


def make_game(seed: int = 0, **overrides) -> TetrisGame:
    return TetrisGame(GameConfig(random_seed=seed, **overrides))


def place_active(game: TetrisGame, kind: TetrominoType, x: int, y: int, color: int = 3) -> Piece:
    """Replace the falling piece with `kind` anchored at (x, y)."""
    piece = game.spawner.create(kind, color)
    piece.x = x
    piece.y = y
    game.active = piece
    return piece


def fill(grid: GameGrid, cells: Iterable[Tuple[int, int]], value: int = 1) -> None:
    for x, y in cells:
        grid.grid[y, x] = value


def fill_row(grid: GameGrid, row: int, value: int = 1, skip: Iterable[int] = ()) -> None:
    skipped = set(skip)
    fill(grid, [(x, row) for x in range(grid.width) if x not in skipped], value)

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Optional, Tuple


Coordinate = Tuple[int, int]

NUM_COLORS = 7


class TetrominoType(IntEnum):
    I = 1
    J = 2
    L = 3
    O = 4
    S = 5
    T = 6
    Z = 7


Shape = Tuple[Coordinate, ...]


# (dx, dy) offsets relative to the anchor; rows grow downward.
# Rotation is about (0, 0), not about each shape's center.
BASE_SHAPES: Dict[TetrominoType, Shape] = {
    TetrominoType.I: ((0, 0), (0, 1), (0, 2), (0, 3)),
    TetrominoType.J: ((0, 0), (0, 1), (0, 2), (-1, 2)),
    TetrominoType.L: ((0, 0), (0, 1), (0, 2), (1, 2)),
    TetrominoType.O: ((0, 0), (1, 0), (0, 1), (1, 1)),
    TetrominoType.S: ((0, 0), (1, 0), (0, 1), (-1, 1)),
    TetrominoType.T: ((0, 0), (-1, 1), (0, 1), (1, 1)),
    TetrominoType.Z: ((0, 0), (-1, 0), (0, 1), (1, 1)),
}


def rotate_offsets(blocks: List[Coordinate]) -> None:
    """Rotate offsets 90 degrees clockwise about the origin, in place."""
    for i, (x, y) in enumerate(blocks):
        blocks[i] = (y, -x)


@dataclass
class Piece:
    kind: TetrominoType
    blocks: List[Coordinate]
    x: int = 0
    y: int = 0
    color: int = 1

    @classmethod
    def spawn(cls, kind: TetrominoType, x: int, y: int, color: int = 1) -> "Piece":
        return cls(kind=kind, blocks=list(BASE_SHAPES[kind]), x=x, y=y, color=color)

    def rotate(self, times: int = 1) -> None:
        for _ in range(times % 4):
            rotate_offsets(self.blocks)

    def clone(self) -> "Piece":
        return Piece(self.kind, list(self.blocks), self.x, self.y, self.color)

    def cells_at(self, origin_x: int, origin_y: int) -> List[Coordinate]:
        return [(origin_x + dx, origin_y + dy) for dx, dy in self.blocks]

    def cells(self) -> List[Coordinate]:
        return self.cells_at(self.x, self.y)


@dataclass
class PieceSpawner:
    """Creates pieces at the spawn anchor from an injected random source.

    Kind and color class are drawn independently and uniformly.
    """

    spawn_x: int
    spawn_y: int = 0
    rng: random.Random = field(default_factory=random.Random)

    def create(self, kind: Optional[TetrominoType] = None, color: Optional[int] = None) -> Piece:
        if kind is None:
            kind = self.rng.choice(list(TetrominoType))
        if color is None:
            color = self.rng.randint(1, NUM_COLORS)
        return Piece.spawn(kind, self.spawn_x, self.spawn_y, color)

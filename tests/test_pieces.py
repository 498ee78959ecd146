import random

import pytest

from tetris_assist.game import BASE_SHAPES, Piece, PieceSpawner, TetrominoType


@pytest.mark.parametrize("kind", list(TetrominoType))
def test_four_rotations_restore_offsets(kind):
    piece = Piece.spawn(kind, 4, 0)
    original = list(piece.blocks)
    for _ in range(4):
        piece.rotate()
    assert piece.blocks == original


def test_rotate_maps_x_y_to_y_minus_x():
    piece = Piece.spawn(TetrominoType.I, 4, 0)
    piece.rotate()
    assert piece.blocks == [(0, 0), (1, 0), (2, 0), (3, 0)]
    piece.rotate()
    assert piece.blocks == [(0, 0), (0, -1), (0, -2), (0, -3)]


def test_rotation_is_not_centered_on_the_shape():
    piece = Piece.spawn(TetrominoType.O, 0, 0)
    piece.rotate()
    assert sorted(piece.blocks) == [(0, -1), (0, 0), (1, -1), (1, 0)]


def test_rotate_does_not_touch_catalog():
    piece = Piece.spawn(TetrominoType.T, 4, 0)
    piece.rotate()
    assert BASE_SHAPES[TetrominoType.T] == ((0, 0), (-1, 1), (0, 1), (1, 1))


def test_clone_is_independent():
    piece = Piece.spawn(TetrominoType.L, 4, 0, color=2)
    copy = piece.clone()
    copy.rotate()
    copy.x += 1
    assert piece.blocks == list(BASE_SHAPES[TetrominoType.L])
    assert piece.x == 4


def test_cells_are_offset_by_anchor():
    piece = Piece.spawn(TetrominoType.J, 4, 2)
    assert piece.cells() == [(4, 2), (4, 3), (4, 4), (3, 4)]


def test_catalog_has_seven_four_cell_shapes():
    assert len(BASE_SHAPES) == 7
    for shape in BASE_SHAPES.values():
        assert len(shape) == 4
        assert len(set(shape)) == 4


def test_spawner_is_deterministic_for_a_seed():
    a = PieceSpawner(4, 0, random.Random(7))
    b = PieceSpawner(4, 0, random.Random(7))
    seq_a = [(p.kind, p.color) for p in (a.create() for _ in range(20))]
    seq_b = [(p.kind, p.color) for p in (b.create() for _ in range(20))]
    assert seq_a == seq_b


def test_spawner_places_pieces_at_anchor_with_valid_color():
    spawner = PieceSpawner(4, 0, random.Random(1))
    for _ in range(50):
        piece = spawner.create()
        assert (piece.x, piece.y) == (4, 0)
        assert 1 <= piece.color <= 7


def test_spawner_honours_explicit_kind_and_color():
    spawner = PieceSpawner(4, 0, random.Random(1))
    piece = spawner.create(TetrominoType.Z, 6)
    assert piece.kind is TetrominoType.Z
    assert piece.color == 6

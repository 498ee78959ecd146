import random

import numpy as np
import pytest

from tetris_assist.game import GameGrid, Piece, TetrominoType

from helpers import fill, fill_row


def _expected_valid(grid, cells):
    for x, y in cells:
        if x < 0 or x >= grid.width or y >= grid.height:
            return False
        if y >= 0 and grid.grid[y, x] != 0:
            return False
    return True


def test_grid_starts_empty_with_fixed_shape():
    grid = GameGrid()
    assert grid.grid.shape == (20, 10)
    assert not grid.grid.any()


def test_negative_rows_are_allowed():
    grid = GameGrid()
    assert grid.is_valid_position([(4, -3), (4, -2), (4, -1), (4, 0)])


def test_negative_rows_still_respect_horizontal_bounds():
    grid = GameGrid()
    assert not grid.is_valid_position([(-1, -2)])
    assert not grid.is_valid_position([(10, -1)])


def test_below_bottom_is_invalid():
    grid = GameGrid()
    assert not grid.is_valid_position([(0, 20)])
    assert grid.is_valid_position([(0, 19)])


def test_overlap_is_invalid():
    grid = GameGrid()
    fill(grid, [(3, 10)], 5)
    assert not grid.is_valid_position([(3, 10)])
    assert grid.is_valid_position([(3, 9)])


def test_validity_matches_reference_on_random_boards():
    rng = random.Random(1234)
    for _ in range(200):
        grid = GameGrid()
        grid.grid[:] = (np.array([[rng.random() < 0.3 for _ in range(10)] for _ in range(20)]) * 2).astype(np.int8)
        piece = Piece.spawn(rng.choice(list(TetrominoType)), rng.randint(-3, 12), rng.randint(-4, 21))
        piece.rotate(rng.randint(0, 3))
        cells = piece.cells()
        assert grid.is_valid_position(cells) == _expected_valid(grid, cells)


def test_lock_skips_cells_above_the_grid():
    grid = GameGrid()
    grid.lock([(0, -2), (0, -1), (0, 0), (0, 1)], 4)
    assert grid.grid[0, 0] == 4
    assert grid.grid[1, 0] == 4
    assert np.count_nonzero(grid.grid) == 2


def test_lock_rejects_values_outside_color_classes():
    grid = GameGrid()
    with pytest.raises(ValueError):
        grid.lock([(0, 0)], 0)
    with pytest.raises(ValueError):
        grid.lock([(0, 0)], 8)


def test_clear_two_bottom_rows_shifts_partial_rows_down():
    grid = GameGrid()
    for row in range(18):
        fill(grid, [(row % 10, row)], 1 + row % 7)
    fill_row(grid, 18, 2)
    fill_row(grid, 19, 3)
    before = grid.clone_state()

    assert grid.clear_full_lines() == 2
    assert not grid.grid[0:2].any()
    np.testing.assert_array_equal(grid.grid[2:20], before[0:18])


def test_clear_non_adjacent_full_rows():
    grid = GameGrid()
    fill_row(grid, 19)
    fill(grid, [(0, 18), (5, 18)], 6)
    fill_row(grid, 17)
    fill(grid, [(2, 16)], 7)

    assert grid.clear_full_lines() == 2
    assert grid.grid[19, 0] == 6 and grid.grid[19, 5] == 6
    assert grid.grid[18, 2] == 7
    assert np.count_nonzero(grid.grid) == 3


def test_clear_when_every_row_is_full():
    grid = GameGrid()
    grid.grid.fill(5)
    assert grid.clear_full_lines() == 20
    assert not grid.grid.any()


def test_clear_without_full_rows_is_noop():
    grid = GameGrid()
    fill_row(grid, 19, skip=[9])
    before = grid.clone_state()
    assert grid.clear_full_lines() == 0
    np.testing.assert_array_equal(grid.grid, before)


def test_column_heights_and_holes():
    grid = GameGrid()
    fill(grid, [(0, 10), (1, 19), (1, 18)])
    heights = grid.column_heights()
    assert heights[0] == 10
    assert heights[1] == 2
    assert sum(heights[2:]) == 0
    assert grid.count_holes() == 9
    assert grid.get_max_height() == 10


def test_copy_does_not_share_cells():
    grid = GameGrid()
    clone = grid.copy()
    clone.grid[0, 0] = 1
    assert grid.grid[0, 0] == 0

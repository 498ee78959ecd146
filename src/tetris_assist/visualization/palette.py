from __future__ import annotations

from typing import Tuple

from tetris_assist.game.core import SUGGESTION_VALUE


Color = Tuple[int, int, int]

EMPTY_COLOR: Color = (20, 20, 26)
SUGGESTION_COLOR: Color = (255, 255, 255)
UNKNOWN_COLOR: Color = (128, 128, 128)

# Color classes 1..7 as stored in the grid.
PALETTE = {
    1: (0, 255, 255),    # cyan
    2: (0, 0, 255),      # blue
    3: (255, 165, 0),    # orange
    4: (255, 255, 0),    # yellow
    5: (0, 128, 0),      # green
    6: (128, 0, 128),    # purple
    7: (255, 0, 0),      # red
}


def color_for_value(v: int) -> Color:
    """Color for a get_state() cell; negative values are the falling piece."""
    if v == 0:
        return EMPTY_COLOR
    if v == SUGGESTION_VALUE:
        return SUGGESTION_COLOR
    return PALETTE.get(abs(v), UNKNOWN_COLOR)

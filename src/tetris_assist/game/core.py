from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

import numpy as np

from .errors import EpisodeEnded
from .grid import GameGrid
from .pieces import Coordinate, Piece, PieceSpawner, TetrominoType
from .search import Suggestion, best_drop

if TYPE_CHECKING:
    from tetris_assist.assist.coordinator import AssistCoordinator


logger = logging.getLogger(__name__)

# Marker used in get_state() for suggested cells; locked cells are 1..7 and
# the falling piece is drawn as its negated color.
SUGGESTION_VALUE = 8


class Action(IntEnum):
    MOVE_LEFT = 0
    MOVE_RIGHT = 1
    SOFT_DROP = 2
    ROTATE = 3
    TOGGLE_PAUSE = 4
    TOGGLE_ASSIST = 5
    NONE = 6


class GameStatus(str, Enum):
    FALLING = "falling"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None
    spawn_row: int = 0
    fall_interval: float = 1.2
    auto_restart: bool = True
    restart_delay: float = 0.0

    @property
    def spawn_column(self) -> int:
        return self.width // 2 - 1


@dataclass(frozen=True)
class GameView:
    """Read-only snapshot handed to renderers."""

    board: np.ndarray
    active_cells: Tuple[Coordinate, ...]
    active_color: int
    next_kind: TetrominoType
    next_blocks: Tuple[Coordinate, ...]
    next_color: int
    score: int
    pieces_spawned: int
    status: GameStatus
    suggestion: Optional[Tuple[Coordinate, ...]]


class TetrisGame:
    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None,
        assist: Optional[AssistCoordinator] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rng = rng or random.Random(self.config.random_seed)
        self.spawner = PieceSpawner(self.config.spawn_column, self.config.spawn_row, self.rng)
        self.grid = GameGrid(self.config.width, self.config.height)
        if assist is None:
            # Imported here: the assist package depends on this one.
            from tetris_assist.assist.coordinator import AssistCoordinator

            assist = AssistCoordinator()
        self.assist = assist
        self.score = 0
        self.pieces_spawned = 0
        self.status = GameStatus.FALLING
        self.assist_enabled = False
        self.suggestion: Optional[Suggestion] = None
        self.last_episode: Optional[EpisodeEnded] = None
        self.active: Piece
        self.next_piece: Piece
        self._fall_clock = 0.0
        self._game_over_clock = 0.0
        self.reset()

    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.rng.seed(seed)
        self.assist.cancel()
        self.grid.reset()
        self.score = 0
        self.pieces_spawned = 0
        self.status = GameStatus.FALLING
        self.assist_enabled = False
        self.suggestion = None
        self._fall_clock = 0.0
        self._game_over_clock = 0.0
        self.active = self.spawner.create()
        self.next_piece = self.spawner.create()

    @property
    def game_over(self) -> bool:
        return self.status is GameStatus.GAME_OVER

    @property
    def paused(self) -> bool:
        return self.status is GameStatus.PAUSED

    @property
    def assist_pending(self) -> bool:
        return self.assist_enabled and self.assist.pending

    # Movement

    def _try_move(self, dx: int, dy: int) -> bool:
        new_x = self.active.x + dx
        new_y = self.active.y + dy
        if self.grid.is_valid_position(self.active.cells_at(new_x, new_y)):
            self.active.x = new_x
            self.active.y = new_y
            return True
        return False

    def move_left(self) -> bool:
        if self.status is not GameStatus.FALLING:
            return False
        return self._try_move(-1, 0)

    def move_right(self) -> bool:
        if self.status is not GameStatus.FALLING:
            return False
        return self._try_move(1, 0)

    def rotate(self) -> bool:
        if self.status is not GameStatus.FALLING:
            return False
        self.active.rotate()
        if self.grid.is_valid_position(self.active.cells()):
            return True
        # No wall kicks: three more turns restore the original orientation.
        self.active.rotate(3)
        return False

    def soft_drop(self) -> int:
        """Move down one row, locking if blocked. Returns lines cleared."""
        if self.status is not GameStatus.FALLING:
            return 0
        return self._drop_one_row()

    def _drop_one_row(self) -> int:
        if self._try_move(0, 1):
            return 0
        return self._lock_and_spawn()

    def _lock_and_spawn(self) -> int:
        self.grid.lock(self.active.cells(), self.active.color)
        lines = self.grid.clear_full_lines()
        if lines:
            self.score += lines
            logger.debug("cleared %d line(s), score %d", lines, self.score)
        self.spawn_next()
        return lines

    def spawn_next(self) -> None:
        """Promote the next piece to active and draw a new next piece."""
        self.active = self.next_piece
        self.next_piece = self.spawner.create()
        self.pieces_spawned += 1
        self._fall_clock = 0.0
        if not self.grid.is_valid_position(self.active.cells()):
            self._end_episode()

    def _end_episode(self) -> None:
        self.status = GameStatus.GAME_OVER
        self.last_episode = EpisodeEnded(final_score=self.score, pieces_spawned=self.pieces_spawned)
        self._game_over_clock = 0.0
        self.assist.cancel()
        self.assist_enabled = False
        self.suggestion = None
        logger.info("game over: %d line(s) cleared, %d piece(s) spawned", self.score, self.pieces_spawned)

    # Pause and assist

    def toggle_pause(self) -> GameStatus:
        if self.status is GameStatus.FALLING:
            self.status = GameStatus.PAUSED
        elif self.status is GameStatus.PAUSED:
            self.status = GameStatus.FALLING
            self.assist.cancel()
            self.assist_enabled = False
            self.suggestion = None
        return self.status

    def toggle_assist(self) -> bool:
        """Show or hide the best-drop suggestion. Only allowed while paused."""
        if self.status is not GameStatus.PAUSED:
            logger.debug("assist toggle ignored while %s", self.status.value)
            return False
        self.assist_enabled = not self.assist_enabled
        if self.assist_enabled:
            self._request_suggestion()
        else:
            self.assist.cancel()
            self.suggestion = None
        return True

    def _request_suggestion(self) -> None:
        if self.assist.has_remote:
            self.suggestion = None
            self.assist.submit(self.grid, self.active, self.config.spawn_row)
        else:
            self.suggestion = best_drop(self.grid, self.active, self.config.spawn_row)

    def poll_assist(self) -> bool:
        """Pick up a finished remote suggestion, if any."""
        done, suggestion = self.assist.poll()
        if done and self.assist_enabled:
            self.suggestion = suggestion
        return done

    # Clock

    def advance_if_due(self, elapsed: float) -> bool:
        """Advance the fall clock by `elapsed` seconds; returns True if the piece fell."""
        self.poll_assist()
        if self.status is GameStatus.GAME_OVER:
            self._game_over_clock += elapsed
            if self.config.auto_restart and self._game_over_clock >= self.config.restart_delay:
                self.reset()
            return False
        if self.status is GameStatus.PAUSED:
            return False
        self._fall_clock += elapsed
        if self._fall_clock < self.config.fall_interval:
            return False
        self._fall_clock = 0.0
        self._drop_one_row()
        return True

    # Commands

    def apply(self, action: Action) -> int:
        lines = 0
        if action == Action.MOVE_LEFT:
            self.move_left()
        elif action == Action.MOVE_RIGHT:
            self.move_right()
        elif action == Action.SOFT_DROP:
            lines = self.soft_drop()
        elif action == Action.ROTATE:
            self.rotate()
        elif action == Action.TOGGLE_PAUSE:
            self.toggle_pause()
        elif action == Action.TOGGLE_ASSIST:
            self.toggle_assist()
        return lines

    def step(self, action: Action) -> Tuple[np.ndarray, int, bool, Dict[str, Any]]:
        if self.game_over:
            return self.get_state(), 0, True, self._info()
        lines = self.apply(Action(action))
        return self.get_state(), lines, self.game_over, self._info()

    def _info(self) -> Dict[str, Any]:
        info: Dict[str, Any] = {
            "score": self.score,
            "pieces_spawned": self.pieces_spawned,
            "status": self.status.value,
        }
        if self.game_over:
            info["episode"] = self.last_episode
        return info

    # Output

    def suggestion_cells(self) -> Optional[Tuple[Coordinate, ...]]:
        if not self.assist_enabled or self.suggestion is None:
            return None
        return self.suggestion.cells

    def get_state(self) -> np.ndarray:
        state = self.grid.clone_state()
        for x, y in self.suggestion_cells() or ():
            state[y, x] = SUGGESTION_VALUE
        if not self.game_over:
            for x, y in self.active.cells():
                if self.grid.is_inside(x, y):
                    state[y, x] = -self.active.color
        return state

    def view(self) -> GameView:
        return GameView(
            board=self.grid.clone_state(),
            active_cells=tuple(self.active.cells()),
            active_color=self.active.color,
            next_kind=self.next_piece.kind,
            next_blocks=tuple(self.next_piece.blocks),
            next_color=self.next_piece.color,
            score=self.score,
            pieces_spawned=self.pieces_spawned,
            status=self.status,
            suggestion=self.suggestion_cells(),
        )

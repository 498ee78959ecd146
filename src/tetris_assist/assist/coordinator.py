from __future__ import annotations

import asyncio
import logging
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Optional, Tuple

from tetris_assist.game.errors import AssistUnavailable, InvalidPlacement
from tetris_assist.game.grid import GameGrid
from tetris_assist.game.pieces import Piece
from tetris_assist.game.search import Candidate, Suggestion, best_drop, build_suggestion

from .remote import RemoteChoice, RemoteSuggester


logger = logging.getLogger(__name__)


def resolve_choice(grid: GameGrid, piece: Piece, choice: RemoteChoice, spawn_row: int = 0) -> Suggestion:
    """Validate a remote choice the same way a local candidate is simulated."""
    candidate = Candidate(rotation=choice.rotation % 4, column=choice.column)
    try:
        return build_suggestion(grid, piece, candidate, spawn_row, source="remote")
    except InvalidPlacement as exc:
        raise AssistUnavailable(f"illegal remote placement: {exc}") from exc


class AssistCoordinator:
    """Runs the optional remote suggester off the game thread.

    The game polls for a finished result; a remote failure of any kind is
    replaced by the local best-drop search. Without a remote suggester the
    local search is used directly.
    """

    def __init__(self, remote: Optional[RemoteSuggester] = None, timeout: float = 5.0) -> None:
        self.remote = remote
        self.timeout = float(timeout)
        self._executor: Optional[ThreadPoolExecutor] = None
        self._future: Optional[Future] = None

    @property
    def has_remote(self) -> bool:
        return self.remote is not None

    @property
    def pending(self) -> bool:
        return self._future is not None

    async def suggest(self, grid: GameGrid, piece: Piece, spawn_row: int = 0) -> Optional[Suggestion]:
        if self.remote is not None:
            try:
                choice = await asyncio.wait_for(self.remote.suggest(grid, piece), self.timeout)
                return resolve_choice(grid, piece, choice, spawn_row)
            except asyncio.TimeoutError:
                logger.warning("remote assist timed out after %.1fs; using local search", self.timeout)
            except AssistUnavailable as exc:
                logger.warning("remote assist unavailable (%s); using local search", exc)
            except Exception:
                logger.exception("remote assist failed; using local search")
        return best_drop(grid, piece, spawn_row)

    def _run(self, grid: GameGrid, piece: Piece, spawn_row: int) -> Optional[Suggestion]:
        return asyncio.run(self.suggest(grid, piece, spawn_row))

    def submit(self, grid: GameGrid, piece: Piece, spawn_row: int = 0) -> None:
        """Start a suggestion request on snapshots of `grid` and `piece`."""
        self.cancel()
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="assist")
        self._future = self._executor.submit(self._run, grid.copy(), piece.clone(), spawn_row)

    def poll(self) -> Tuple[bool, Optional[Suggestion]]:
        """Return (done, suggestion) without blocking."""
        if self._future is None or not self._future.done():
            return False, None
        future, self._future = self._future, None
        return True, future.result()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the pending request finishes; poll() then delivers it."""
        if self._future is None:
            return False
        done, _ = wait([self._future], timeout)
        return bool(done)

    def cancel(self) -> None:
        # A request already running finishes in the background; its result is dropped.
        if self._future is not None:
            self._future.cancel()
            self._future = None

    def close(self) -> None:
        self.cancel()
        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None
        if self.remote is not None:
            self.remote.close()

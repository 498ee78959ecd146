from __future__ import annotations

from dataclasses import dataclass


class TetrisError(Exception):
    """Base class for engine errors."""


class InvalidPlacement(TetrisError):
    """A piece position violates the board bounds or overlaps locked cells."""


class AssistUnavailable(TetrisError):
    """The remote suggestion could not be obtained or was not a legal placement."""


@dataclass(frozen=True)
class EpisodeEnded:
    """Terminal record produced when a freshly spawned piece has no room."""

    final_score: int
    pieces_spawned: int

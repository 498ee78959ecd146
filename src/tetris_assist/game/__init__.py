"""Game module for tetris-assist.

Exports the core game engine and supporting classes:
- GameGrid: Board representation, collision and line clearing
- Piece: Tetromino instance with in-place rotation
- TetrominoType: Enum of available piece types
- evaluate_placement: Heuristic score for a resting piece
- best_drop: Search for the best placement of the active piece
- TetrisGame: Movement engine and game state machine
"""

from .errors import AssistUnavailable, EpisodeEnded, InvalidPlacement, TetrisError
from .grid import GameGrid
from .pieces import BASE_SHAPES, Piece, PieceSpawner, TetrominoType
from .rules import PlacementEvaluation, evaluate_board, evaluate_placement
from .search import Candidate, Suggestion, best_drop, simulate_drop
from .core import Action, GameConfig, GameStatus, GameView, TetrisGame

__all__ = [
    "AssistUnavailable",
    "EpisodeEnded",
    "InvalidPlacement",
    "TetrisError",
    "GameGrid",
    "BASE_SHAPES",
    "Piece",
    "PieceSpawner",
    "TetrominoType",
    "PlacementEvaluation",
    "evaluate_board",
    "evaluate_placement",
    "Candidate",
    "Suggestion",
    "best_drop",
    "simulate_drop",
    "Action",
    "GameConfig",
    "GameStatus",
    "GameView",
    "TetrisGame",
]

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from typing import List, Optional

import gymnasium as gym

import tetris_assist.env  # noqa: F401
from tetris_assist.game import Action, Piece, Suggestion, TetrisGame
from tetris_assist.logging_setup import setup_logging


logger = logging.getLogger(__name__)


@dataclass
class EpisodeStats:
    pieces: int
    lines: int
    steps: int
    game_over: bool


def ask_for_suggestion(env: gym.Env) -> Optional[Suggestion]:
    """Pause, toggle the assist on and off, and resume; returns what was shown."""
    game: TetrisGame = env.unwrapped.game
    env.step(Action.TOGGLE_PAUSE)
    env.step(Action.TOGGLE_ASSIST)
    suggestion = game.suggestion
    env.step(Action.TOGGLE_ASSIST)
    env.step(Action.TOGGLE_PAUSE)
    return suggestion


def plan_actions(game: TetrisGame, suggestion: Suggestion) -> List[Action]:
    actions = [Action.ROTATE] * suggestion.candidate.rotation
    dx = suggestion.candidate.column - game.active.x
    actions += [Action.MOVE_RIGHT if dx > 0 else Action.MOVE_LEFT] * abs(dx)
    return actions


def steer(env: gym.Env, suggestion: Suggestion) -> bool:
    """Play the planned moves; False when walls or blocks stopped the piece short."""
    game: TetrisGame = env.unwrapped.game
    for action in plan_actions(game, suggestion):
        env.step(action)
    planned = Piece.spawn(game.active.kind, suggestion.candidate.column, game.active.y)
    planned.rotate(suggestion.candidate.rotation)
    if game.active.blocks == planned.blocks and game.active.x == planned.x:
        return True
    logger.debug(
        "%s stopped at column=%d, planned rotation=%d column=%d",
        game.active.kind.name,
        game.active.x,
        suggestion.candidate.rotation,
        suggestion.candidate.column,
    )
    return False


def run_episode(env: gym.Env, max_pieces: int = 500, seed: Optional[int] = None) -> EpisodeStats:
    env.reset(seed=seed)
    game: TetrisGame = env.unwrapped.game
    lines = 0
    steps = 0
    terminated = truncated = False
    while not (terminated or truncated) and game.pieces_spawned < max_pieces:
        suggestion = ask_for_suggestion(env)
        steps += 4
        if suggestion is None:
            logger.debug("no legal placement for %s; dropping in place", game.active.kind.name)
        else:
            steps += len(plan_actions(game, suggestion))
            steer(env, suggestion)
        spawned = game.pieces_spawned
        # Anything that falls further than the board height has locked.
        for _ in range(game.config.height + 1):
            _, reward, terminated, truncated, _ = env.step(Action.SOFT_DROP)
            lines += int(reward)
            steps += 1
            if terminated or truncated or game.pieces_spawned != spawned:
                break
    return EpisodeStats(pieces=game.pieces_spawned, lines=lines, steps=steps, game_over=terminated)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play episodes by following the best-drop suggestion")
    p.add_argument("--episodes", type=int, default=5)
    p.add_argument("--max_pieces", type=int, default=500)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--verbose", action="store_true")
    return p


def main() -> None:
    args = build_parser().parse_args()
    setup_logging(args.verbose)
    env = gym.make("TetrisAssist-10x20-v0")
    try:
        total_lines = 0
        for ep in range(args.episodes):
            seed = None if args.seed is None else args.seed + ep
            stats = run_episode(env, max_pieces=args.max_pieces, seed=seed)
            total_lines += stats.lines
            print(f"episode {ep + 1}: pieces={stats.pieces} lines={stats.lines} game_over={stats.game_over}")
        print(f"Heuristic agent mean lines: {total_lines / max(1, args.episodes):.2f}")
    finally:
        env.close()


if __name__ == "__main__":  # pragma: no cover
    main()

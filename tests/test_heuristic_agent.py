import logging

import gymnasium as gym

import tetris_assist.env  # noqa: F401
from tetris_assist.game import Action, Candidate, GameGrid, Suggestion, TetrominoType
from tetris_assist.game.rules import evaluate_board
from tetris_assist.rl.heuristic_agent import ask_for_suggestion, plan_actions, run_episode, steer

from helpers import fill, place_active


def test_plan_rotates_then_shifts():
    env = gym.make("TetrisAssist-10x20-v0")
    env.reset(seed=0)
    game = env.unwrapped.game
    suggestion = Suggestion(Candidate(rotation=2, column=1), evaluate_board(GameGrid()), ())
    actions = plan_actions(game, suggestion)
    assert actions == [Action.ROTATE, Action.ROTATE] + [Action.MOVE_LEFT] * 3
    env.close()


def test_following_suggestion_lands_on_suggested_cells():
    env = gym.make("TetrisAssist-10x20-v0")
    env.reset(seed=4)
    game = env.unwrapped.game
    suggestion = ask_for_suggestion(env)
    assert suggestion is not None
    assert not game.paused and not game.assist_enabled

    for action in plan_actions(game, suggestion):
        env.step(action)
    spawned = game.pieces_spawned
    while game.pieces_spawned == spawned:
        env.step(Action.SOFT_DROP)

    for x, y in suggestion.cells:
        assert game.grid.grid[y, x] != 0
    env.close()


def test_steer_reaches_planned_column():
    env = gym.make("TetrisAssist-10x20-v0")
    env.reset(seed=0)
    game = env.unwrapped.game
    place_active(game, TetrominoType.O, 4, 0)
    suggestion = Suggestion(Candidate(rotation=0, column=7), evaluate_board(GameGrid()), ())
    assert steer(env, suggestion)
    assert game.active.x == 7
    env.close()


def test_steer_logs_when_blocked_short_of_plan(caplog):
    env = gym.make("TetrisAssist-10x20-v0")
    env.reset(seed=0)
    game = env.unwrapped.game
    place_active(game, TetrominoType.O, 4, 0)
    fill(game.grid, [(1, y) for y in range(game.config.height)])
    suggestion = Suggestion(Candidate(rotation=0, column=0), evaluate_board(GameGrid()), ())
    with caplog.at_level(logging.DEBUG, logger="tetris_assist.rl.heuristic_agent"):
        assert not steer(env, suggestion)
    assert game.active.x == 2
    assert "planned rotation=0 column=0" in caplog.text
    env.close()


def test_run_episode_reports_progress():
    env = gym.make("TetrisAssist-10x20-v0")
    stats = run_episode(env, max_pieces=20, seed=1)
    assert stats.pieces == 20 or stats.game_over
    assert stats.lines >= 0
    assert stats.steps > 0
    env.close()

from __future__ import annotations

import dataclasses
from typing import Any, Dict, Optional, Tuple

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from tetris_assist.game import Action, GameConfig, TetrisGame, TetrominoType
from tetris_assist.game.core import SUGGESTION_VALUE
from tetris_assist.game.pieces import NUM_COLORS
from tetris_assist.visualization.palette import color_for_value


class TetrisEnv(gym.Env):
    """Single-player environment driving the engine one command per step.

    Actions are the engine commands (see ``Action``). The reward is the number
    of lines cleared by the step. With ``seconds_per_step > 0`` the fall clock
    is advanced after each command, so pieces also fall on their own.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 seconds_per_step: float = 0.0, max_episode_steps: int = 10000) -> None:
        super().__init__()
        # Episodes end on game over; the env owns the reset.
        config = dataclasses.replace(config or GameConfig(), auto_restart=False)
        self.game = TetrisGame(config)
        self.render_mode = render_mode
        self.seconds_per_step = float(seconds_per_step)
        self.max_episode_steps = int(max_episode_steps)

        h, w = self.game.config.height, self.game.config.width
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=-NUM_COLORS, high=SUGGESTION_VALUE, shape=(h, w), dtype=np.int8),
                "next_piece": spaces.Discrete(len(TetrominoType) + 1),
                "paused": spaces.Discrete(2),
            }
        )
        self.action_space = spaces.Discrete(len(Action))

        self._last_obs: Optional[Dict[str, Any]] = None
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        return {
            "board": self.game.get_state().astype(np.int8),
            "next_piece": int(self.game.next_piece.kind),
            "paused": int(self.game.paused),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.game.score,
            "pieces_spawned": self.game.pieces_spawned,
            "status": self.game.status.value,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.reset(seed)
        self._steps = 0
        obs = self._get_obs()
        self._last_obs = obs
        return obs, self._get_info()

    def step(self, action: int):
        _, lines, _, _ = self.game.step(Action(int(action)))
        if self.seconds_per_step > 0 and not self.game.game_over:
            score_before = self.game.score
            self.game.advance_if_due(self.seconds_per_step)
            lines += self.game.score - score_before
        self._steps += 1

        terminated = bool(self.game.game_over)
        truncated = self._steps >= self.max_episode_steps and not terminated

        obs = self._get_obs()
        info = self._get_info()
        if terminated:
            info["episode_ended"] = self.game.last_episode
        self._last_obs = obs
        return obs, float(lines), terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            board = self._last_obs["board"] if self._last_obs is not None else self.game.get_state()
            cell = 12
            h, w = board.shape
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            for y in range(h):
                for x in range(w):
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color_for_value(int(board[y, x]))
            return img
        return None

    def close(self) -> None:
        self.game.assist.close()

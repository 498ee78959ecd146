"""Gymnasium environments for tetris-assist."""

from __future__ import annotations

from gymnasium.envs.registration import register

register(
    id="TetrisAssist-10x20-v0",
    entry_point="tetris_assist.env.tetris_env:TetrisEnv",
)

__all__ = ["TetrisAssist-10x20-v0"]

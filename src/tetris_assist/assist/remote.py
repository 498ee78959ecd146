"""Chat-completion backed placement suggestions.

The remote model is asked for ``{"x": <column>, "rotation": <0..3>}``. Its
answer is untrusted: every failure is reported as AssistUnavailable so the
caller can fall back to the local search.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import urllib.request
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from tetris_assist.game.errors import AssistUnavailable
from tetris_assist.game.grid import GameGrid
from tetris_assist.game.pieces import Piece


logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://api.deepseek.com/chat/completions"
DEFAULT_MODEL = "deepseek-chat"
API_KEY_ENV = "DEEPSEEK_API_KEY"


@dataclass
class RemoteConfig:
    endpoint: str = DEFAULT_ENDPOINT
    model: str = DEFAULT_MODEL
    api_key: Optional[str] = None
    timeout: float = 10.0

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RemoteConfig":
        env = os.environ if environ is None else environ
        config = cls(
            endpoint=env.get("TETRIS_ASSIST_ENDPOINT", DEFAULT_ENDPOINT),
            model=env.get("TETRIS_ASSIST_MODEL", DEFAULT_MODEL),
            api_key=env.get(API_KEY_ENV) or None,
            timeout=float(env.get("TETRIS_ASSIST_TIMEOUT", 10.0)),
        )
        if not config.enabled:
            logger.warning("%s is not set; remote assist disabled, using local search only", API_KEY_ENV)
        return config


@dataclass(frozen=True)
class RemoteChoice:
    column: int
    rotation: int


class RemoteSuggester(ABC):
    """Interface for asynchronous placement suggesters."""

    @abstractmethod
    async def suggest(self, grid: GameGrid, piece: Piece) -> RemoteChoice:
        ...

    def close(self) -> None:
        pass


def describe_board(grid: GameGrid) -> str:
    return "\n".join(" ".join(str(int(v)) for v in row) for row in grid.grid)


def build_prompt(grid: GameGrid, piece: Piece) -> str:
    blocks = " ".join(f"({dx}, {dy})" for dx, dy in piece.blocks)
    return (
        "You are a Tetris placement assistant. Given the board and the falling piece, "
        "choose the best landing spot.\n\n"
        "Board (0 = empty, non-zero = occupied, top row first):\n"
        f"{describe_board(grid)}\n\n"
        f"Piece offsets: {blocks}\n"
        f"Piece position: X={piece.x}, Y={piece.y}\n\n"
        "Rotating maps each offset (x, y) to (y, -x). "
        'Reply with JSON holding the anchor column and rotation count, e.g. {"x": 3, "rotation": 2}.'
    )


def parse_choice(content: str) -> RemoteChoice:
    start = content.find("{")
    end = content.rfind("}")
    if start < 0 or end <= start:
        raise AssistUnavailable("no JSON object in remote reply")
    try:
        data = json.loads(content[start : end + 1])
        return RemoteChoice(column=int(data["x"]), rotation=int(data["rotation"]))
    except (ValueError, KeyError, TypeError) as exc:
        raise AssistUnavailable(f"malformed remote reply: {exc}") from exc


def parse_response(raw: bytes) -> RemoteChoice:
    try:
        payload: Any = json.loads(raw.decode("utf-8"))
        content = payload["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        raise AssistUnavailable(f"unexpected response payload: {exc}") from exc
    if not isinstance(content, str):
        raise AssistUnavailable("response content is not text")
    return parse_choice(content)


class ChatCompletionSuggester(RemoteSuggester):
    def __init__(self, config: RemoteConfig, opener: Callable[..., Any] = urllib.request.urlopen) -> None:
        self.config = config
        self._opener = opener
        self._http_pool: Optional[ThreadPoolExecutor] = None

    def build_request(self, prompt: str) -> urllib.request.Request:
        body = {
            "model": self.config.model,
            "messages": [{"role": "user", "content": prompt}],
            "stream": False,
        }
        return urllib.request.Request(
            self.config.endpoint,
            data=json.dumps(body).encode("utf-8"),
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.config.api_key}",
            },
            method="POST",
        )

    def _post(self, request: urllib.request.Request) -> bytes:
        with self._opener(request, timeout=self.config.timeout) as response:
            return response.read()

    async def suggest(self, grid: GameGrid, piece: Piece) -> RemoteChoice:
        if not self.config.enabled:
            raise AssistUnavailable("no API key configured")
        request = self.build_request(build_prompt(grid, piece))
        if self._http_pool is None:
            self._http_pool = ThreadPoolExecutor(max_workers=2, thread_name_prefix="assist-http")
        # Not the loop's default executor: asyncio.run() joins that one on exit,
        # which would hold a timed-out caller until the POST returns.
        loop = asyncio.get_running_loop()
        try:
            raw = await loop.run_in_executor(self._http_pool, self._post, request)
        except OSError as exc:
            raise AssistUnavailable(f"request to {self.config.endpoint} failed: {exc}") from exc
        choice = parse_response(raw)
        logger.debug("remote suggested column=%d rotation=%d", choice.column, choice.rotation)
        return choice

    def close(self) -> None:
        if self._http_pool is not None:
            self._http_pool.shutdown(wait=False)
            self._http_pool = None

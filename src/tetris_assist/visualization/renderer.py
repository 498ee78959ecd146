from __future__ import annotations

from typing import Iterable, Tuple

import numpy as np
import pygame

from tetris_assist.game import GameStatus, GameView

from .palette import PALETTE, SUGGESTION_COLOR, UNKNOWN_COLOR, color_for_value


class Renderer:
    def __init__(self, cell_size: int = 30, margin: int = 20, panel_cells: int = 5) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.panel_cells = panel_cells
        self._font = None

    def window_size(self, width: int, height: int) -> Tuple[int, int]:
        board_w = width * self.cell_size
        board_h = height * self.cell_size
        panel_w = self.panel_cells * self.cell_size
        return self.margin * 3 + board_w + panel_w, self.margin * 2 + board_h

    def _grid_surface(self, state: np.ndarray) -> pygame.Surface:
        h, w = state.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill((30, 30, 36))
        for y in range(h):
            for x in range(w):
                rect = pygame.Rect(x * self.cell_size, y * self.cell_size, self.cell_size - 1, self.cell_size - 1)
                pygame.draw.rect(surf, color_for_value(int(state[y, x])), rect)
        return surf

    def _draw_cells(self, screen: pygame.Surface, cells: Iterable[Tuple[int, int]], color, origin: Tuple[int, int]) -> None:
        ox, oy = origin
        for x, y in cells:
            rect = pygame.Rect(ox + x * self.cell_size, oy + y * self.cell_size, self.cell_size - 1, self.cell_size - 1)
            pygame.draw.rect(screen, color, rect)

    def _text(self, screen: pygame.Surface, text: str, pos: Tuple[int, int]) -> None:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 28)
        screen.blit(self._font.render(text, True, (230, 230, 230)), pos)

    def draw(self, screen: pygame.Surface, view: GameView) -> None:
        screen.fill((10, 10, 14))
        state = view.board.copy()
        if view.status is not GameStatus.GAME_OVER:
            for x, y in view.active_cells:
                if 0 <= y < state.shape[0] and 0 <= x < state.shape[1]:
                    state[y, x] = -view.active_color
        screen.blit(self._grid_surface(state), (self.margin, self.margin))
        if view.suggestion:
            self._draw_cells(screen, view.suggestion, SUGGESTION_COLOR, (self.margin, self.margin))

        panel_x = self.margin * 2 + state.shape[1] * self.cell_size
        # +1 keeps shapes with negative offsets inside the preview box.
        preview = [(dx + 1, dy + 1) for dx, dy in view.next_blocks]
        self._draw_cells(screen, preview, PALETTE.get(view.next_color, UNKNOWN_COLOR), (panel_x, self.margin))

        text_y = self.margin + self.panel_cells * self.cell_size + 10
        self._text(screen, f"Lines: {view.score}", (panel_x, text_y))
        self._text(screen, f"Pieces: {view.pieces_spawned}", (panel_x, text_y + 30))
        if view.status is GameStatus.PAUSED:
            self._text(screen, "PAUSE", (panel_x, text_y + 60))
        elif view.status is GameStatus.GAME_OVER:
            self._text(screen, f"Game over: {view.score}", (panel_x, text_y + 60))
        pygame.display.flip()

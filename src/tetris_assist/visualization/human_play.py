from __future__ import annotations

import argparse
from typing import Dict

import pygame

from tetris_assist.assist import AssistCoordinator, ChatCompletionSuggester, RemoteConfig
from tetris_assist.game import Action, GameConfig, TetrisGame
from tetris_assist.logging_setup import setup_logging

from .renderer import Renderer


KEY_TO_ACTION: Dict[int, Action] = {
    pygame.K_a: Action.MOVE_LEFT,
    pygame.K_LEFT: Action.MOVE_LEFT,
    pygame.K_d: Action.MOVE_RIGHT,
    pygame.K_RIGHT: Action.MOVE_RIGHT,
    pygame.K_s: Action.SOFT_DROP,
    pygame.K_DOWN: Action.SOFT_DROP,
    pygame.K_w: Action.ROTATE,
    pygame.K_UP: Action.ROTATE,
    pygame.K_p: Action.TOGGLE_PAUSE,
    pygame.K_o: Action.TOGGLE_ASSIST,
}


def build_assist(use_remote: bool) -> AssistCoordinator:
    if not use_remote:
        return AssistCoordinator()
    config = RemoteConfig.from_env()
    if not config.enabled:
        return AssistCoordinator()
    return AssistCoordinator(ChatCompletionSuggester(config), timeout=config.timeout)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play with the keyboard; pause (P) then press O for a suggestion")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--cell_size", type=int, default=30)
    p.add_argument("--remote", action="store_true", help="Ask the remote model for suggestions")
    p.add_argument("--verbose", action="store_true")
    return p


def run(args: argparse.Namespace) -> None:
    setup_logging(args.verbose)
    game = TetrisGame(GameConfig(random_seed=args.seed, restart_delay=2.0), assist=build_assist(args.remote))
    renderer = Renderer(cell_size=args.cell_size)

    pygame.init()
    try:
        screen = pygame.display.set_mode(renderer.window_size(game.config.width, game.config.height))
        pygame.display.set_caption("Tetris Assist")
        clock = pygame.time.Clock()

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    else:
                        action = KEY_TO_ACTION.get(event.key)
                        if action is not None:
                            game.apply(action)

            # Gravity is gated on the engine's fall interval, not the frame rate.
            game.advance_if_due(clock.get_time() / 1000.0)
            renderer.draw(screen, game.view())
            clock.tick(60)
    finally:
        game.assist.close()
        pygame.quit()


def main() -> None:
    run(build_parser().parse_args())


if __name__ == "__main__":  # pragma: no cover
    main()

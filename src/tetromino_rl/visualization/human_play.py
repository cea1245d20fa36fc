from __future__ import annotations

import argparse
from typing import List, Optional

import pygame

from tetromino_rl.game import GameConfig, TetrisGame
from tetromino_rl.log import setup_logging
from .controls import collect_commands
from .renderer import Renderer


def run(config: Optional[GameConfig] = None, cell_size: int = 28) -> None:
    pygame.init()
    try:
        clock = pygame.time.Clock()
        game = TetrisGame(config)
        renderer = Renderer(cell_size=cell_size)
        screen = pygame.display.set_mode(renderer.window_size(game.board.width, game.board.height))
        pygame.display.set_caption("Tetromino - Human Play")
        fps = 1000 // game.config.tick_ms

        while True:
            events = pygame.event.get()
            if game.game_over and not game.quit_requested:
                # Restart prompt
                if any(e.type == pygame.KEYDOWN and e.key == pygame.K_r for e in events):
                    game.reset()
                    continue
            game.update(commands=collect_commands(events))
            if game.quit_requested:
                break
            renderer.draw(screen, game.snapshot(), ghost_y=game.ghost_y())
            clock.tick(fps)
    finally:
        pygame.quit()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play the falling-block game with the keyboard")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--fall_ms", type=int, default=500, help="Milliseconds between gravity steps")
    p.add_argument("--tick_ms", type=int, default=50)
    p.add_argument("--cell_size", type=int, default=28)
    p.add_argument("--log_level", type=str, default="INFO")
    return p


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = build_parser()
    args = p.parse_args(argv)
    if args.tick_ms <= 0:
        p.error(f"--tick_ms must be positive, got {args.tick_ms}")
    if args.fall_ms <= 0:
        p.error(f"--fall_ms must be positive, got {args.fall_ms}")
    return args


def main() -> None:
    args = parse_args()
    setup_logging(args.log_level)
    config = GameConfig(random_seed=args.seed, fall_interval_ms=args.fall_ms, tick_ms=args.tick_ms)
    run(config, cell_size=args.cell_size)


if __name__ == "__main__":  # pragma: no cover
    main()

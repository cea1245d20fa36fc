from __future__ import annotations

import argparse

import pygame

from tetromino_rl.log import get_logger, setup_logging
from tetromino_rl.rl.train_ppo import make_env
from tetromino_rl.visualization.renderer import Renderer


logger = get_logger()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--algo", choices=["ppo", "maskable"], default="ppo")
    p.add_argument("--model", type=str, required=True)
    p.add_argument("--steps", type=int, default=500)
    p.add_argument("--frame_skip", type=int, default=2)
    p.add_argument("--fps", type=int, default=10)
    p.add_argument("--log_level", type=str, default="INFO")
    return p


def main() -> None:
    args = build_parser().parse_args()
    setup_logging(args.log_level)
    if args.algo == "maskable":
        from sb3_contrib import MaskablePPO as Algo
    else:
        from stable_baselines3 import PPO as Algo

    env = make_env(args.frame_skip)
    model = Algo.load(args.model, device="auto")

    game = env.unwrapped.game
    renderer = Renderer(cell_size=30)

    pygame.init()
    try:
        screen = pygame.display.set_mode(renderer.window_size(game.board.width, game.board.height))
        pygame.display.set_caption("Tetromino - Agent Eval")
        clock = pygame.time.Clock()

        obs, info = env.reset()
        total_reward = 0.0
        steps = 0
        while steps < args.steps:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    return
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    return

            if args.algo == "maskable":
                mask = env.unwrapped.get_action_mask()
                action, _ = model.predict(obs, deterministic=True, action_masks=mask)
            else:
                action, _ = model.predict(obs, deterministic=True)

            obs, reward, terminated, truncated, info = env.step(int(action))
            total_reward += float(reward)
            steps += 1
            if terminated or truncated:
                logger.info(f"Episode ended at step {steps}: score={info['score']} lines={info['lines_cleared']}")
                obs, info = env.reset()

            game = env.unwrapped.game
            renderer.draw(screen, game.snapshot(), ghost_y=game.ghost_y())
            clock.tick(args.fps)
        logger.info(f"Evaluation finished: {steps} steps, total reward {total_reward:.1f}")
    finally:
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    main()

from __future__ import annotations

import argparse

import gymnasium as gym
import numpy as np

import tetromino_rl.env  # noqa: F401
from tetromino_rl.log import get_logger, setup_logging


logger = get_logger()


def run_random(steps: int = 200, seed: int | None = None) -> float:
    env = gym.make("Tetromino-10x20-v0")
    rng = np.random.default_rng(seed)
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    episodes = 0
    for _ in range(steps):
        # Sample only among actions that change something
        valid = np.flatnonzero(info["action_mask"])
        action = int(rng.choice(valid))
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            episodes += 1
            logger.info(f"Episode {episodes} ended: score={info['score']} lines={info['lines_cleared']}")
            obs, info = env.reset()
    env.close()
    logger.info(f"Random agent total reward: {total_reward:.2f}")
    return total_reward


def main() -> None:
    p = argparse.ArgumentParser()
    p.add_argument("--steps", type=int, default=200)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--log_level", type=str, default="INFO")
    args = p.parse_args()
    setup_logging(args.log_level)
    run_random(args.steps, args.seed)


if __name__ == "__main__":  # pragma: no cover
    main()

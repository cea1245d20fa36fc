from __future__ import annotations

import argparse
import os

import gymnasium as gym

# Ensure envs are registered
import tetromino_rl.env  # noqa: F401
from tetromino_rl.log import get_logger, setup_logging


logger = get_logger()

ENV_ID = "Tetromino-10x20-v0"


def make_env(frame_skip: int = 1, seed: int | None = None) -> gym.Env:
    env = gym.make(ENV_ID, frame_skip=frame_skip)
    if seed is not None:
        env.reset(seed=seed)
    return env


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--algo", choices=["ppo", "maskable"], default="ppo")
    p.add_argument("--timesteps", type=int, default=200_000)
    p.add_argument("--frame_skip", type=int, default=2,
                   help="Game frames (ticks) advanced per agent action")
    p.add_argument("--logdir", type=str, default="./logs/ppo")
    p.add_argument("--save_path", type=str, default="./models/ppo_tetromino.zip")
    p.add_argument("--n_envs", type=int, default=4)
    p.add_argument("--seed", type=int, default=0, help="Base seed; env i is seeded with seed + i")
    p.add_argument("--log_level", type=str, default="INFO")
    return p


def main() -> None:
    args = build_parser().parse_args()
    setup_logging(args.log_level)

    from stable_baselines3.common.vec_env import SubprocVecEnv, VecMonitor

    if args.algo == "maskable":
        # sb3-contrib MaskablePPO
        from sb3_contrib import MaskablePPO as Algo
        from sb3_contrib.common.wrappers import ActionMasker

        def mask_fn(env):
            return env.unwrapped.get_action_mask()

        def make_env_idx(i: int):
            def thunk():
                return ActionMasker(make_env(args.frame_skip, seed=args.seed + i), mask_fn)
            return thunk
    else:
        # Vanilla PPO
        from stable_baselines3 import PPO as Algo

        def make_env_idx(i: int):
            def thunk():
                return make_env(args.frame_skip, seed=args.seed + i)
            return thunk

    vec_env = SubprocVecEnv([make_env_idx(i) for i in range(args.n_envs)])
    vec_env = VecMonitor(vec_env)
    model = Algo(
        policy="MultiInputPolicy",
        env=vec_env,
        verbose=1,
        tensorboard_log=args.logdir,
    )

    logger.info(f"Training {args.algo} on {ENV_ID} for {args.timesteps} timesteps with {args.n_envs} envs")
    save_dir = os.path.dirname(args.save_path)
    if save_dir:
        os.makedirs(save_dir, exist_ok=True)
    model.learn(total_timesteps=args.timesteps)
    model.save(args.save_path)
    logger.info(f"Saved model to {args.save_path}")


if __name__ == "__main__":  # pragma: no cover
    main()

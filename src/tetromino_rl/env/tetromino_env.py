from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from tetromino_rl.game import Command, GameConfig, PieceKind, ScoringRules, TetrisGame, color_of


# Every command except QUIT is a player action.
ACTIONS: Tuple[Command, ...] = tuple(c for c in Command if c != Command.QUIT)

NUM_KINDS = len(PieceKind)


def _compute_action_mask(game: TetrisGame) -> np.ndarray:
    mask = np.ones((len(ACTIONS),), dtype=np.bool_)
    if not game.can_hold:
        mask[ACTIONS.index(Command.HOLD)] = False
    return mask


class TetrominoEnv(gym.Env):
    """Falling-block game as a Gymnasium environment.

    Each step applies one command and then runs ``frame_skip`` frames of
    lock check and gravity at the configured tick rate.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 20}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 rules: Optional[ScoringRules] = None,
                 frame_skip: int = 1,
                 max_episode_steps: int = 5000,
                 line_weight: float = 1.0,
                 hole_weight: float = 0.1,
                 height_weight: float = 0.02,
                 step_penalty: float = 0.0,
                 terminal_penalty: float = -10.0) -> None:
        super().__init__()
        self.game = TetrisGame(config, rules)
        self.render_mode = render_mode
        if frame_skip < 1:
            raise ValueError(f"frame_skip must be >= 1, got {frame_skip}")
        self.frame_skip = int(frame_skip)
        self.max_episode_steps = int(max_episode_steps)

        # Reward shaping parameters
        self.line_weight = float(line_weight)
        self.hole_weight = float(hole_weight)
        self.height_weight = float(height_weight)
        self.step_penalty = float(step_penalty)
        self.terminal_penalty = float(terminal_penalty)

        h, w = self.game.board.height, self.game.board.width

        # Observation: board with the falling piece as negative codes,
        # next/held kinds (0 = none) and the hold flag
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=-NUM_KINDS, high=NUM_KINDS, shape=(h, w), dtype=np.int8),
                "pieces": spaces.Box(low=0, high=NUM_KINDS, shape=(2,), dtype=np.int8),
                "can_hold": spaces.Discrete(2),
            }
        )
        self.action_space = spaces.Discrete(len(ACTIONS))

        self._last_obs: Optional[Dict[str, Any]] = None
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        held = self.game.held_kind
        pieces = np.array([int(self.game.next_kind), int(held) if held is not None else 0], dtype=np.int8)
        obs: Dict[str, Any] = {
            "grid": self.game.get_state().astype(np.int8),
            "pieces": pieces,
            "can_hold": int(self.game.can_hold),
        }
        return obs

    def _get_info(self) -> Dict[str, Any]:
        info: Dict[str, Any] = {
            "action_mask": _compute_action_mask(self.game),
            "score": self.game.score,
            "lines_cleared": self.game.lines_cleared,
            "steps": self._steps,
        }
        return info

    def get_action_mask(self) -> np.ndarray:
        return _compute_action_mask(self.game)

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.reset(seed)
        self._steps = 0
        obs = self._get_obs()
        info = self._get_info()
        self._last_obs = obs
        return obs, info

    def step(self, action: int):
        action = int(action)
        if not 0 <= action < len(ACTIONS):
            raise ValueError(f"action {action} outside Discrete({len(ACTIONS)})")
        command = ACTIONS[action]

        board = self.game.board
        holes_before, height_before = board.count_holes(), board.stack_height()
        score_before = self.game.score
        lines = self.game.update(commands=(command,))
        for _ in range(self.frame_skip - 1):
            if self.game.game_over:
                break
            lines += self.game.update()

        reward_components: Dict[str, float] = {
            "score": float(self.game.score - score_before),
            "lines": self.line_weight * float(lines),
            "step": self.step_penalty,
            # Penalize increases in undesirable features
            "holes": -self.hole_weight * float(max(0, board.count_holes() - holes_before)),
            "height": -self.height_weight * float(max(0, board.stack_height() - height_before)),
        }
        terminated = bool(self.game.game_over)
        self._steps += 1
        truncated = self._steps >= self.max_episode_steps and not terminated
        if terminated:
            reward_components["terminal"] = self.terminal_penalty

        reward = float(sum(reward_components.values()))

        obs = self._get_obs()
        info = self._get_info()
        info["reward_components"] = reward_components
        self._last_obs = obs
        return obs, reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            # Create a simple RGB image from the grid
            grid = self._last_obs["grid"] if self._last_obs is not None else self.game.get_state()
            cell = 12
            h, w = grid.shape
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            for y in range(h):
                for x in range(w):
                    v = int(grid[y, x])
                    color = color_of(PieceKind(abs(v))) if v else (30, 30, 36)
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
            return img
        return None

    def close(self) -> None:
        pass

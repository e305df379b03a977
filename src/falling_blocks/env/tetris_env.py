from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from falling_blocks.game import Action, ActivePiece, GameConfig, GameStatus, TetrisGame
from falling_blocks.visualization.palette import color_for_value


def compute_action_mask(game: TetrisGame) -> np.ndarray:
    """Boolean mask over ``Action``: True where the command would not be rejected.

    Soft drop, hard drop and no-op are always available while running; a
    blocked soft drop locks the piece instead of being rejected.
    """
    mask = np.zeros(len(Action), dtype=np.bool_)
    if game.status is not GameStatus.RUNNING or not isinstance(game.active, ActivePiece):
        mask[Action.NONE] = True
        return mask
    controller = game.controller
    piece = game.active
    mask[Action.LEFT] = controller.translate(piece, 0, -1) is not None
    mask[Action.RIGHT] = controller.translate(piece, 0, 1) is not None
    mask[Action.ROTATE] = controller.rotate(piece) is not None
    mask[Action.SOFT_DROP] = True
    mask[Action.HARD_DROP] = True
    mask[Action.NONE] = True
    return mask


class TetrisEnv(gym.Env):
    """One step = one player command followed by one gravity tick."""

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 max_episode_steps: int = 10_000,
                 gravity_every: int = 1) -> None:
        super().__init__()
        self.game = TetrisGame(config)
        self.render_mode = render_mode
        self.max_episode_steps = int(max_episode_steps)
        self.gravity_every = max(1, int(gravity_every))

        h, w = self.game.grid.height, self.game.grid.width
        depth = self.game.config.queue_depth
        n_kinds = 7
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=-n_kinds, high=n_kinds, shape=(h, w), dtype=np.int8),
                "next": spaces.Box(low=0, high=n_kinds, shape=(depth,), dtype=np.int8),
            }
        )
        self.action_space = spaces.Discrete(len(Action))

        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        snap = self.game.snapshot()
        upcoming = np.zeros((self.game.config.queue_depth,), dtype=np.int8)
        for i, kind in enumerate(snap.next_pieces):
            upcoming[i] = int(kind)
        return {"board": snap.overlay().astype(np.int8), "next": upcoming}

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": compute_action_mask(self.game),
            "score": self.game.score,
            "lines_cleared": self.game.lines_cleared,
            "pieces_locked": self.game.pieces_locked,
        }

    def get_action_mask(self) -> np.ndarray:
        return compute_action_mask(self.game)

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.game.rng.seed(seed)
        self.game.reset()
        self.game.start()
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        score_before = self.game.score
        lines_before = self.game.lines_cleared
        self.game.step(Action(int(action)))
        self._steps += 1
        if self._steps % self.gravity_every == 0:
            self.game.tick()

        reward = float(self.game.score - score_before)
        terminated = self.game.status is GameStatus.GAME_OVER
        truncated = self._steps >= self.max_episode_steps and not terminated
        info = self._get_info()
        info["lines_cleared_step"] = self.game.lines_cleared - lines_before
        return self._get_obs(), reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            # human rendering lives in falling_blocks.visualization
            return None
        state = self.game.get_state()
        cell = 12
        h, w = state.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color_for_value(int(state[y, x]))
        return img

    def close(self) -> None:
        pass

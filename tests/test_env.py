import numpy as np
import pytest

gym = pytest.importorskip("gymnasium")

import falling_blocks.env  # noqa: F401
from falling_blocks.env.tetris_env import TetrisEnv, compute_action_mask
from falling_blocks.env.wrappers import ResampleInvalidActionWrapper
from falling_blocks.game import Action, ActivePiece, GameConfig, GameStatus, TetrominoType


def test_reset_returns_observation_in_space():
    env = TetrisEnv(GameConfig(random_seed=0))
    obs, info = env.reset(seed=3)
    assert env.observation_space.contains(obs)
    assert obs["board"].shape == (20, 10)
    assert (obs["board"] < 0).sum() == 4
    assert (obs["next"] > 0).all()
    assert info["score"] == 0
    assert env.game.status is GameStatus.RUNNING


def test_hard_drop_rewards_placement():
    env = TetrisEnv(GameConfig(random_seed=0))
    env.reset(seed=1)
    obs, reward, terminated, truncated, info = env.step(int(Action.HARD_DROP))
    assert reward == 5.0
    assert info["pieces_locked"] == 1
    assert info["lines_cleared_step"] == 0
    assert not terminated and not truncated


def test_episode_terminates_on_game_over():
    env = TetrisEnv(GameConfig(random_seed=0))
    env.reset(seed=2)
    terminated = False
    for _ in range(200):
        _, _, terminated, truncated, _ = env.step(int(Action.HARD_DROP))
        if terminated:
            break
    assert terminated
    assert env.game.status is GameStatus.GAME_OVER


def test_truncation_at_step_limit():
    env = TetrisEnv(GameConfig(random_seed=0), max_episode_steps=3)
    env.reset()
    results = [env.step(int(Action.NONE)) for _ in range(3)]
    assert [r[3] for r in results] == [False, False, True]


def test_action_mask_reflects_walls():
    env = TetrisEnv(GameConfig(random_seed=0))
    env.reset()
    env.game.active = ActivePiece(TetrominoType.O, 0, 5, 0)
    mask = compute_action_mask(env.game)
    assert not mask[Action.LEFT]
    assert mask[Action.RIGHT]
    assert mask[Action.HARD_DROP] and mask[Action.NONE]


def test_action_mask_when_not_running():
    env = TetrisEnv(GameConfig(random_seed=0))
    env.reset()
    env.game.reset()
    mask = compute_action_mask(env.game)
    assert mask.tolist() == [False, False, False, False, False, True]


def test_rgb_render():
    env = TetrisEnv(GameConfig(random_seed=0), render_mode="rgb_array")
    env.reset()
    img = env.render()
    assert img.shape == (240, 120, 3)
    assert img.dtype == np.uint8


def test_registered_env_exposes_action_mask():
    env = ResampleInvalidActionWrapper(gym.make("FallingBlocks-10x20-v0"))
    _, info = env.reset(seed=0)
    assert env.get_action_mask().shape == (len(Action),)
    assert info["action_mask"].dtype == np.bool_
    env.close()


def test_resample_wrapper_never_forwards_masked_action(monkeypatch):
    inner = TetrisEnv(GameConfig(random_seed=0))
    taken = []
    original_step = inner.step

    def recording_step(action):
        taken.append(int(action))
        return original_step(action)

    monkeypatch.setattr(inner, "step", recording_step)
    env = ResampleInvalidActionWrapper(inner)
    env.reset(seed=0)
    for _ in range(10):
        inner.game.grid.reset()
        inner.game.active = ActivePiece(TetrominoType.O, 0, 5, 0)
        env.step(int(Action.LEFT))
    assert len(taken) == 10
    assert int(Action.LEFT) not in taken
    assert inner.game.status is GameStatus.RUNNING


def test_reset_with_seed_replays_bag_sequence():
    env = TetrisEnv(GameConfig(random_seed=0, randomizer="bag"))

    def dealt():
        return [int(env.game.active.kind)] + [int(k) for k in env.game.queue.peek()]

    env.reset(seed=11)
    first = dealt()
    # Leaves the bag partly dealt
    env.step(int(Action.HARD_DROP))
    env.reset(seed=11)
    assert dealt() == first


def test_random_agent_runs():
    from falling_blocks.rl.random_agent import run_random

    total = run_random(steps=50, seed=0)
    assert total >= 0.0

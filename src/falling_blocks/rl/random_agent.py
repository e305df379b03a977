from __future__ import annotations

import argparse

import gymnasium as gym

import falling_blocks.env  # noqa: F401
from falling_blocks.env.wrappers import ResampleInvalidActionWrapper


def run_random(steps: int = 200, seed: int | None = None, resample: bool = True) -> float:
    env = gym.make("FallingBlocks-10x20-v0")
    if resample:
        env = ResampleInvalidActionWrapper(env)
    obs, info = env.reset(seed=seed)
    env.action_space.seed(seed)
    total_reward = 0.0
    for _ in range(steps):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            obs, info = env.reset()
    env.close()
    return total_reward


def main() -> None:
    p = argparse.ArgumentParser()
    p.add_argument("--steps", type=int, default=200)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--no-resample", action="store_true")
    args = p.parse_args()
    total_reward = run_random(args.steps, args.seed, resample=not args.no_resample)
    print(f"Random agent total reward: {total_reward:.2f}")


if __name__ == "__main__":  # pragma: no cover
    main()

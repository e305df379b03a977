"""Gymnasium environments for Falling Blocks."""

from __future__ import annotations

from gymnasium.envs.registration import register

# Register default 10x20 environment (6 discrete commands)
register(
    id="FallingBlocks-10x20-v0",
    entry_point="falling_blocks.env.tetris_env:TetrisEnv",
)

__all__ = ["FallingBlocks-10x20-v0"]

from __future__ import annotations

from typing import Iterable, List

import pytest

from falling_blocks.game import GameConfig, InMemoryBestScoreStore, TetrisGame, TetrominoType


class ScriptedRandomizer:
    """Deals the given kinds in order, cycling when exhausted."""

    def __init__(self, kinds: Iterable[TetrominoType]) -> None:
        self.kinds: List[TetrominoType] = list(kinds)
        self.index = 0

    def next_kind(self) -> TetrominoType:
        kind = self.kinds[self.index % len(self.kinds)]
        self.index += 1
        return kind

    def reset(self) -> None:
        pass


def scripted_game(*kinds: TetrominoType, store=None, **config) -> TetrisGame:
    game = TetrisGame(GameConfig(**config), store=store or InMemoryBestScoreStore())
    game.queue.randomizer = ScriptedRandomizer(kinds)
    return game


@pytest.fixture
def make_game():
    return scripted_game

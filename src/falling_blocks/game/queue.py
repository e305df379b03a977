from __future__ import annotations

import random
from collections import deque
from typing import Deque, List, Optional, Protocol, Tuple

from .pieces import TetrominoType


class Randomizer(Protocol):
    def next_kind(self) -> TetrominoType: ...

    def reset(self) -> None: ...


class UniformRandomizer:
    """Independent uniform draws over the seven kinds; repeats are possible."""

    def __init__(self, rng: random.Random) -> None:
        self.rng = rng

    def next_kind(self) -> TetrominoType:
        return self.rng.choice(list(TetrominoType))

    def reset(self) -> None:
        pass


class BagRandomizer:
    """Deals all seven kinds in a shuffled order before reshuffling."""

    def __init__(self, rng: random.Random) -> None:
        self.rng = rng
        self._bag: List[TetrominoType] = []

    def next_kind(self) -> TetrominoType:
        if not self._bag:
            self._bag = list(TetrominoType)
            self.rng.shuffle(self._bag)
        return self._bag.pop()

    def reset(self) -> None:
        self._bag.clear()


RANDOMIZERS = {
    "uniform": UniformRandomizer,
    "bag": BagRandomizer,
}


def make_randomizer(name: str, rng: random.Random) -> Randomizer:
    try:
        factory = RANDOMIZERS[name]
    except KeyError:
        raise ValueError(f"unknown randomizer {name!r}, expected one of {sorted(RANDOMIZERS)}") from None
    return factory(rng)


class PieceQueue:
    """FIFO lookahead of upcoming kinds, kept at ``depth`` entries or more."""

    def __init__(self, randomizer: Randomizer, depth: int = 3) -> None:
        if depth < 1:
            raise ValueError("queue depth must be positive")
        self.randomizer = randomizer
        self.depth = int(depth)
        self._items: Deque[TetrominoType] = deque()

    def __len__(self) -> int:
        return len(self._items)

    def refill(self) -> None:
        while len(self._items) < self.depth:
            self._items.append(self.randomizer.next_kind())

    def next(self) -> TetrominoType:
        self.refill()
        kind = self._items.popleft()
        self.refill()
        return kind

    def peek(self, n: Optional[int] = None) -> Tuple[TetrominoType, ...]:
        if n is None:
            n = self.depth
        return tuple(self._items)[:n]

    def clear(self) -> None:
        # A partly dealt bag is discarded with the queue
        self._items.clear()
        self.randomizer.reset()

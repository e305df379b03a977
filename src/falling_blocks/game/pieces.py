from __future__ import annotations

from enum import IntEnum
from typing import Dict, List, Sequence, Tuple

import numpy as np


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


class CatalogError(RuntimeError):
    """Raised when the static piece catalog is inconsistent."""


Shape = np.ndarray


def _frozen(rows: Sequence[Sequence[int]]) -> Shape:
    arr = np.array(rows, dtype=np.int8)
    arr.setflags(write=False)
    return arr


# Every state is authored; none is derived by rotating a matrix at runtime.
ROTATIONS: Dict[TetrominoType, Tuple[Shape, ...]] = {
    TetrominoType.I: (
        _frozen([[1, 1, 1, 1]]),
        _frozen([[1], [1], [1], [1]]),
        _frozen([[1, 1, 1, 1]]),
        _frozen([[1], [1], [1], [1]]),
    ),
    TetrominoType.O: (
        _frozen([[1, 1], [1, 1]]),
        _frozen([[1, 1], [1, 1]]),
        _frozen([[1, 1], [1, 1]]),
        _frozen([[1, 1], [1, 1]]),
    ),
    TetrominoType.T: (
        _frozen([[0, 1, 0], [1, 1, 1]]),
        _frozen([[1, 0], [1, 1], [1, 0]]),
        _frozen([[1, 1, 1], [0, 1, 0]]),
        _frozen([[0, 1], [1, 1], [0, 1]]),
    ),
    TetrominoType.S: (
        _frozen([[0, 1, 1], [1, 1, 0]]),
        _frozen([[1, 0], [1, 1], [0, 1]]),
        _frozen([[0, 1, 1], [1, 1, 0]]),
        _frozen([[1, 0], [1, 1], [0, 1]]),
    ),
    TetrominoType.Z: (
        _frozen([[1, 1, 0], [0, 1, 1]]),
        _frozen([[0, 1], [1, 1], [1, 0]]),
        _frozen([[1, 1, 0], [0, 1, 1]]),
        _frozen([[0, 1], [1, 1], [1, 0]]),
    ),
    TetrominoType.J: (
        _frozen([[1, 0, 0], [1, 1, 1]]),
        _frozen([[1, 1], [1, 0], [1, 0]]),
        _frozen([[1, 1, 1], [0, 0, 1]]),
        _frozen([[0, 1], [0, 1], [1, 1]]),
    ),
    TetrominoType.L: (
        _frozen([[0, 0, 1], [1, 1, 1]]),
        _frozen([[1, 0], [1, 0], [1, 1]]),
        _frozen([[1, 1, 1], [1, 0, 0]]),
        _frozen([[1, 1], [0, 1], [0, 1]]),
    ),
}

COLORS: Dict[TetrominoType, str] = {
    TetrominoType.I: "cyan",
    TetrominoType.O: "yellow",
    TetrominoType.T: "purple",
    TetrominoType.S: "green",
    TetrominoType.Z: "red",
    TetrominoType.J: "blue",
    TetrominoType.L: "orange",
}

ROTATION_STATES = 4
CELLS_PER_PIECE = 4


def validate_catalog() -> None:
    """Check that every kind has four authored states of four cells each."""
    for kind in TetrominoType:
        states = ROTATIONS.get(kind)
        if states is None or len(states) != ROTATION_STATES:
            raise CatalogError(f"{kind.name}: expected {ROTATION_STATES} rotation states")
        for index, state in enumerate(states):
            if state.ndim != 2 or int(state.sum()) != CELLS_PER_PIECE:
                raise CatalogError(f"{kind.name}[{index}]: malformed shape {state.tolist()}")
        if kind not in COLORS:
            raise CatalogError(f"{kind.name}: missing color")


def shape_for(kind: TetrominoType, rotation: int) -> Shape:
    states = ROTATIONS.get(TetrominoType(kind))
    if states is None or len(states) != ROTATION_STATES:
        raise CatalogError(f"no rotation states for {kind!r}")
    return states[rotation % ROTATION_STATES]


def color_for(kind: TetrominoType) -> str:
    return COLORS[TetrominoType(kind)]


def shape_cells(shape: Shape, origin_row: int, origin_col: int) -> List[Tuple[int, int]]:
    """Absolute (row, col) coordinates of the filled cells of ``shape``."""
    h, w = shape.shape
    cells: List[Tuple[int, int]] = []
    for dy in range(h):
        for dx in range(w):
            if shape[dy, dx]:
                cells.append((origin_row + dy, origin_col + dx))
    return cells


validate_catalog()

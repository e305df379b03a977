from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .pieces import Shape, TetrominoType, color_for, shape_cells


@dataclass(frozen=True)
class Cell:
    occupied: bool
    label: str = ""


EMPTY_CELL = Cell(occupied=False, label="")


def collides(shape: Shape, row: int, col: int, grid: "GameGrid") -> bool:
    """True if ``shape`` anchored at (row, col) leaves the grid or hits a filled cell.

    This is the only legality check in the engine: moves, rotations, spawns and
    landing scans all go through it.
    """
    for r, c in shape_cells(shape, row, col):
        if not grid.is_inside(r, c):
            return True
        if grid.grid[r, c] != 0:
            return True
    return False


class GameGrid:
    """Fixed-size board, row 0 on top.

    Empty cells hold 0; filled cells hold the ``TetrominoType`` value of the
    piece that was locked there, which also selects its color label.
    """

    def __init__(self, width: int = 10, height: int = 20) -> None:
        self.width = int(width)
        self.height = int(height)
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(0)

    def is_inside(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def collides(self, shape: Shape, row: int, col: int) -> bool:
        return collides(shape, row, col, self)

    def merge(self, shape: Shape, row: int, col: int, value: int) -> int:
        """Write the filled cells of ``shape`` with ``value``; return cells written.

        Cells falling outside the board are skipped.
        """
        written = 0
        for r, c in shape_cells(shape, row, col):
            if self.is_inside(r, c):
                self.grid[r, c] = value
                written += 1
        return written

    def full_rows(self) -> np.ndarray:
        return np.where(np.all(self.grid != 0, axis=1))[0]

    def clear_full_rows(self) -> int:
        full_rows = self.full_rows()
        if full_rows.size == 0:
            return 0
        num = int(full_rows.size)
        # Remove full rows and add empty rows at the top
        remaining = np.delete(self.grid, full_rows, axis=0)
        new_rows = np.zeros((num, self.width), dtype=np.int8)
        self.grid = np.vstack((new_rows, remaining))
        assert self.grid.shape == (self.height, self.width)
        return num

    def cell(self, row: int, col: int) -> Cell:
        value = int(self.grid[row, col])
        if value == 0:
            return EMPTY_CELL
        return Cell(occupied=True, label=color_for(TetrominoType(value)))

    def occupied_count(self) -> int:
        return int(np.count_nonzero(self.grid))

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()

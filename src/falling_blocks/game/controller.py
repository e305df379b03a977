from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple, Union

from .grid import GameGrid
from .pieces import Shape, TetrominoType, color_for, shape_cells, shape_for


DEFAULT_KICKS: Tuple[int, ...] = (-1, 1, -2, 2)


@dataclass(frozen=True)
class ActivePiece:
    kind: TetrominoType
    rotation: int
    row: int
    col: int

    @property
    def shape(self) -> Shape:
        return shape_for(self.kind, self.rotation)

    @property
    def color(self) -> str:
        return color_for(self.kind)

    def cells(self) -> List[Tuple[int, int]]:
        return shape_cells(self.shape, self.row, self.col)


class NoActivePiece:
    """Marker for sessions that have no falling piece (Idle, GameOver)."""

    _instance: Optional["NoActivePiece"] = None

    def __new__(cls) -> "NoActivePiece":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_PIECE"


NO_PIECE = NoActivePiece()

ActiveSlot = Union[ActivePiece, NoActivePiece]


@dataclass(frozen=True)
class GhostPiece:
    kind: TetrominoType
    rotation: int
    row: int
    col: int

    @property
    def shape(self) -> Shape:
        return shape_for(self.kind, self.rotation)

    def cells(self) -> List[Tuple[int, int]]:
        return shape_cells(self.shape, self.row, self.col)


class PieceController:
    """Geometry of the falling piece against a grid.

    Every method is pure with respect to the grid: candidates are checked with
    ``GameGrid.collides`` and a new ``ActivePiece`` is returned, or ``None``
    when the move is rejected.
    """

    def __init__(self, grid: GameGrid, kick_offsets: Sequence[int] = DEFAULT_KICKS) -> None:
        self.grid = grid
        self.kick_offsets = tuple(int(k) for k in kick_offsets)

    def spawn(self, kind: TetrominoType, spawn_row: int = 0) -> ActivePiece:
        shape = shape_for(kind, 0)
        col = (self.grid.width - shape.shape[1]) // 2
        return ActivePiece(kind=TetrominoType(kind), rotation=0, row=spawn_row, col=col)

    def fits(self, piece: ActivePiece) -> bool:
        return not self.grid.collides(piece.shape, piece.row, piece.col)

    def translate(self, piece: ActivePiece, d_row: int, d_col: int) -> Optional[ActivePiece]:
        if self.grid.collides(piece.shape, piece.row + d_row, piece.col + d_col):
            return None
        return replace(piece, row=piece.row + d_row, col=piece.col + d_col)

    def rotate(self, piece: ActivePiece) -> Optional[ActivePiece]:
        rotation = (piece.rotation + 1) % 4
        shape = shape_for(piece.kind, rotation)
        # Unchanged anchor first, then horizontal kicks on the same row
        for offset in (0,) + self.kick_offsets:
            col = piece.col + offset
            if not self.grid.collides(shape, piece.row, col):
                return replace(piece, rotation=rotation, col=col)
        return None

    def landing_row(self, piece: ActivePiece) -> int:
        row = piece.row
        while not self.grid.collides(piece.shape, row + 1, piece.col):
            row += 1
        return row

    def hard_drop(self, piece: ActivePiece) -> ActivePiece:
        return replace(piece, row=self.landing_row(piece))

    def ghost(self, piece: ActivePiece) -> GhostPiece:
        return GhostPiece(
            kind=piece.kind,
            rotation=piece.rotation,
            row=self.landing_row(piece),
            col=piece.col,
        )

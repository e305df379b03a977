"""Game module for Falling Blocks.

Exports the core game engine and supporting classes:
- GameGrid / collides: Board representation, collision oracle, line clearing
- TetrominoType: Piece catalog with authored rotation states
- PieceController / ActivePiece / GhostPiece: Falling piece geometry and kicks
- PieceQueue: Lookahead queue of upcoming pieces
- ScoringRules / ProgressionRules: Scoring table and timed speed ramp
- TetrisGame: Session state machine driving gravity, locking and spawning
"""

from .grid import Cell, GameGrid, collides
from .pieces import CatalogError, TetrominoType, color_for, shape_for
from .controller import NO_PIECE, ActivePiece, GhostPiece, NoActivePiece, PieceController
from .queue import BagRandomizer, PieceQueue, UniformRandomizer
from .rules import ProgressionRules, ScoringRules
from .persistence import BestScoreStore, InMemoryBestScoreStore, JsonBestScoreStore
from .core import Action, GameConfig, GameSnapshot, GameStatus, TetrisGame

__all__ = [
    "Cell",
    "GameGrid",
    "collides",
    "CatalogError",
    "TetrominoType",
    "color_for",
    "shape_for",
    "NO_PIECE",
    "ActivePiece",
    "GhostPiece",
    "NoActivePiece",
    "PieceController",
    "BagRandomizer",
    "PieceQueue",
    "UniformRandomizer",
    "ProgressionRules",
    "ScoringRules",
    "BestScoreStore",
    "InMemoryBestScoreStore",
    "JsonBestScoreStore",
    "Action",
    "GameConfig",
    "GameSnapshot",
    "GameStatus",
    "TetrisGame",
]

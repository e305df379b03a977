from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Callable, Dict, Optional, Tuple

import numpy as np

from .controller import DEFAULT_KICKS, NO_PIECE, ActivePiece, ActiveSlot, GhostPiece, PieceController
from .grid import Cell, GameGrid
from .persistence import BestScoreStore, InMemoryBestScoreStore
from .pieces import TetrominoType
from .queue import PieceQueue, make_randomizer
from .rules import ProgressionRules, ScoringRules

logger = logging.getLogger(__name__)


class GameStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE = 2
    SOFT_DROP = 3
    HARD_DROP = 4
    NONE = 5


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None
    spawn_row: int = 0
    queue_depth: int = 3
    randomizer: str = "uniform"  # or "bag"
    kick_offsets: Tuple[int, ...] = DEFAULT_KICKS
    progression: bool = False

    def __post_init__(self) -> None:
        # The I piece needs four cells in both directions
        if self.width < 4 or self.height < 4:
            raise ValueError(f"board must be at least 4x4, got {self.width}x{self.height}")
        if not 0 <= self.spawn_row < self.height:
            raise ValueError(f"spawn_row {self.spawn_row} outside board")
        if self.queue_depth < 1:
            raise ValueError("queue_depth must be positive")


@dataclass(frozen=True, eq=False)
class GameSnapshot:
    """Read-only view handed to renderers after every command."""

    board: np.ndarray
    active: ActiveSlot
    ghost: Optional[GhostPiece]
    next_pieces: Tuple[TetrominoType, ...]
    status: GameStatus
    score: int
    lines_cleared: int
    best_score: int
    drop_interval_ms: int
    elapsed_ms: int = 0
    pieces_locked: int = 0
    last_lines_cleared: int = 0

    @property
    def game_over(self) -> bool:
        return self.status is GameStatus.GAME_OVER

    def cells(self) -> Tuple[Tuple[Cell, ...], ...]:
        grid = GameGrid(self.board.shape[1], self.board.shape[0])
        grid.grid = self.board
        return tuple(
            tuple(grid.cell(r, c) for c in range(grid.width)) for r in range(grid.height)
        )

    def overlay(self) -> np.ndarray:
        # Locked cells keep their kind value, the falling piece is negative
        state = self.board.copy()
        if isinstance(self.active, ActivePiece):
            h, w = state.shape
            for r, c in self.active.cells():
                if 0 <= r < h and 0 <= c < w:
                    state[r, c] = -int(self.active.kind)
        return state


class TetrisGame:
    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        progression_rules: Optional[ProgressionRules] = None,
        store: Optional[BestScoreStore] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.progression_rules = progression_rules or ProgressionRules()
        self.rng = random.Random(self.config.random_seed)
        self.grid = GameGrid(self.config.width, self.config.height)
        self.controller = PieceController(self.grid, self.config.kick_offsets)
        self.queue = PieceQueue(make_randomizer(self.config.randomizer, self.rng), self.config.queue_depth)
        self.store: BestScoreStore = store if store is not None else InMemoryBestScoreStore()
        self.best_score = max(0, int(self.store.load_best_score()))

        self.status = GameStatus.IDLE
        self.active: ActiveSlot = NO_PIECE
        self.score = 0
        self.lines_cleared = 0
        self.pieces_locked = 0
        self.last_lines_cleared = 0
        self._reset_timing()

    # ------------------------------------------------------------------
    # Session transitions

    def start(self) -> GameSnapshot:
        if self.status is GameStatus.PAUSED:
            return self.resume()
        if self.status is GameStatus.RUNNING:
            return self.snapshot()
        self.grid.reset()
        self.score = 0
        self.lines_cleared = 0
        self.pieces_locked = 0
        self.last_lines_cleared = 0
        self._reset_timing()
        self.queue.clear()
        self.queue.refill()
        self._set_status(GameStatus.RUNNING)
        self._spawn_next()
        return self.snapshot()

    def restart(self) -> GameSnapshot:
        self.reset()
        return self.start()

    def pause(self) -> GameSnapshot:
        if self.status is GameStatus.RUNNING:
            self._set_status(GameStatus.PAUSED)
        elif self.status is GameStatus.PAUSED:
            self._set_status(GameStatus.RUNNING)
        return self.snapshot()

    def resume(self) -> GameSnapshot:
        if self.status is GameStatus.PAUSED:
            self._set_status(GameStatus.RUNNING)
        return self.snapshot()

    def reset(self) -> GameSnapshot:
        self.grid.reset()
        self.active = NO_PIECE
        self.queue.clear()
        self.score = 0
        self.lines_cleared = 0
        self.pieces_locked = 0
        self.last_lines_cleared = 0
        self._reset_timing()
        self._set_status(GameStatus.IDLE)
        return self.snapshot()

    def reset_high_score(self) -> GameSnapshot:
        self.best_score = 0
        self.store.clear_best_score()
        logger.info("Best score cleared")
        return self.snapshot()

    # ------------------------------------------------------------------
    # Player commands

    def move_left(self) -> GameSnapshot:
        return self._translate(0, -1)

    def move_right(self) -> GameSnapshot:
        return self._translate(0, 1)

    def rotate(self) -> GameSnapshot:
        if self._accepts_commands():
            rotated = self.controller.rotate(self.active)
            if rotated is not None:
                self.active = rotated
        return self.snapshot()

    def soft_drop(self) -> GameSnapshot:
        if self._accepts_commands():
            self._gravity_step()
        return self.snapshot()

    def hard_drop(self) -> GameSnapshot:
        if self._accepts_commands():
            self._lock(self.controller.hard_drop(self.active))
        return self.snapshot()

    def step(self, action: Action) -> GameSnapshot:
        handlers: Dict[Action, Callable[[], GameSnapshot]] = {
            Action.LEFT: self.move_left,
            Action.RIGHT: self.move_right,
            Action.ROTATE: self.rotate,
            Action.SOFT_DROP: self.soft_drop,
            Action.HARD_DROP: self.hard_drop,
            Action.NONE: self.snapshot,
        }
        return handlers[Action(action)]()

    # ------------------------------------------------------------------
    # Timer source hooks

    def tick(self) -> GameSnapshot:
        """Gravity tick; does nothing unless the session is running."""
        if self._accepts_commands():
            self._gravity_step()
        return self.snapshot()

    def ramp_tick(self) -> GameSnapshot:
        """Difficulty tick of the timed variant."""
        if not self.config.progression or self.status is not GameStatus.RUNNING:
            return self.snapshot()
        rules = self.progression_rules
        self._ramp_count += 1
        self.elapsed_ms += rules.ramp_every_ms
        self.drop_interval_ms = rules.interval_after(self._ramp_count)
        logger.debug("Drop interval now %d ms after %d ms", self.drop_interval_ms, self.elapsed_ms)
        if self.elapsed_ms >= rules.session_cap_ms:
            self._end_game("session time cap reached")
        return self.snapshot()

    def advance(self, elapsed_ms: float) -> int:
        """Feed wall-clock time; fires gravity and ramp ticks as they come due.

        Returns the number of gravity ticks fired. Time only accumulates while
        running, so a paused session resumes in the same gravity phase.
        """
        if self.status is not GameStatus.RUNNING:
            return 0
        if self.config.progression:
            self._ramp_acc += elapsed_ms
            while self._ramp_acc >= self.progression_rules.ramp_every_ms and self.status is GameStatus.RUNNING:
                self._ramp_acc -= self.progression_rules.ramp_every_ms
                self.ramp_tick()
        fired = 0
        self._gravity_acc += elapsed_ms
        while self._gravity_acc >= self.drop_interval_ms and self.status is GameStatus.RUNNING:
            self._gravity_acc -= self.drop_interval_ms
            self._gravity_step()
            fired += 1
        return fired

    # ------------------------------------------------------------------
    # Read side

    def ghost(self) -> Optional[GhostPiece]:
        if isinstance(self.active, ActivePiece):
            return self.controller.ghost(self.active)
        return None

    def snapshot(self) -> GameSnapshot:
        board = self.grid.clone_state()
        board.setflags(write=False)
        return GameSnapshot(
            board=board,
            active=self.active,
            ghost=self.ghost(),
            next_pieces=self.queue.peek(self.config.queue_depth),
            status=self.status,
            score=self.score,
            lines_cleared=self.lines_cleared,
            best_score=self.best_score,
            drop_interval_ms=self.drop_interval_ms,
            elapsed_ms=self.elapsed_ms,
            pieces_locked=self.pieces_locked,
            last_lines_cleared=self.last_lines_cleared,
        )

    def get_state(self) -> np.ndarray:
        return self.snapshot().overlay()

    @property
    def game_over(self) -> bool:
        return self.status is GameStatus.GAME_OVER

    # ------------------------------------------------------------------
    # Internals

    def _accepts_commands(self) -> bool:
        return self.status is GameStatus.RUNNING and isinstance(self.active, ActivePiece)

    def _translate(self, d_row: int, d_col: int) -> GameSnapshot:
        if self._accepts_commands():
            moved = self.controller.translate(self.active, d_row, d_col)
            if moved is not None:
                self.active = moved
        return self.snapshot()

    def _gravity_step(self) -> None:
        assert isinstance(self.active, ActivePiece)
        moved = self.controller.translate(self.active, 1, 0)
        if moved is None:
            # Landed
            self._lock(self.active)
        else:
            self.active = moved

    def _lock(self, piece: ActivePiece) -> None:
        self.grid.merge(piece.shape, piece.row, piece.col, int(piece.kind))
        cleared = self.grid.clear_full_rows()
        self.score += self.rules.score_for_lock(cleared)
        self.lines_cleared += cleared
        self.pieces_locked += 1
        self.last_lines_cleared = cleared
        logger.debug(
            "Locked %s at row %d col %d, cleared %d, score %d",
            piece.kind.name, piece.row, piece.col, cleared, self.score,
        )
        self._record_best()
        self.active = NO_PIECE
        self._spawn_next()

    def _spawn_next(self) -> None:
        kind = self.queue.next()
        piece = self.controller.spawn(kind, self.config.spawn_row)
        if not self.controller.fits(piece):
            self._end_game(f"{kind.name} blocked at spawn")
            return
        self.active = piece

    def _record_best(self) -> None:
        if self.score > self.best_score:
            self.best_score = self.score
            self.store.store_best_score(self.best_score)
            logger.info("New best score %d", self.best_score)

    def _end_game(self, reason: str) -> None:
        self.active = NO_PIECE
        self._record_best()
        self._set_status(GameStatus.GAME_OVER)
        logger.info("Game over (%s): score %d, lines %d", reason, self.score, self.lines_cleared)

    def _set_status(self, status: GameStatus) -> None:
        if status is not self.status:
            logger.debug("Status %s -> %s", self.status.value, status.value)
        self.status = status

    def _reset_timing(self) -> None:
        self.drop_interval_ms = self.progression_rules.base_interval_ms
        self.elapsed_ms = 0
        self._ramp_count = 0
        self._ramp_acc = 0.0
        self._gravity_acc = 0.0

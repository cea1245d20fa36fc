from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Callable, Dict, Iterable, Optional

import numpy as np

from tetromino_rl.log import get_logger

from .bag import BagGenerator
from .grid import BOARD_HEIGHT, BOARD_WIDTH, Board
from .pieces import SPAWN_X, ActivePiece
from .rules import ScoringRules
from .shapes import PieceKind


logger = get_logger()


class Command(IntEnum):
    MOVE_LEFT = 0
    MOVE_RIGHT = 1
    ROTATE_CW = 2
    ROTATE_CCW = 3
    SOFT_DROP = 4
    HARD_DROP = 5
    HOLD = 6
    NONE = 7
    QUIT = 8


class RunState(Enum):
    PLAYING = "playing"
    LOST = "lost"


@dataclass
class GameConfig:
    width: int = BOARD_WIDTH
    height: int = BOARD_HEIGHT
    random_seed: Optional[int] = None
    fall_interval_ms: int = 500
    tick_ms: int = 50
    spawn_x: int = SPAWN_X


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only view of the game taken between frames."""

    cells: np.ndarray
    active_kind: PieceKind
    active_rotation: int
    active_x: int
    active_y: int
    next_kind: PieceKind
    held_kind: Optional[PieceKind]
    can_hold: bool
    score: int
    lines_cleared: int
    run_state: RunState


class TetrisGame:
    """Falling-block state machine.

    A frame is driven by :meth:`update`: queued commands are applied, then the
    lock check fuses a resting piece, full rows are cleared, the top row is
    checked for a loss, and finally gravity advances the fall timer. The
    primitive operations are public so drivers and tests can call them in the
    same order by hand.
    """

    def __init__(self, config: Optional[GameConfig] = None, rules: Optional[ScoringRules] = None,
                 rng: Optional[random.Random] = None) -> None:
        self.config = config or GameConfig()
        if self.config.fall_interval_ms <= 0 or self.config.tick_ms <= 0:
            raise ValueError(f"fall_interval_ms and tick_ms must be positive, got "
                             f"{self.config.fall_interval_ms} and {self.config.tick_ms}")
        self.rules = rules or ScoringRules()
        self.rng = rng or random.Random(self.config.random_seed)
        self.board = Board(self.config.width, self.config.height)
        self.score = 0
        self.lines_cleared = 0
        self.run_state = RunState.PLAYING
        self.quit_requested = False
        self.fall_interval_ms = self.config.fall_interval_ms
        self.fall_accumulator_ms = 0
        self._handlers: Dict[Command, Callable[[], object]] = {
            Command.MOVE_LEFT: lambda: self.move_horizontal(-1),
            Command.MOVE_RIGHT: lambda: self.move_horizontal(1),
            Command.ROTATE_CW: lambda: self.rotate(clockwise=True),
            Command.ROTATE_CCW: lambda: self.rotate(clockwise=False),
            Command.SOFT_DROP: self.move_down_one,
            Command.HARD_DROP: self.hard_drop,
            Command.HOLD: self.hold,
            Command.NONE: lambda: None,
        }
        self.reset()

    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.rng.seed(seed)
        self.board.reset()
        self.score = 0
        self.lines_cleared = 0
        self.run_state = RunState.PLAYING
        self.quit_requested = False
        self.fall_accumulator_ms = 0
        self.generator = BagGenerator(self.rng)
        self.held_kind: Optional[PieceKind] = None
        self.can_hold = True
        self._spawn(self.generator.next())
        self.next_kind = self.generator.next()
        logger.info(f"New game: active={self.active.kind.name} next={self.next_kind.name}")

    @property
    def game_over(self) -> bool:
        return self.run_state is RunState.LOST

    @property
    def is_playing(self) -> bool:
        return self.run_state is RunState.PLAYING

    # ---------- Spawning ----------
    def _spawn(self, kind: PieceKind) -> None:
        self.active = ActivePiece.spawn(kind, self.config.spawn_x)
        logger.debug(f"Spawned {kind.name} at ({self.active.x}, {self.active.y})")
        # Block out: the new piece overlaps the stack
        if not self._fits(self.active.x, self.active.y):
            self._lose("spawn blocked")

    def _fits(self, x: int, y: int, shape: Optional[np.ndarray] = None) -> bool:
        if shape is None:
            shape = self.active.shape()
        return self.board.can_fit(x, y, shape)

    def _lose(self, reason: str) -> None:
        if self.run_state is RunState.LOST:
            return
        self.run_state = RunState.LOST
        logger.info(f"Game over ({reason}): score={self.score} lines={self.lines_cleared}")

    # ---------- Movement ----------
    def _move(self, dx: int, dy: int) -> bool:
        if not self.is_playing:
            return False
        new_x = self.active.x + dx
        new_y = self.active.y + dy
        if self._fits(new_x, new_y):
            self.active.x = new_x
            self.active.y = new_y
            return True
        return False

    def move_horizontal(self, delta: int) -> bool:
        return self._move(delta, 0)

    def move_down_one(self) -> bool:
        return self._move(0, 1)

    def rotate(self, clockwise: bool = True) -> bool:
        if not self.is_playing:
            return False
        piece = self.active.piece
        rotated = piece.rotate_clockwise() if clockwise else piece.rotate_counter_clockwise()
        if self._fits(self.active.x, self.active.y, rotated.shape()):
            self.active.piece = rotated
            return True
        return False

    def hard_drop(self) -> int:
        dropped = 0
        # Bounded by board height: each accepted move lowers the piece one row
        for _ in range(self.board.height):
            if not self.move_down_one():
                break
            dropped += 1
        return dropped

    def hold(self) -> None:
        if not self.is_playing or not self.can_hold:
            return
        current = self.active.kind
        if self.held_kind is None:
            self.held_kind = current
            self._spawn(self.next_kind)
            self.next_kind = self.generator.next()
        else:
            swapped = self.held_kind
            self.held_kind = current
            self._spawn(swapped)
        self.can_hold = False
        logger.debug(f"Held {current.name}, active is now {self.active.kind.name}")

    # ---------- Timing ----------
    def tick(self, dt_ms: int) -> int:
        """Advance the fall timer by ``dt_ms`` and apply gravity steps.

        Several steps may run after a stall. A step is skipped when the piece
        already rests on the stack; fusing is left to the lock check.
        """
        if not self.is_playing:
            return 0
        self.fall_accumulator_ms += dt_ms
        fallen = 0
        while self.fall_accumulator_ms >= self.fall_interval_ms:
            self.fall_accumulator_ms -= self.fall_interval_ms
            if self._fits(self.active.x, self.active.y + 1):
                self.active.y += 1
                fallen += 1
        return fallen

    # ---------- Locking ----------
    def _should_fuse(self) -> bool:
        for x, y in self.active.cells():
            below = y + 1
            if below == self.board.height:
                return True
            if 0 <= below < self.board.height and self.board.is_occupied(x, below):
                return True
        return False

    def resolve_lock_and_clear(self) -> int:
        """Fuse a resting piece into the board, clear rows and check for a loss.

        Returns the number of rows cleared by this lock (0 when nothing fused).
        """
        if not self.is_playing or not self._should_fuse():
            return 0
        assert self._fits(self.active.x, self.active.y), "active piece overlaps the board"
        kind = self.active.kind
        self.board.commit(self.active.x, self.active.y, self.active.shape(), int(kind))
        cleared = self.board.clear_full_rows()
        self.lines_cleared += cleared
        self.score += self.rules.score_for_lines(cleared)
        logger.debug(f"Locked {kind.name} at ({self.active.x}, {self.active.y}), cleared {cleared}")

        if self.check_loss():
            return cleared
        self._spawn(self.next_kind)
        self.next_kind = self.generator.next()
        self.can_hold = True
        return cleared

    def check_loss(self) -> bool:
        if not self.board.row_is_empty(0):
            self._lose("stack reached the top row")
        return self.game_over

    # ---------- Driving ----------
    def apply_command(self, command: Command) -> None:
        command = Command(command)
        if command == Command.QUIT:
            self.quit_requested = True
            self._lose("quit")
            return
        if not self.is_playing:
            return
        self._handlers[command]()

    def update(self, dt_ms: Optional[int] = None, commands: Iterable[Command] = ()) -> int:
        """Run one frame and return the rows cleared in it."""
        for command in commands:
            self.apply_command(command)
        cleared = self.resolve_lock_and_clear()
        self.tick(self.config.tick_ms if dt_ms is None else dt_ms)
        return cleared

    # ---------- Reading ----------
    def ghost_y(self) -> int:
        y = self.active.y
        while self._fits(self.active.x, y + 1):
            y += 1
        return y

    def get_state(self) -> np.ndarray:
        # Overlay current piece on a copy of the grid for observation
        state = self.board.clone_state()
        if self.is_playing:
            for x, y in self.active.cells():
                if self.board.is_inside(x, y):
                    # Use negative to indicate falling piece overlay
                    state[y, x] = -int(self.active.kind)
        return state

    def snapshot(self) -> GameSnapshot:
        cells = self.board.clone_state()
        cells.setflags(write=False)
        return GameSnapshot(
            cells=cells,
            active_kind=self.active.kind,
            active_rotation=self.active.piece.rotation,
            active_x=self.active.x,
            active_y=self.active.y,
            next_kind=self.next_kind,
            held_kind=self.held_kind,
            can_hold=self.can_hold,
            score=self.score,
            lines_cleared=self.lines_cleared,
            run_state=self.run_state,
        )

# src/powertris/game/core/board.py
from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from powertris.game.core import matrix
from powertris.game.core.constants import (
    BOMB_REACH_AFTER,
    BOMB_REACH_BEFORE,
    EMPTY_CELL,
    KICK_OFFSETS,
    SPAWN_X,
    SPAWN_Y,
)
from powertris.game.core.generator import BrickGenerator
from powertris.game.core.pieceset import PieceDef, PieceSet
from powertris.game.core.powerups import PowerUpManager
from powertris.game.core.rotator import BrickRotator
from powertris.game.core.score import Score
from powertris.game.core.types import ClearRow, ViewData
from powertris.utils.logging import setup_logger

LOG = setup_logger(name="powertris.game.core.board", use_rich=True, level="info")


class Board:
    """
    Falling-block board state machine.

    Contracts:

      - the grid is the authoritative LOCKED board; the active piece is never
        written into it until lock()
      - the grid array is replaced (never mutated in place) on every lock,
        clear, blast and power-up clear; `grid` / `view()` hand out copies
      - every bool-returning operation is atomic: on False nothing changed
      - spawn() returning True is the game-over signal; after it only
        new_game() is meaningful

    Offsets: x is the column, y the row of the active shape's top-left corner.

    A fresh Board has no active piece: call spawn() or new_game() before
    view(), move_*(), rotate_left(), hold() or lock() (they raise RuntimeError
    until then).
    """

    def __init__(
            self,
            rows: int,
            cols: int,
            *,
            spawn_rows: int = 0,
            pieces: Optional[PieceSet] = None,
            generator: Optional[BrickGenerator] = None,
            score: Optional[Score] = None,
            power_ups: Optional[PowerUpManager] = None,
            spawn_x: int = SPAWN_X,
            spawn_y: int = SPAWN_Y,
    ) -> None:
        self.rows = int(rows)
        self.cols = int(cols)
        if self.rows <= 0:
            raise ValueError(f"rows must be positive, got {self.rows}")
        if self.cols <= 0:
            raise ValueError(f"cols must be positive, got {self.cols}")
        self.spawn_rows = int(spawn_rows)
        if not (0 <= self.spawn_rows < self.rows):
            raise ValueError(f"spawn_rows must be in [0, {self.rows}), got {self.spawn_rows}")

        self.spawn_x = int(spawn_x)
        self.spawn_y = int(spawn_y)

        if generator is None:
            generator = BrickGenerator(pieces or PieceSet.classic7())
        self.generator = generator
        self.rotator = BrickRotator()
        self.score = score or Score()
        self.power_ups = power_ups or PowerUpManager()

        self._grid = matrix.empty_grid(self.rows, self.cols)
        self._x = self.spawn_x
        self._y = self.spawn_y

        self._held: Optional[PieceDef] = None
        self._can_hold = True
        self._bomb_armed = False

        self._bomb_effect = False
        self._bomb_effect_xy: Tuple[int, int] = (0, 0)

        self.game_over = False

    # ---- snapshots -----------------------------------------------------------------

    @property
    def grid(self) -> np.ndarray:
        return matrix.copy(self._grid)

    def visible_grid(self) -> np.ndarray:
        return matrix.copy(self._grid[self.spawn_rows:, :])

    @property
    def offset(self) -> Tuple[int, int]:
        return self._x, self._y

    @property
    def active_brick(self) -> PieceDef:
        return self.rotator.brick

    @property
    def held_brick(self) -> Optional[PieceDef]:
        return self._held

    @property
    def can_hold(self) -> bool:
        return self._can_hold

    def view(self) -> ViewData:
        held = None
        if self._held is not None:
            held = matrix.copy(self._held.mask(0))
        return ViewData(
            brick_data=matrix.copy(self.rotator.current_shape),
            x=self._x,
            y=self._y,
            next_brick_data=matrix.copy(self.generator.next_brick.mask(0)),
            held_brick_data=held,
        )

    # ---- movement ------------------------------------------------------------------

    def _try_offset(self, x: int, y: int) -> bool:
        if matrix.intersect(self._grid, self.rotator.current_shape, x, y):
            return False
        self._x, self._y = x, y
        return True

    def move_down(self) -> bool:
        return self._try_offset(self._x, self._y + 1)

    def move_left(self) -> bool:
        return self._try_offset(self._x - 1, self._y)

    def move_right(self) -> bool:
        return self._try_offset(self._x + 1, self._y)

    def rotate_left(self) -> bool:
        """
        Advance to the next rotation state.

        Tried in place first, then shifted by each of KICK_OFFSETS columns
        (same row), in order. The first non-colliding position wins.
        """
        nxt = self.rotator.next_shape()
        for dx in (0, *KICK_OFFSETS):
            tx = self._x + dx
            if not matrix.intersect(self._grid, nxt.shape, tx, self._y):
                self._x = tx
                self.rotator.set_current_shape(nxt.position)
                return True
        return False

    def _drop_row(self) -> int:
        shape = self.rotator.current_shape
        drop_y = self._y
        while True:
            test_y = drop_y + 1
            if matrix.intersect(self._grid, shape, self._x, test_y):
                break
            drop_y = test_y
            if drop_y >= self.rows:
                break
        return drop_y

    def hard_drop_distance(self) -> int:
        """
        Rows the active piece would fall on hard_drop(). Does not mutate.
        """
        return max(0, self._drop_row() - self._y)

    def hard_drop(self) -> bool:
        self._y = self._drop_row()
        return True

    # ---- piece lifecycle -------------------------------------------------------------

    def _place_active(self, brick: PieceDef) -> None:
        self.rotator.brick = brick
        self._x = self.spawn_x
        self._y = self.spawn_y

    def spawn(self) -> bool:
        """
        Activate the generator's next piece at the spawn offset.

        Returns True iff the piece collides right away (game over).
        """
        self._place_active(self.generator.get_brick())
        self._can_hold = True
        collided = matrix.intersect(self._grid, self.rotator.current_shape, self._x, self._y)
        if collided:
            self.game_over = True
            LOG.debug("spawn collision at (%d,%d) for %s: game over", self._x, self._y, self.active_brick.kind)
        return collided

    def hold(self) -> bool:
        if not self._can_hold:
            return False
        current = self.rotator.brick
        if self._held is None:
            self._held = current
            self._place_active(self.generator.get_brick())
        else:
            held = self._held
            self._held = current
            self._place_active(held)
        self._can_hold = False
        return True

    def lock(self) -> None:
        """
        Fix the active piece into the grid.

        An armed bomb piece is never merged: it clears the 4x4 window around
        its first filled cell instead, raises the bomb-effect flag and disarms.
        """
        if self._bomb_armed:
            cx, cy = self._bomb_center()
            self.clear_bomb_area(cx, cy)
            self._bomb_effect_xy = (cx, cy)
            self._bomb_effect = True
            self._bomb_armed = False
            LOG.debug("bomb exploded at (%d,%d)", cx, cy)
            return

        self._grid = matrix.merge(self._grid, self.rotator.current_shape, self._x, self._y)
        LOG.debug("locked %s at (%d,%d)", self.active_brick.kind, self._x, self._y)

    def clear_lines(self) -> ClearRow:
        result = matrix.check_removing(self._grid)
        self._grid = result.new_matrix
        if result.lines_removed > 0:
            LOG.debug("cleared %d line(s), bonus=%d", result.lines_removed, result.score_bonus)
        return ClearRow(
            lines_removed=result.lines_removed,
            new_matrix=matrix.copy(result.new_matrix),
            score_bonus=result.score_bonus,
        )

    def new_game(self) -> bool:
        """
        Reset grid, score, power-ups, hold slot and bomb state, then spawn.

        Returns the spawn collision flag (only True for degenerate boards).
        """
        self._grid = matrix.empty_grid(self.rows, self.cols)
        self.score.reset()
        self.power_ups.reset()
        self._held = None
        self._can_hold = True
        self._bomb_armed = False
        self._bomb_effect = False
        self.game_over = False
        return self.spawn()

    # ---- power-up effects ----------------------------------------------------------------

    def power_up_clear_bottom(self, num_rows: int) -> bool:
        n = int(num_rows)
        if n <= 0 or n > self.rows:
            return False
        self._grid = matrix.drop_bottom_rows(self._grid, n)
        LOG.debug("power-up removed bottom %d row(s)", n)
        return True

    def clear_bomb_area(self, center_x: int, center_y: int) -> bool:
        self._grid = matrix.clear_window(
            self._grid,
            row0=center_y - BOMB_REACH_BEFORE,
            row1=center_y + BOMB_REACH_AFTER,
            col0=center_x - BOMB_REACH_BEFORE,
            col1=center_x + BOMB_REACH_AFTER,
        )
        return True

    def _bomb_center(self) -> Tuple[int, int]:
        shape = self.rotator.current_shape
        for i in range(len(shape)):
            for j in range(len(shape[i])):
                if shape[i][j] != EMPTY_CELL:
                    return self._x + j, self._y + i
        return self._x, self._y

    def set_bomb_piece(self, armed: bool) -> None:
        self._bomb_armed = bool(armed)

    @property
    def is_bomb_piece_active(self) -> bool:
        return self._bomb_armed

    # ---- bomb effect mailbox ---------------------------------------------------------------

    def should_show_bomb_effect(self) -> bool:
        return self._bomb_effect

    def bomb_effect_coordinates(self) -> Tuple[int, int]:
        return self._bomb_effect_xy

    def clear_bomb_effect_flag(self) -> None:
        self._bomb_effect = False

    def take_bomb_effect(self) -> Optional[Tuple[int, int]]:
        """
        Drain the mailbox: coordinates if a blast is pending, else None.
        """
        if not self._bomb_effect:
            return None
        self._bomb_effect = False
        return self._bomb_effect_xy

    # ---- direct grid access (tests, scripted setups) ----------------------------------------

    def merge_shape(self, shape: np.ndarray, x: int, y: int) -> None:
        self._grid = matrix.merge(self._grid, shape, x, y)

    def load_grid(self, grid: np.ndarray) -> None:
        g = np.asarray(grid)
        if g.shape != (self.rows, self.cols):
            raise ValueError(f"grid must have shape {(self.rows, self.cols)}, got {g.shape}")
        self._grid = np.array(g, dtype=self._grid.dtype, copy=True)


__all__ = ["Board"]

# src/powertris/game/controller.py
from __future__ import annotations

from typing import Any, Callable, Optional, Union

from powertris.game.core.board import Board
from powertris.game.core.constants import ROW_CLEARER_ROWS
from powertris.game.core.powerups import PowerUp
from powertris.game.core.types import (
    Action,
    DownData,
    EventSource,
    EventType,
    MoveEvent,
    ViewData,
)
from powertris.utils.logging import setup_logger

LOG = setup_logger(name="powertris.game.controller", use_rich=True, level="info")

_ACTION_ALIASES = {
    "left": Action.LEFT,
    "right": Action.RIGHT,
    "down": Action.SOFT_DROP,
    "soft_drop": Action.SOFT_DROP,
    "drop": Action.HARD_DROP,
    "hard_drop": Action.HARD_DROP,
    "rotate": Action.ROTATE,
    "rotate_left": Action.ROTATE,
    "rot_ccw": Action.ROTATE,
    "ccw": Action.ROTATE,
    "hold": Action.HOLD,
}


class GameController:
    """
    Input policy on top of a Board.

    The board only knows the rules; this layer decides what a user input is
    worth and runs the lock sequence:

      - a successful USER soft drop earns soft_drop_points
      - a hard drop earns hard_drop_multiplier * distance (distance measured
        before the piece moves)
      - a lock clears lines, forwards the bonus to score and skill points,
        drains the bomb-effect mailbox and spawns the next piece

    Every score award is also forwarded to the power-up ledger.

    After game over every input returns the current snapshot unchanged until
    create_new_game().
    """

    def __init__(
            self,
            board: Board,
            *,
            soft_drop_points: int = 1,
            hard_drop_multiplier: int = 2,
            row_clearer_rows: int = ROW_CLEARER_ROWS,
            on_slow_motion: Optional[Callable[[], None]] = None,
            start: bool = True,
    ) -> None:
        self.board = board
        self.soft_drop_points = int(soft_drop_points)
        self.hard_drop_multiplier = int(hard_drop_multiplier)
        self.row_clearer_rows = int(row_clearer_rows)
        if not (0 < self.row_clearer_rows <= board.rows):
            raise ValueError(f"row_clearer_rows must be in [1, {board.rows}], got {self.row_clearer_rows}")
        self.on_slow_motion = on_slow_motion
        if start:
            self.board.spawn()

    # ---- state -------------------------------------------------------------------

    @property
    def game_over(self) -> bool:
        return bool(self.board.game_over)

    @property
    def score(self) -> int:
        return self.board.score.value

    @property
    def skill_points(self) -> int:
        return self.board.power_ups.skill_points

    def _award(self, points: int) -> None:
        if points <= 0:
            return
        self.board.score.add(points)
        self.board.power_ups.award_skill_points(points)

    def _lock_and_advance(self) -> DownData:
        self.board.lock()
        bomb_effect = self.board.take_bomb_effect()
        clear_row = self.board.clear_lines()
        if clear_row.lines_removed > 0:
            self._award(clear_row.score_bonus)
        if self.board.spawn():
            LOG.info("game over (score=%d)", self.board.score.value)
        return DownData(
            clear_row=clear_row,
            view_data=self.board.view(),
            bomb_effect=bomb_effect,
            game_over=self.game_over,
        )

    # ---- input events --------------------------------------------------------------

    def on_down_event(self, event: MoveEvent) -> DownData:
        if self.game_over:
            return DownData(clear_row=None, view_data=self.board.view(), game_over=True)
        if not self.board.move_down():
            return self._lock_and_advance()
        if event.event_source == EventSource.USER:
            self._award(self.soft_drop_points)
        return DownData(clear_row=None, view_data=self.board.view())

    def on_hard_drop_event(self, event: MoveEvent) -> DownData:
        if self.game_over:
            return DownData(clear_row=None, view_data=self.board.view(), game_over=True)
        distance = self.board.hard_drop_distance()
        if self.board.hard_drop():
            self._award(distance * self.hard_drop_multiplier)
        return self._lock_and_advance()

    def on_left_event(self, event: MoveEvent) -> ViewData:
        if not self.game_over:
            self.board.move_left()
        return self.board.view()

    def on_right_event(self, event: MoveEvent) -> ViewData:
        if not self.game_over:
            self.board.move_right()
        return self.board.view()

    def on_rotate_event(self, event: MoveEvent) -> ViewData:
        if not self.game_over:
            self.board.rotate_left()
        return self.board.view()

    def on_hold_event(self, event: MoveEvent) -> ViewData:
        if not self.game_over:
            self.board.hold()
        return self.board.view()

    def handle(self, event: MoveEvent) -> Union[DownData, ViewData]:
        t = event.event_type
        if t == EventType.DOWN:
            return self.on_down_event(event)
        if t == EventType.HARD_DROP:
            return self.on_hard_drop_event(event)
        if t == EventType.LEFT:
            return self.on_left_event(event)
        if t == EventType.RIGHT:
            return self.on_right_event(event)
        if t == EventType.ROTATE:
            return self.on_rotate_event(event)
        if t == EventType.HOLD:
            return self.on_hold_event(event)
        raise ValueError(f"unhandled event type {t!r}")

    def step(self, action: Any, *, source: EventSource = EventSource.USER) -> Union[DownData, ViewData]:
        """
        Apply one input given as an Action or a string alias ("left", "drop", ...).
        """
        a = self._normalize_action(action)
        event_type = {
            Action.LEFT: EventType.LEFT,
            Action.RIGHT: EventType.RIGHT,
            Action.SOFT_DROP: EventType.DOWN,
            Action.HARD_DROP: EventType.HARD_DROP,
            Action.ROTATE: EventType.ROTATE,
            Action.HOLD: EventType.HOLD,
        }[a]
        return self.handle(MoveEvent(event_type=event_type, event_source=source))

    def tick(self) -> DownData:
        """
        Gravity step issued by the external timer.
        """
        return self.on_down_event(MoveEvent(EventType.DOWN, EventSource.THREAD))

    @staticmethod
    def _normalize_action(action: Any) -> Action:
        if isinstance(action, Action):
            return action
        s = str(action).strip().lower()
        try:
            return _ACTION_ALIASES[s]
        except KeyError as e:
            raise ValueError(f"unknown action {action!r} (known: {sorted(_ACTION_ALIASES)})") from e

    # ---- game lifecycle ---------------------------------------------------------------

    def create_new_game(self) -> ViewData:
        self.board.new_game()
        LOG.info("new game started")
        return self.board.view()

    # ---- power-ups -------------------------------------------------------------------

    def purchase_power_up(self, kind: PowerUp | str) -> bool:
        return self.board.power_ups.purchase_power_up(kind)

    def power_up_description(self, kind: PowerUp | str) -> str:
        return PowerUp.parse(kind).describe(row_clearer_rows=self.row_clearer_rows)

    def activate_power_up(self, kind: PowerUp | str) -> bool:
        """
        Consume one owned power-up and apply it.

        ROW_CLEARER removes the bottom rows, BOMB_PIECE arms the active piece,
        SLOW_MOTION only notifies on_slow_motion (timing is the caller's).
        """
        p = PowerUp.parse(kind)
        if self.game_over:
            return False
        if not self.board.power_ups.use_power_up(p):
            return False

        if p is PowerUp.ROW_CLEARER:
            return self.board.power_up_clear_bottom(self.row_clearer_rows)
        if p is PowerUp.BOMB_PIECE:
            self.board.set_bomb_piece(True)
            return True
        if p is PowerUp.SLOW_MOTION:
            if self.on_slow_motion is not None:
                self.on_slow_motion()
            return True
        raise ValueError(f"unhandled power-up {p!r}")


__all__ = ["GameController"]

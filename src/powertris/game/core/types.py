# src/powertris/game/core/types.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple

import numpy as np


class Action(Enum):
    LEFT = auto()
    RIGHT = auto()
    SOFT_DROP = auto()
    HARD_DROP = auto()
    ROTATE = auto()
    HOLD = auto()


class EventType(Enum):
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    ROTATE = auto()
    HARD_DROP = auto()
    HOLD = auto()


class EventSource(Enum):
    USER = auto()
    THREAD = auto()


@dataclass(frozen=True)
class MoveEvent:
    event_type: EventType
    event_source: EventSource = EventSource.USER


@dataclass(frozen=True)
class ClearRow:
    """
    Result of a line-clear pass.

    new_matrix is an independent grid; score_bonus = 50 * lines_removed**2.
    """

    lines_removed: int
    new_matrix: np.ndarray
    score_bonus: int


@dataclass(frozen=True)
class NextShapeInfo:
    shape: np.ndarray
    position: int


@dataclass(frozen=True)
class ViewData:
    """
    Render-facing snapshot of the active piece.

    Contracts:
      - every array is an independent copy (mutating it never touches the board)
      - x/y are the column/row of the active shape's top-left corner
      - held_brick_data is None while the hold slot is empty
    """

    brick_data: np.ndarray
    x: int
    y: int
    next_brick_data: np.ndarray
    held_brick_data: Optional[np.ndarray] = None


@dataclass(frozen=True)
class DownData:
    """
    Outcome of a gravity tick or a hard drop.

    clear_row is None when the piece was still falling (no lock happened).
    bomb_effect is the drained blast centre (x, y) when a bomb piece exploded.
    """

    clear_row: Optional[ClearRow]
    view_data: ViewData
    bomb_effect: Optional[Tuple[int, int]] = None
    game_over: bool = False

# src/powertris/game/__init__.py
from __future__ import annotations

from powertris.game.controller import GameController
from powertris.game.core import (
    Action,
    Board,
    BrickGenerator,
    BrickRotator,
    ClearRow,
    DownData,
    EventSource,
    EventType,
    MoveEvent,
    PieceDef,
    PieceSet,
    PowerUp,
    PowerUpManager,
    Score,
    ViewData,
)

__all__ = [
    "GameController",
    "Action",
    "Board",
    "BrickGenerator",
    "BrickRotator",
    "ClearRow",
    "DownData",
    "EventSource",
    "EventType",
    "MoveEvent",
    "PieceDef",
    "PieceSet",
    "PowerUp",
    "PowerUpManager",
    "Score",
    "ViewData",
]

# src/powertris/game/core/__init__.py
from __future__ import annotations

from powertris.game.core import matrix
from powertris.game.core.board import Board
from powertris.game.core.generator import BrickGenerator
from powertris.game.core.piece_rules import BagPieceRule, PieceRule, UniformPieceRule, make_piece_rule
from powertris.game.core.pieceset import PieceDef, PieceSet
from powertris.game.core.powerups import PowerUp, PowerUpManager
from powertris.game.core.rotator import BrickRotator
from powertris.game.core.score import Score
from powertris.game.core.types import (
    Action,
    ClearRow,
    DownData,
    EventSource,
    EventType,
    MoveEvent,
    NextShapeInfo,
    ViewData,
)

__all__ = [
    "matrix",
    "Board",
    "BrickGenerator",
    "BrickRotator",
    "PieceRule",
    "UniformPieceRule",
    "BagPieceRule",
    "make_piece_rule",
    "PieceDef",
    "PieceSet",
    "PowerUp",
    "PowerUpManager",
    "Score",
    "Action",
    "ClearRow",
    "DownData",
    "EventSource",
    "EventType",
    "MoveEvent",
    "NextShapeInfo",
    "ViewData",
]

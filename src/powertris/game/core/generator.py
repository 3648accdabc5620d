# src/powertris/game/core/generator.py
from __future__ import annotations

from collections import deque
from typing import Deque, Optional

import numpy as np

from powertris.game.core.piece_rules import PieceRule, UniformPieceRule
from powertris.game.core.pieceset import PieceDef, PieceSet


class BrickGenerator:
    """
    Piece source with one piece of lookahead.

    The queue always holds at least two pieces before a draw: get_brick()
    pops the head, and next_brick peeks at the piece that will follow,
    without consuming it.
    """

    LOOKAHEAD = 2

    def __init__(
            self,
            pieces: PieceSet,
            *,
            rule: PieceRule | None = None,
            rng: Optional[np.random.Generator] = None,
            seed: Optional[int] = None,
    ) -> None:
        if len(pieces) == 0:
            raise ValueError("PieceSet has no kinds (empty pieceset is invalid).")
        self.pieces = pieces
        self._rule: PieceRule = rule or UniformPieceRule()
        self._queue: Deque[PieceDef] = deque()
        self.reset(rng=rng if rng is not None else np.random.default_rng(seed))

    def reset(self, *, rng: np.random.Generator) -> None:
        self._rng = rng
        self._rule.reset(rng=rng, kinds=self.pieces.kinds())
        self._queue.clear()
        self._fill()

    def _fill(self) -> None:
        while len(self._queue) < self.LOOKAHEAD:
            self._queue.append(self.pieces.get(self._rule.next_piece()))

    def get_brick(self) -> PieceDef:
        self._fill()
        brick = self._queue.popleft()
        self._fill()
        return brick

    @property
    def next_brick(self) -> PieceDef:
        return self._queue[0]


__all__ = ["BrickGenerator"]

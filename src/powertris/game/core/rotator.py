# src/powertris/game/core/rotator.py
from __future__ import annotations

from typing import Optional

import numpy as np

from powertris.game.core.pieceset import PieceDef
from powertris.game.core.types import NextShapeInfo


class BrickRotator:
    """
    Active piece identity + rotation index.

    The current shape is always derived as rotations[index]; next_shape()
    lets the board trial the following rotation before committing it.
    """

    def __init__(self, brick: Optional[PieceDef] = None) -> None:
        self._brick: Optional[PieceDef] = brick
        self._index = 0

    @property
    def brick(self) -> PieceDef:
        if self._brick is None:
            raise RuntimeError("BrickRotator has no brick (spawn a piece first)")
        return self._brick

    @brick.setter
    def brick(self, brick: PieceDef) -> None:
        self._brick = brick
        self._index = 0

    @property
    def has_brick(self) -> bool:
        return self._brick is not None

    @property
    def index(self) -> int:
        return self._index

    @property
    def current_shape(self) -> np.ndarray:
        return self.brick.mask(self._index)

    def next_shape(self) -> NextShapeInfo:
        pos = (self._index + 1) % self.brick.num_rotations()
        return NextShapeInfo(shape=self.brick.mask(pos), position=pos)

    def set_current_shape(self, position: int) -> None:
        n = self.brick.num_rotations()
        self._index = int(position) % n


__all__ = ["BrickRotator"]

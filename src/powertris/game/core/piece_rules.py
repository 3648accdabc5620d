# src/powertris/game/core/piece_rules.py
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np


class PieceRule(ABC):
    """
    Piece selection rule interface.

    Lifecycle:
      - reset(rng=..., kinds=...) is called once per game
      - next_piece() is called whenever the generator needs to refill its queue

    Rules may be stateful (store rng/kinds) but never create their own RNG streams.
    """

    @abstractmethod
    def reset(self, *, rng: np.random.Generator, kinds: Sequence[str]) -> None:
        raise NotImplementedError

    @abstractmethod
    def next_piece(self) -> str:
        raise NotImplementedError


@dataclass
class UniformPieceRule(PieceRule):
    """
    Independent uniform draw over all kinds on every call.

    No drought protection: the same kind may repeat any number of times.
    """

    _rng: np.random.Generator | None = None
    _kinds: tuple[str, ...] = ()

    def reset(self, *, rng: np.random.Generator, kinds: Sequence[str]) -> None:
        self._rng = rng
        self._kinds = tuple(str(k) for k in kinds)
        if not self._kinds:
            raise ValueError("UniformPieceRule requires non-empty kinds")

    def next_piece(self) -> str:
        if self._rng is None or not self._kinds:
            raise RuntimeError("UniformPieceRule.reset() must be called before next_piece()")
        i = int(self._rng.integers(0, len(self._kinds)))
        return self._kinds[i]


@dataclass
class BagPieceRule(PieceRule):
    """
    K-bag randomizer (generalization of 7-bag).

    bag_copies=1 is the classic 7-bag: every run of 7 consecutive bag draws
    starting at a bag boundary holds each kind exactly once.
    """

    bag_copies: int = 1

    _rng: np.random.Generator | None = None
    _kinds: tuple[str, ...] = ()
    _bag: list[str] = field(default_factory=list)

    def reset(self, *, rng: np.random.Generator, kinds: Sequence[str]) -> None:
        self._rng = rng
        self._kinds = tuple(str(k) for k in kinds)
        if not self._kinds:
            raise ValueError("BagPieceRule requires non-empty kinds")
        if int(self.bag_copies) <= 0:
            raise ValueError(f"BagPieceRule.bag_copies must be >= 1 (got {self.bag_copies})")
        self._bag = []
        self._refill()

    def _refill(self) -> None:
        if self._rng is None or not self._kinds:
            raise RuntimeError("BagPieceRule.reset() must be called before _refill()")
        self._bag = [k for k in self._kinds for _ in range(int(self.bag_copies))]
        self._rng.shuffle(self._bag)

    def next_piece(self) -> str:
        if self._rng is None or not self._kinds:
            raise RuntimeError("BagPieceRule.reset() must be called before next_piece()")
        if not self._bag:
            self._refill()
        # Pop from end (cheaper than pop(0))
        return self._bag.pop()


def make_piece_rule(name: str) -> PieceRule:
    n = str(name).strip().lower()
    if n == "uniform":
        return UniformPieceRule()
    if n in {"bag7", "bag"}:
        return BagPieceRule(bag_copies=1)
    raise ValueError(f"unknown piece_rule {name!r} (expected 'uniform' or 'bag7')")


__all__ = ["PieceRule", "UniformPieceRule", "BagPieceRule", "make_piece_rule"]

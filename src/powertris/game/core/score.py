# src/powertris/game/core/score.py
from __future__ import annotations

from typing import Callable, List

ScoreListener = Callable[[int], None]


class Score:
    """
    Running score of the current game.

    Observers registered with subscribe() are called with the new value after
    every change; the renderer may also just poll `value`.
    """

    def __init__(self) -> None:
        self._value = 0
        self._listeners: List[ScoreListener] = []

    @property
    def value(self) -> int:
        return self._value

    def add(self, points: int) -> None:
        self._value += int(points)
        self._notify()

    def reset(self) -> None:
        self._value = 0
        self._notify()

    def subscribe(self, listener: ScoreListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: ScoreListener) -> None:
        self._listeners.remove(listener)

    def _notify(self) -> None:
        for fn in list(self._listeners):
            fn(self._value)

    def __int__(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"Score({self._value})"


__all__ = ["Score", "ScoreListener"]

# src/powertris/game/core/powerups.py
from __future__ import annotations

from enum import Enum
from fractions import Fraction
from typing import Callable, Dict, List, Mapping, Optional

import numpy as np

from powertris.game.core.constants import ROW_CLEARER_ROWS, SKILL_POINTS_RATIO
from powertris.utils.logging import setup_logger

LOG = setup_logger(name="powertris.game.core.powerups", use_rich=True, level="info")

SkillPointsListener = Callable[[int], None]


class PowerUp(Enum):
    """
    Closed set of purchasable abilities.

    `index` is the slot of the kind in the inventory array.
    """

    ROW_CLEARER = (0, "Row Clearer", "Clears the bottom {rows} rows")
    SLOW_MOTION = (1, "Slow Motion", "Slows falling speed for 10 seconds")
    BOMB_PIECE = (2, "Bomb Piece", "Next piece explodes in 4x4 area on placement")

    def __init__(self, index: int, display_name: str, description: str) -> None:
        self.index = int(index)
        self.display_name = display_name
        self.description_template = description

    @property
    def description(self) -> str:
        return self.describe()

    def describe(self, *, row_clearer_rows: int = ROW_CLEARER_ROWS) -> str:
        """
        Player-facing text; ROW_CLEARER reports the configured row count.
        """
        return self.description_template.format(rows=int(row_clearer_rows))

    @classmethod
    def parse(cls, value: "PowerUp | str") -> "PowerUp":
        if isinstance(value, PowerUp):
            return value
        key = str(value).strip().upper().replace("-", "_").replace(" ", "_")
        try:
            return cls[key]
        except KeyError as e:
            raise ValueError(f"unknown power-up {value!r} (known: {[p.name for p in cls]})") from e


class PowerUpManager:
    """
    Skill-point ledger + power-up inventory.

    Contracts:
      - skill points accrue at 1 point per `points_ratio` score, exactly:
        the sub-point remainder is kept as a Fraction between calls
      - purchase_power_up() never drives the balance negative
      - use_power_up() never drives a quantity negative
      - failed purchases/uses change nothing
    """

    def __init__(
            self,
            *,
            costs: Optional[Mapping[PowerUp, int]] = None,
            points_ratio: int = SKILL_POINTS_RATIO,
    ) -> None:
        if int(points_ratio) <= 0:
            raise ValueError(f"points_ratio must be positive, got {points_ratio}")
        self.points_ratio = int(points_ratio)

        self._costs: Dict[PowerUp, int] = {p: 0 for p in PowerUp}
        for kind, cost in (costs or {}).items():
            p = PowerUp.parse(kind)
            c = int(cost)
            if c < 0:
                raise ValueError(f"cost of {p.name} must be >= 0, got {c}")
            self._costs[p] = c

        self._inventory = np.zeros(len(PowerUp), dtype=np.int64)
        self._skill_points = 0
        self._fraction = Fraction(0)
        self._listeners: List[SkillPointsListener] = []

    # ---- ledger ------------------------------------------------------------------

    @property
    def skill_points(self) -> int:
        return self._skill_points

    @property
    def fractional_skill_points(self) -> float:
        return float(self._fraction)

    def award_skill_points(self, score_earned: int) -> int:
        """
        Accrue score_earned / points_ratio and move whole points to the balance.

        Returns the number of whole points credited by this call.
        """
        self._fraction += Fraction(int(score_earned), self.points_ratio)
        whole = int(self._fraction)
        if whole <= 0:
            return 0
        self._fraction -= whole
        self._set_points(self._skill_points + whole)
        return whole

    def _set_points(self, value: int) -> None:
        self._skill_points = int(value)
        for fn in list(self._listeners):
            fn(self._skill_points)

    def subscribe(self, listener: SkillPointsListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: SkillPointsListener) -> None:
        self._listeners.remove(listener)

    # ---- inventory ---------------------------------------------------------------

    def cost(self, kind: PowerUp | str) -> int:
        return self._costs[PowerUp.parse(kind)]

    def quantity(self, kind: PowerUp | str) -> int:
        return int(self._inventory[PowerUp.parse(kind).index])

    def inventory(self) -> Dict[PowerUp, int]:
        return {p: int(self._inventory[p.index]) for p in PowerUp}

    def purchase_power_up(self, kind: PowerUp | str) -> bool:
        p = PowerUp.parse(kind)
        price = self._costs[p]
        if self._skill_points < price:
            LOG.debug("purchase %s rejected: balance=%d cost=%d", p.name, self._skill_points, price)
            return False
        self._inventory[p.index] += 1
        self._set_points(self._skill_points - price)
        LOG.debug("purchased %s for %d (balance=%d)", p.name, price, self._skill_points)
        return True

    def use_power_up(self, kind: PowerUp | str) -> bool:
        p = PowerUp.parse(kind)
        if self._inventory[p.index] <= 0:
            return False
        self._inventory[p.index] -= 1
        LOG.debug("used %s (left=%d)", p.name, int(self._inventory[p.index]))
        return True

    def reset(self) -> None:
        self._inventory[:] = 0
        self._fraction = Fraction(0)
        self._set_points(0)


__all__ = ["PowerUp", "PowerUpManager", "SkillPointsListener"]

# src/powertris/game/factory.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

import numpy as np

from powertris.config.game_spec import EngineConfig
from powertris.game.controller import GameController
from powertris.game.core.board import Board
from powertris.game.core.generator import BrickGenerator
from powertris.game.core.piece_rules import make_piece_rule
from powertris.game.core.pieceset import PieceSet
from powertris.game.core.powerups import PowerUpManager
from powertris.game.core.score import Score
from powertris.utils.logging import set_level


@dataclass(frozen=True)
class GameBundle:
    """
    Board + controller built from one EngineConfig.
    """

    board: Board
    controller: GameController
    cfg: EngineConfig


def _as_engine_config(cfg: Any) -> EngineConfig:
    if cfg is None:
        return EngineConfig()
    if isinstance(cfg, EngineConfig):
        return cfg
    if isinstance(cfg, Mapping):
        return EngineConfig.model_validate(dict(cfg))
    raise TypeError(f"cfg must be EngineConfig|mapping|None, got {type(cfg)!r}")


def make_board_from_cfg(
        cfg: Any = None,
        *,
        pieces: Optional[PieceSet] = None,
        rng: Optional[np.random.Generator] = None,
) -> Board:
    """
    Construct a Board (generator, score, power-up ledger included).

    An explicit rng wins over cfg.game.seed.
    """
    c = _as_engine_config(cfg)
    g = c.game
    piece_set = pieces or PieceSet.classic7()

    generator = BrickGenerator(
        piece_set,
        rule=make_piece_rule(g.piece_rule),
        rng=rng,
        seed=g.seed,
    )
    power_ups = PowerUpManager(
        costs=c.power_ups.costs(),
        points_ratio=c.power_ups.points_ratio,
    )
    return Board(
        g.rows,
        g.cols,
        spawn_rows=g.spawn_rows,
        generator=generator,
        score=Score(),
        power_ups=power_ups,
        spawn_x=g.spawn_x,
        spawn_y=g.spawn_y,
    )


def make_game_bundle_from_cfg(
        cfg: Any = None,
        *,
        pieces: Optional[PieceSet] = None,
        rng: Optional[np.random.Generator] = None,
        on_slow_motion: Optional[Callable[[], None]] = None,
) -> GameBundle:
    c = _as_engine_config(cfg)
    set_level(c.log_level)
    board = make_board_from_cfg(c, pieces=pieces, rng=rng)
    controller = GameController(
        board,
        soft_drop_points=c.scoring.soft_drop_points,
        hard_drop_multiplier=c.scoring.hard_drop_multiplier,
        row_clearer_rows=c.power_ups.row_clearer_rows,
        on_slow_motion=on_slow_motion,
    )
    return GameBundle(board=board, controller=controller, cfg=c)


__all__ = ["GameBundle", "make_board_from_cfg", "make_game_bundle_from_cfg"]

# src/powertris/cli/engine_speedtest.py
from __future__ import annotations

import argparse
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import numpy as np
from omegaconf import OmegaConf
from tqdm.auto import tqdm

from powertris.config.game_spec import EngineConfig
from powertris.config.io import load_engine_config
from powertris.game.core.powerups import PowerUp
from powertris.game.core.types import Action, DownData, ViewData
from powertris.game.factory import make_game_bundle_from_cfg
from powertris.utils.logging import setup_logger
from powertris.utils.seed import seed32_from

LOG = setup_logger(name="powertris.cli.engine_speedtest", use_rich=True, level="info")

# Random input mix: mostly moves/rotations, some drops, rare holds.
_ACTIONS = (Action.LEFT, Action.RIGHT, Action.ROTATE, Action.SOFT_DROP, Action.HARD_DROP, Action.HOLD)
_WEIGHTS = np.asarray([0.25, 0.25, 0.2, 0.15, 0.1, 0.05], dtype=np.float64)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        description="Drive random inputs through the powertris engine without rendering and report throughput."
    )
    ap.add_argument("--config", type=str, default=None, help="engine YAML config (default: built-in defaults)")
    ap.add_argument("--set", dest="overrides", action="append", default=[], help="dotlist override, e.g. game.seed=7")
    ap.add_argument("--steps", type=int, default=100_000)
    ap.add_argument("--seed", type=int, default=12345)
    ap.add_argument("--piece-rule", type=str, default=None, choices=["uniform", "bag7"])
    ap.add_argument("--gravity-every", type=int, default=4, help="issue a timer tick every N inputs (0 disables)")
    ap.add_argument("--power-ups", action="store_true", help="buy and fire power-ups whenever affordable")
    ap.add_argument("--no-progress", action="store_true")
    return ap.parse_args(argv)


def _load_cfg(args: argparse.Namespace) -> EngineConfig:
    overrides = list(args.overrides)
    if args.piece_rule is not None:
        overrides.append(f"game.piece_rule={args.piece_rule}")
    if args.config is not None:
        return load_engine_config(Path(args.config), overrides=overrides)
    if overrides:
        data = OmegaConf.to_container(OmegaConf.from_dotlist(overrides), resolve=True)
        return EngineConfig.model_validate(data)
    return EngineConfig()


@dataclass
class SpeedtestStats:
    steps: int = 0
    games_finished: int = 0
    score_sum: int = 0
    score_max: int = 0
    lines: int = 0
    bombs: int = 0
    power_ups_fired: int = 0

    def tally(self, out: Union[DownData, ViewData]) -> None:
        # one call per controller result
        if not isinstance(out, DownData) or out.clear_row is None:
            return
        self.lines += int(out.clear_row.lines_removed)
        if out.bomb_effect is not None:
            self.bombs += 1

    @property
    def avg_score(self) -> float:
        return (self.score_sum / self.games_finished) if self.games_finished > 0 else 0.0


def simulate(
        cfg: EngineConfig,
        *,
        steps: int,
        seed: int,
        gravity_every: int = 4,
        power_ups: bool = False,
        progress: bool = False,
) -> SpeedtestStats:
    """
    Play random inputs for `steps` iterations; a finished game is reseeded and restarted.
    """
    base_seed = int(seed)
    rng = np.random.default_rng(base_seed)

    bundle = make_game_bundle_from_cfg(cfg, rng=np.random.default_rng(seed32_from(base_seed=base_seed, stream_id=0)))
    controller = bundle.controller
    board = bundle.board

    stats = SpeedtestStats()
    bar = tqdm(total=int(steps), disable=not progress, unit="step")
    for step in range(1, int(steps) + 1):
        a = _ACTIONS[int(rng.choice(len(_ACTIONS), p=_WEIGHTS))]
        stats.tally(controller.step(a))

        if gravity_every > 0 and step % gravity_every == 0 and not controller.game_over:
            stats.tally(controller.tick())

        if power_ups and not controller.game_over:
            for p in PowerUp:
                if controller.purchase_power_up(p) and controller.activate_power_up(p):
                    stats.power_ups_fired += 1

        if controller.game_over:
            stats.games_finished += 1
            stats.score_sum += controller.score
            stats.score_max = max(stats.score_max, controller.score)
            board.generator.reset(
                rng=np.random.default_rng(seed32_from(base_seed=base_seed, stream_id=stats.games_finished))
            )
            controller.create_new_game()

        stats.steps = step
        bar.update(1)
    bar.close()
    return stats


def run_speedtest(args: argparse.Namespace) -> int:
    cfg = _load_cfg(args)

    t0 = time.perf_counter()
    stats = simulate(
        cfg,
        steps=int(args.steps),
        seed=int(args.seed),
        gravity_every=int(args.gravity_every),
        power_ups=bool(args.power_ups),
        progress=not bool(args.no_progress),
    )
    elapsed = time.perf_counter() - t0
    sps = stats.steps / max(elapsed, 1e-12)
    LOG.info(
        "DONE: piece_rule=%s steps=%d elapsed=%.3fs steps/s=%.1f games_finished=%d "
        "avg_score=%.1f max_score=%d lines=%d bombs=%d power_ups_fired=%d",
        cfg.game.piece_rule,
        stats.steps,
        elapsed,
        sps,
        stats.games_finished,
        stats.avg_score,
        stats.score_max,
        stats.lines,
        stats.bombs,
        stats.power_ups_fired,
    )
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    return run_speedtest(parse_args(argv))


if __name__ == "__main__":
    raise SystemExit(main())

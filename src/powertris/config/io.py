# src/powertris/config/io.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from omegaconf import DictConfig, OmegaConf
from pydantic import BaseModel

from powertris.config.game_spec import EngineConfig


def to_plain_dict(cfg: Any) -> dict[str, Any]:
    if isinstance(cfg, BaseModel):
        return cfg.model_dump(mode="json")
    if isinstance(cfg, DictConfig):
        data = OmegaConf.to_container(cfg, resolve=True)
        if not isinstance(data, dict):
            raise TypeError("config must resolve to a mapping")
        return data
    if isinstance(cfg, Mapping):
        return dict(cfg)
    raise TypeError(f"unsupported config type: {type(cfg).__name__}")


def load_yaml(path: Path) -> dict[str, Any]:
    cfg_path = Path(path)
    cfg = OmegaConf.load(cfg_path)
    data = OmegaConf.to_container(cfg, resolve=True)
    if not isinstance(data, dict):
        raise TypeError(f"config({path}) must be a mapping")
    return data


def load_engine_config(path: Path, *, overrides: list[str] | None = None) -> EngineConfig:
    """
    Load an EngineConfig from YAML, optionally applying dotlist overrides
    such as ["game.seed=7", "power_ups.bomb_piece_cost=20"].
    """
    base = OmegaConf.create(load_yaml(path))
    if overrides:
        base = OmegaConf.merge(base, OmegaConf.from_dotlist(list(overrides)))
    return EngineConfig.model_validate(to_plain_dict(base))


__all__ = ["to_plain_dict", "load_yaml", "load_engine_config"]

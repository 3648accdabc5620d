# src/powertris/config/__init__.py
from __future__ import annotations

from powertris.config.base import ConfigBase
from powertris.config.game_spec import EngineConfig, GameConfig, PieceRuleName, PowerUpConfig, ScoringConfig
from powertris.config.io import load_engine_config, load_yaml, to_plain_dict

__all__ = [
    "ConfigBase",
    "EngineConfig",
    "GameConfig",
    "PieceRuleName",
    "PowerUpConfig",
    "ScoringConfig",
    "load_engine_config",
    "load_yaml",
    "to_plain_dict",
]

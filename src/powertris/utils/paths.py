# src/powertris/utils/paths.py
from __future__ import annotations

from pathlib import Path


def package_root() -> Path:
    """
    Return the installed `powertris` package directory.
    """
    return Path(__file__).resolve().parent.parent


def _find_repo_root(start: Path) -> Path | None:
    for p in [start, *start.parents]:
        if (p / "pyproject.toml").is_file():
            return p
    return None


def repo_root() -> Path:
    """
    Return the repository root by searching upwards for pyproject.toml.
    """
    root = _find_repo_root(package_root())
    if root is None:
        raise FileNotFoundError("Could not locate repo root (pyproject.toml not found).")
    return root


def assets_dir() -> Path:
    """
    Return powertris/assets (must exist; shipped as package data).
    """
    p = package_root() / "assets"
    if not p.is_dir():
        raise FileNotFoundError(f"Assets directory not found: {p}")
    return p


def pieces_dir() -> Path:
    """
    Return powertris/assets/pieces (must exist).
    """
    p = assets_dir() / "pieces"
    if not p.is_dir():
        raise FileNotFoundError(f"Pieces directory not found: {p}")
    return p


def default_config_path() -> Path:
    """
    Return repo_root/configs/default.yaml (source checkouts only).
    """
    p = repo_root() / "configs" / "default.yaml"
    if not p.is_file():
        raise FileNotFoundError(f"Default config not found: {p}")
    return p


__all__ = ["package_root", "repo_root", "assets_dir", "pieces_dir", "default_config_path"]

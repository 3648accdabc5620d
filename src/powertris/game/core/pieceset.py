# src/powertris/game/core/pieceset.py
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import yaml

from powertris.game.core.constants import GRID_DTYPE
from powertris.utils.paths import pieces_dir


def _parse_color(v: object) -> Optional[Tuple[int, int, int]]:
    if v is None:
        return None
    if not isinstance(v, (list, tuple)) or len(v) != 3:
        raise ValueError(f"color must be a 3-item list/tuple, got {v!r}")
    r, g, b = v
    for c in (r, g, b):
        if not isinstance(c, int) or not (0 <= c <= 255):
            raise ValueError(f"color components must be ints in [0,255], got {v!r}")
    return int(r), int(g), int(b)


def _parse_rotation(rows: Sequence[str], *, cell_id: int) -> np.ndarray:
    """
    Parse a list of '#'/'.' strings into a square matrix holding cell_id / 0.
    """
    if not isinstance(rows, (list, tuple)) or len(rows) == 0:
        raise ValueError("rotation must be a non-empty list of strings")

    width = None
    out: List[List[int]] = []
    for r in rows:
        if not isinstance(r, str) or len(r) == 0:
            raise ValueError(f"rotation rows must be non-empty strings, got {r!r}")
        if width is None:
            width = len(r)
        elif len(r) != width:
            raise ValueError(f"rotation rows must have equal width, got widths {width} and {len(r)}")

        out.append([cell_id if ch == "#" else 0 for ch in r])

    arr = np.asarray(out, dtype=GRID_DTYPE)
    h, w = arr.shape
    if h != w:
        raise ValueError(f"rotation must be a square mask, got {h}x{w}")

    if int(np.count_nonzero(arr)) <= 0:
        raise ValueError("rotation must have at least one filled cell ('#')")
    return arr


@dataclass(frozen=True, eq=False)
class PieceDef:
    """
    Immutable piece identity: kind, grid cell id and its rotation states.

    Every rotation matrix holds cell_id on filled cells, so merging a shape
    into the grid writes the piece's colour class directly.
    """

    kind: str
    cell_id: int
    rotations: Tuple[np.ndarray, ...]
    color: Optional[Tuple[int, int, int]] = None

    def num_rotations(self) -> int:
        return len(self.rotations)

    def mask(self, rot: int) -> np.ndarray:
        rots = self.rotations
        return rots[int(rot) % len(rots)]

    def shape_matrices(self) -> List[np.ndarray]:
        return [r.copy() for r in self.rotations]

    def cell_count(self) -> int:
        # all rotations have the same number of blocks (validated)
        return int(np.count_nonzero(self.rotations[0]))


@dataclass(frozen=True)
class PieceSet:
    """
    Pure geometry + optional colors, loaded from YAML.

    Provides:
      - stable ordering of kinds
      - mask(kind, rot)
      - board_id(kind) in 1..K (grid cell value; 0 reserved for empty)

    Asset contract:
      - rotations are listed in the order the rotator cycles through them
      - every rotation is a square mask
    """

    pieces: Dict[str, PieceDef]
    kind_order: Tuple[str, ...]

    @staticmethod
    def default_classic7_path() -> Path:
        return pieces_dir() / "classic7.yaml"

    @classmethod
    def classic7(cls) -> "PieceSet":
        return _load_cached(str(cls.default_classic7_path()))

    @classmethod
    def from_yaml(cls, path: Path, *, expected_cells: Optional[int] = None) -> "PieceSet":
        p = Path(path)
        data = yaml.safe_load(p.read_text(encoding="utf-8"))
        return cls.from_mapping(data, expected_cells=expected_cells)

    @classmethod
    def from_mapping(cls, data: object, *, expected_cells: Optional[int] = None) -> "PieceSet":
        if not isinstance(data, dict):
            raise ValueError(f"piece YAML must be a mapping at top-level, got {type(data)!r}")

        # Asset-level invariant: number of filled cells per piece
        if expected_cells is None:
            v = data.get("expected_cells", None)
            if isinstance(v, int):
                expected_cells = v
            elif isinstance(v, str):
                expected_cells = int(v)
            elif v is None:
                expected_cells = None
            else:
                raise TypeError(f"expected_cells must be int or str, got {type(v)!r}")

        pieces_node = data.get("pieces")
        if not isinstance(pieces_node, dict) or not pieces_node:
            raise ValueError("piece YAML must contain non-empty mapping 'pieces:'")

        pieces: Dict[str, PieceDef] = {}
        kind_order: List[str] = []

        for idx, (kind, spec) in enumerate(pieces_node.items()):
            if not isinstance(kind, str) or not kind:
                raise ValueError(f"piece key must be a non-empty string, got {kind!r}")
            if not isinstance(spec, dict):
                raise ValueError(f"piece spec for {kind!r} must be a mapping, got {type(spec)!r}")

            cell_id = idx + 1
            if cell_id > np.iinfo(GRID_DTYPE).max:
                raise ValueError(f"too many piece kinds for a {GRID_DTYPE} grid")

            rotations_node = spec.get("rotations")
            if not isinstance(rotations_node, list) or not rotations_node:
                raise ValueError(f"{kind!r}: 'rotations' must be a non-empty list")

            rotations: List[np.ndarray] = []
            for i, rot_rows in enumerate(rotations_node):
                if not isinstance(rot_rows, (list, tuple)):
                    raise ValueError(
                        f"{kind!r}: rotations[{i}] must be a list of strings, got {type(rot_rows)!r}"
                    )
                try:
                    rotations.append(_parse_rotation(rot_rows, cell_id=cell_id))
                except ValueError as e:
                    raise ValueError(f"{kind!r}: rotations[{i}]: {e}") from e

            cell_counts = [int(np.count_nonzero(r)) for r in rotations]
            if len(set(cell_counts)) != 1:
                raise ValueError(f"{kind!r}: rotations must have same filled cell count, got {cell_counts}")

            if expected_cells is not None and cell_counts[0] != int(expected_cells):
                raise ValueError(f"{kind!r}: expected {expected_cells} filled cells, got {cell_counts[0]}")

            color = _parse_color(spec.get("color"))

            for r in rotations:
                r.setflags(write=False)
            pieces[kind] = PieceDef(kind=kind, cell_id=cell_id, rotations=tuple(rotations), color=color)
            kind_order.append(kind)

        return cls(pieces=pieces, kind_order=tuple(kind_order))

    def kinds(self) -> Tuple[str, ...]:
        return self.kind_order

    def __contains__(self, kind: str) -> bool:
        return kind in self.pieces

    def __len__(self) -> int:
        return len(self.kind_order)

    def get(self, kind: str) -> PieceDef:
        try:
            return self.pieces[kind]
        except KeyError as e:
            raise KeyError(f"unknown piece kind {kind!r}. known kinds={list(self.kind_order)!r}") from e

    def mask(self, kind: str, rot: int) -> np.ndarray:
        return self.get(kind).mask(rot)

    def num_rotations(self, kind: str) -> int:
        return int(self.get(kind).num_rotations())

    def board_id(self, kind: str) -> int:
        return int(self.get(kind).cell_id)

    def board_id_to_kind(self, board_id: int) -> str:
        bid = int(board_id)
        if bid <= 0:
            raise ValueError("board_id must be >= 1 (0 is empty)")
        if bid > len(self.kind_order):
            raise ValueError(f"board_id out of range: {bid} (valid 1..{len(self.kind_order)})")
        return self.kind_order[bid - 1]

    def color_of(self, kind: str) -> Optional[Tuple[int, int, int]]:
        return self.get(kind).color


@lru_cache(maxsize=8)
def _load_cached(path: str) -> PieceSet:
    return PieceSet.from_yaml(Path(path))


__all__ = ["PieceDef", "PieceSet"]

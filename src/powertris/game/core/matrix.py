# src/powertris/game/core/matrix.py
from __future__ import annotations

"""
Pure grid/shape operations.

Conventions:
  - grids are (rows, cols) arrays indexed grid[row, col]; 0 = empty
  - x is a column offset, y is a row offset
  - shapes are SQUARE matrices. The collision/merge loops walk the shape as
    i = 0..len(shape)-1, j = 0..len(shape[i])-1, read shape[j][i] and target
    (x + i, y + j). With square shapes this places shape row j on grid row
    y + j and shape column i on grid column x + i.

Nothing here mutates its inputs: every grid-producing function returns a new
array, so grids handed out earlier stay valid.
"""

from typing import Iterable, List

import numpy as np

from powertris.game.core.constants import EMPTY_CELL, GRID_DTYPE, LINE_CLEAR_BASE
from powertris.game.core.types import ClearRow


def _out_of_bounds(grid: np.ndarray, x: int, y: int) -> bool:
    rows, cols = grid.shape
    return not (0 <= x < cols and 0 <= y < rows)


def intersect(grid: np.ndarray, shape: np.ndarray, x: int, y: int) -> bool:
    """
    True iff a nonzero cell of `shape` placed at (x, y) lands outside the grid
    or on an occupied grid cell.
    """
    g = np.asarray(grid)
    s = np.asarray(shape)
    n = len(s)
    for i in range(n):
        for j in range(len(s[i])):
            if s[j][i] == EMPTY_CELL:
                continue
            tx = x + i
            ty = y + j
            if _out_of_bounds(g, tx, ty) or g[ty, tx] != EMPTY_CELL:
                return True
    return False


def copy(grid: np.ndarray) -> np.ndarray:
    return np.array(grid, copy=True)


def copy_all(matrices: Iterable[np.ndarray]) -> List[np.ndarray]:
    return [copy(m) for m in matrices]


def merge(grid: np.ndarray, shape: np.ndarray, x: int, y: int) -> np.ndarray:
    """
    Return a new grid with every in-bounds nonzero shape cell written at (x, y).

    Cells falling outside the grid are dropped.
    """
    out = copy(grid)
    s = np.asarray(shape)
    for i in range(len(s)):
        for j in range(len(s[i])):
            v = s[j][i]
            if v == EMPTY_CELL:
                continue
            tx = x + i
            ty = y + j
            if not _out_of_bounds(out, tx, ty):
                out[ty, tx] = v
    return out


def clear_bonus(cleared: int) -> int:
    return int(LINE_CLEAR_BASE * cleared * cleared)


def check_removing(grid: np.ndarray) -> ClearRow:
    """
    Remove every complete row (all cells nonzero).

    Surviving rows keep their order and end up flush with the bottom; the
    vacated rows at the top are zero.
    """
    g = np.asarray(grid)
    rows, cols = g.shape
    full = np.all(g != EMPTY_CELL, axis=1)
    cleared = int(full.sum())

    kept = g[~full]
    out = np.zeros((rows, cols), dtype=g.dtype)
    if kept.shape[0] > 0:
        out[rows - kept.shape[0]:, :] = kept
    return ClearRow(lines_removed=cleared, new_matrix=out, score_bonus=clear_bonus(cleared))


def drop_bottom_rows(grid: np.ndarray, count: int) -> np.ndarray:
    """
    Remove the bottom `count` rows regardless of content, shift the rest down
    and zero-fill the top. `count` must be in 0..rows.
    """
    g = np.asarray(grid)
    rows, cols = g.shape
    n = int(count)
    if n < 0 or n > rows:
        raise ValueError(f"count must be in [0, {rows}], got {n}")
    out = np.zeros((rows, cols), dtype=g.dtype)
    if rows - n > 0:
        out[n:, :] = g[: rows - n, :]
    return out


def clear_window(grid: np.ndarray, *, row0: int, row1: int, col0: int, col1: int) -> np.ndarray:
    """
    Return a new grid with the inclusive window [row0..row1] x [col0..col1]
    zeroed, clipped to the grid bounds.
    """
    out = copy(grid)
    rows, cols = out.shape
    r0 = max(0, int(row0))
    r1 = min(rows - 1, int(row1))
    c0 = max(0, int(col0))
    c1 = min(cols - 1, int(col1))
    if r0 <= r1 and c0 <= c1:
        out[r0: r1 + 1, c0: c1 + 1] = EMPTY_CELL
    return out


def empty_grid(rows: int, cols: int) -> np.ndarray:
    return np.zeros((int(rows), int(cols)), dtype=GRID_DTYPE)


__all__ = [
    "intersect",
    "copy",
    "copy_all",
    "merge",
    "clear_bonus",
    "check_removing",
    "drop_bottom_rows",
    "clear_window",
    "empty_grid",
]

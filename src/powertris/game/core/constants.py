# src/powertris/game/core/constants.py
from __future__ import annotations

# Board / cell encoding
EMPTY_CELL: int = 0
GRID_DTYPE = "int8"

# Default board geometry (25 rows total: 2 hidden spawn rows + 23 visible)
DEFAULT_VISIBLE_ROWS: int = 23
DEFAULT_SPAWN_ROWS: int = 2
DEFAULT_COLS: int = 10

# Spawn offset of a fresh piece: column, row
SPAWN_X: int = 4
SPAWN_Y: int = 0

# Horizontal offsets tried, in order, when an in-place rotation collides
KICK_OFFSETS: tuple[int, ...] = (-1, 1, -2, 2)

# Line clear bonus = LINE_CLEAR_BASE * cleared**2
LINE_CLEAR_BASE: int = 50

# Bomb blast window, relative to the blast centre (inclusive)
BOMB_REACH_BEFORE: int = 1
BOMB_REACH_AFTER: int = 2

# Rows removed by the row-clearer power-up
ROW_CLEARER_ROWS: int = 3

# Score points per skill point
SKILL_POINTS_RATIO: int = 10

# Classic tetromino set size
CLASSIC_NUM_PIECES: int = 7

# tests/test_board.py
from __future__ import annotations

import numpy as np
import pytest

from powertris.game.core.board import Board
from powertris.game.core.pieceset import PieceSet

# 1x1 piece: makes every drop and lock easy to reason about.
DOT = PieceSet.from_mapping({"pieces": {"dot": {"rotations": [["#"]]}}})

# Two-cell piece with two states in a 3x3 box:
#   state 0: column 1, rows 0-1     state 1: row 2, columns 0-1
DOMINO = PieceSet.from_mapping(
    {
        "pieces": {
            "domino": {
                "rotations": [
                    [".#.", ".#.", "..."],
                    ["...", "...", "##."],
                ]
            }
        }
    }
)

BLOCK = PieceSet.from_mapping({"pieces": {"block": {"rotations": [["##", "##"]]}}})


def _board(pieces: PieceSet, rows: int = 4, cols: int = 4, *, x: int = 0, y: int = 0) -> Board:
    b = Board(rows, cols, pieces=pieces, spawn_x=x, spawn_y=y)
    assert b.spawn() is False
    return b


# ---- construction ---------------------------------------------------------------------


def test_board_rejects_bad_dimensions() -> None:
    with pytest.raises(ValueError, match="rows must be positive"):
        Board(0, 4, pieces=DOT)
    with pytest.raises(ValueError, match="cols must be positive"):
        Board(4, 0, pieces=DOT)
    with pytest.raises(ValueError, match="spawn_rows"):
        Board(4, 4, spawn_rows=4, pieces=DOT)


def test_default_board_uses_classic_pieces_and_hides_spawn_rows() -> None:
    b = Board(25, 10, spawn_rows=2)
    assert b.grid.shape == (25, 10)
    assert b.visible_grid().shape == (23, 10)
    assert b.spawn() is False
    assert b.offset == (4, 0)
    assert b.active_brick.kind in PieceSet.classic7()


# ---- movement --------------------------------------------------------------------------


def test_moves_commit_only_when_free() -> None:
    b = _board(DOT, rows=3, cols=3, x=1)
    assert b.move_left()
    assert b.offset == (0, 0)
    assert not b.move_left()
    assert b.offset == (0, 0)

    assert b.move_right() and b.move_right()
    assert not b.move_right()
    assert b.offset == (2, 0)

    assert b.move_down() and b.move_down()
    assert not b.move_down()
    assert b.offset == (2, 2)


def test_moves_are_blocked_by_locked_cells() -> None:
    b = _board(DOT, rows=3, cols=3)
    g = np.zeros((3, 3), dtype=np.int8)
    g[1, 0] = 1
    g[0, 1] = 1
    b.load_grid(g)
    assert not b.move_down()
    assert not b.move_right()
    assert b.offset == (0, 0)


# ---- rotation ----------------------------------------------------------------------------


def test_rotate_in_place_when_free() -> None:
    b = _board(DOMINO, rows=4, cols=6, x=2)
    assert b.rotate_left()
    assert b.offset == (2, 0)
    assert b.rotator.index == 1
    assert b.rotate_left()
    assert b.rotator.index == 0


def test_wall_kick_at_left_wall_shifts_right_by_one() -> None:
    b = _board(DOMINO, rows=4, cols=6, x=0)
    g = np.zeros((4, 6), dtype=np.int8)
    g[2, 0] = 1  # blocks the in-place rotation; x=-1 is outside the wall
    b.load_grid(g)

    assert b.rotate_left()
    assert b.offset == (1, 0)
    assert b.rotator.index == 1


def test_wall_kick_falls_through_to_plus_two() -> None:
    b = _board(DOMINO, rows=4, cols=6, x=0)
    g = np.zeros((4, 6), dtype=np.int8)
    g[2, 0] = 1
    g[2, 1] = 1  # blocks in place and x+1; x-1 and x-2 are outside
    b.load_grid(g)

    assert b.rotate_left()
    assert b.offset == (2, 0)


def test_wall_kick_prefers_minus_two_over_plus_two() -> None:
    b = _board(DOMINO, rows=4, cols=6, x=2)
    g = np.zeros((4, 6), dtype=np.int8)
    g[2, 2] = 1
    g[2, 3] = 1  # blocks in place, x-1 and x+1
    b.load_grid(g)

    assert b.rotate_left()
    assert b.offset == (0, 0)


def test_failed_rotation_changes_nothing() -> None:
    b = _board(DOMINO, rows=4, cols=4, x=1)
    g = np.zeros((4, 4), dtype=np.int8)
    g[2, :] = 1
    b.load_grid(g)

    assert not b.rotate_left()
    assert b.offset == (1, 0)
    assert b.rotator.index == 0


# ---- drops ---------------------------------------------------------------------------------


def test_hard_drop_lands_on_the_floor_or_the_stack() -> None:
    b = _board(DOT)
    assert b.hard_drop_distance() == 3
    assert b.offset == (0, 0)
    assert b.hard_drop() is True
    assert b.offset == (0, 3)
    assert b.hard_drop_distance() == 0

    b = _board(DOT)
    g = np.zeros((4, 4), dtype=np.int8)
    g[2, 0] = 1
    b.load_grid(g)
    assert b.hard_drop_distance() == 1
    b.hard_drop()
    assert b.offset == (0, 1)


# ---- hold / spawn ----------------------------------------------------------------------------


def test_hold_latch_and_swap() -> None:
    b = Board(25, 10, spawn_rows=2)
    b.spawn()
    first = b.active_brick
    upcoming = b.generator.next_brick

    b.move_down()
    assert b.hold()
    assert b.held_brick is first
    assert b.active_brick is upcoming
    assert b.offset == (4, 0)
    assert not b.can_hold
    assert not b.hold()

    b.spawn()
    current = b.active_brick
    b.rotate_left()
    assert b.hold()
    assert b.active_brick is first
    assert b.held_brick is current
    assert b.rotator.index == 0
    assert b.offset == (4, 0)


def test_spawn_collision_is_game_over() -> None:
    b = Board(2, 2, pieces=DOT, spawn_x=0)
    g = np.zeros((2, 2), dtype=np.int8)
    g[0, 0] = 3
    b.load_grid(g)
    assert b.spawn() is True
    assert b.game_over


# ---- lock / clear -----------------------------------------------------------------------------


def test_lock_merges_the_active_piece() -> None:
    b = _board(BLOCK, x=1)
    b.hard_drop()
    b.lock()
    g = b.grid
    assert g[2:, 1:3].tolist() == [[1, 1], [1, 1]]
    assert int(np.count_nonzero(g)) == 4


def test_clear_lines_scores_and_shifts_down() -> None:
    b = _board(DOT)
    g = np.zeros((4, 4), dtype=np.int8)
    g[3, 1:] = 2
    g[2, 3] = 5
    b.load_grid(g)

    b.hard_drop()
    b.lock()
    res = b.clear_lines()
    assert res.lines_removed == 1
    assert res.score_bonus == 50

    expected = np.zeros((4, 4), dtype=np.int8)
    expected[3, 3] = 5
    assert np.array_equal(b.grid, expected)
    assert np.array_equal(res.new_matrix, expected)


# ---- bomb -------------------------------------------------------------------------------------


def test_bomb_lock_clears_clipped_window_without_merging() -> None:
    b = _board(BLOCK, rows=6, cols=6)
    b.load_grid(np.ones((6, 6), dtype=np.int8))
    b.set_bomb_piece(True)
    assert b.is_bomb_piece_active

    b.lock()
    g = b.grid
    assert int(np.count_nonzero(g[:3, :3])) == 0
    assert int(np.count_nonzero(g)) == 36 - 9
    assert not b.is_bomb_piece_active

    assert b.should_show_bomb_effect()
    assert b.should_show_bomb_effect()
    assert b.bomb_effect_coordinates() == (0, 0)
    b.clear_bomb_effect_flag()
    assert not b.should_show_bomb_effect()


def test_bomb_in_open_space_clears_a_full_4x4_window() -> None:
    b = _board(BLOCK, rows=6, cols=6, x=2, y=2)
    b.load_grid(np.ones((6, 6), dtype=np.int8))
    b.set_bomb_piece(True)
    b.lock()
    g = b.grid
    assert int(np.count_nonzero(g[1:5, 1:5])) == 0
    assert int(np.count_nonzero(g)) == 36 - 16
    assert b.take_bomb_effect() == (2, 2)
    assert b.take_bomb_effect() is None


def test_bomb_centre_is_the_first_filled_cell() -> None:
    b = _board(DOMINO, rows=6, cols=6, x=2, y=1)
    b.set_bomb_piece(True)
    b.lock()
    # state 0 fills (x+1, y) first
    assert b.bomb_effect_coordinates() == (3, 1)
    assert int(np.count_nonzero(b.grid)) == 0


# ---- power-up effects --------------------------------------------------------------------------


def test_power_up_clear_bottom_bounds() -> None:
    b = _board(DOT)
    g = np.zeros((4, 4), dtype=np.int8)
    for r in range(4):
        g[r, 3] = r + 1
    b.load_grid(g)

    assert not b.power_up_clear_bottom(0)
    assert not b.power_up_clear_bottom(5)
    assert np.array_equal(b.grid, g)

    assert b.power_up_clear_bottom(1)
    assert b.grid[:, 3].tolist() == [0, 1, 2, 3]

    assert b.power_up_clear_bottom(4)
    assert int(np.count_nonzero(b.grid)) == 0


# ---- snapshots / lifecycle ------------------------------------------------------------------------


def test_snapshots_are_independent_copies() -> None:
    b = Board(25, 10, spawn_rows=2)
    b.spawn()
    b.hold()

    g = b.grid
    g[:] = 7
    assert int(np.count_nonzero(b.grid)) == 0

    v = b.view()
    v.brick_data[:] = 9
    v.next_brick_data[:] = 9
    v.held_brick_data[:] = 9
    again = b.view()
    assert not np.any(again.brick_data == 9)
    assert not np.any(again.next_brick_data == 9)
    assert not np.any(again.held_brick_data == 9)

    res = b.clear_lines()
    res.new_matrix[:] = 3
    assert int(np.count_nonzero(b.grid)) == 0


def test_view_reports_offset_and_empty_hold_slot() -> None:
    b = _board(DOT, x=2)
    b.move_down()
    v = b.view()
    assert (v.x, v.y) == (2, 1)
    assert v.held_brick_data is None
    assert v.brick_data.tolist() == [[1]]


def test_new_game_resets_everything() -> None:
    b = _board(DOT)
    b.hard_drop()
    b.lock()
    b.score.add(120)
    b.power_ups.award_skill_points(120)
    b.hold()
    b.set_bomb_piece(True)
    b.game_over = True

    assert b.new_game() is False
    assert int(np.count_nonzero(b.grid)) == 0
    assert b.score.value == 0
    assert b.power_ups.skill_points == 0
    assert b.held_brick is None
    assert b.can_hold
    assert not b.is_bomb_piece_active
    assert not b.game_over
    assert b.offset == (0, 0)


def test_load_grid_rejects_wrong_shape() -> None:
    b = _board(DOT)
    with pytest.raises(ValueError, match="grid must have shape"):
        b.load_grid(np.zeros((3, 4), dtype=np.int8))


def test_four_single_merges_fill_and_clear_the_bottom_row() -> None:
    b = Board(4, 4, pieces=DOT)
    b.merge_shape(np.asarray([[2]], dtype=np.int8), 1, 2)
    for col in range(4):
        b.merge_shape(DOT.mask("dot", 0), col, 3)

    res = b.clear_lines()
    assert res.lines_removed == 1
    assert res.score_bonus == 50

    expected = np.zeros((4, 4), dtype=np.int8)
    expected[3, 1] = 2
    assert np.array_equal(b.grid, expected)


def test_board_without_active_piece_needs_a_spawn() -> None:
    b = Board(4, 4, pieces=DOT)
    with pytest.raises(RuntimeError, match="spawn a piece first"):
        b.view()
    with pytest.raises(RuntimeError, match="spawn a piece first"):
        b.move_left()
    b.spawn()
    assert b.view().brick_data.tolist() == [[1]]

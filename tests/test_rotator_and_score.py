# tests/test_rotator_and_score.py
from __future__ import annotations

import numpy as np
import pytest

from powertris.game.core.pieceset import PieceSet
from powertris.game.core.rotator import BrickRotator
from powertris.game.core.score import Score


def test_rotator_without_brick_raises() -> None:
    r = BrickRotator()
    assert not r.has_brick
    with pytest.raises(RuntimeError, match="no brick"):
        _ = r.current_shape


def test_next_shape_is_a_trial_until_committed() -> None:
    ps = PieceSet.classic7()
    r = BrickRotator(ps.get("T"))

    nxt = r.next_shape()
    assert nxt.position == 1
    assert np.array_equal(nxt.shape, ps.mask("T", 1))
    assert r.index == 0

    r.set_current_shape(nxt.position)
    assert np.array_equal(r.current_shape, ps.mask("T", 1))

    r.set_current_shape(3)
    assert r.next_shape().position == 0


def test_single_state_piece_rotates_onto_itself() -> None:
    r = BrickRotator(PieceSet.classic7().get("O"))
    assert r.next_shape().position == 0


def test_setting_a_brick_resets_the_rotation() -> None:
    ps = PieceSet.classic7()
    r = BrickRotator(ps.get("J"))
    r.set_current_shape(2)
    r.brick = ps.get("L")
    assert r.index == 0
    assert r.brick is ps.get("L")


def test_score_add_reset_and_notifications() -> None:
    s = Score()
    seen: list[int] = []
    s.subscribe(seen.append)

    s.add(50)
    s.add(2)
    assert s.value == 52
    assert int(s) == 52

    s.reset()
    assert s.value == 0
    assert seen == [50, 52, 0]

    s.unsubscribe(seen.append)
    s.add(1)
    assert seen == [50, 52, 0]

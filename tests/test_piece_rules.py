# tests/test_piece_rules.py
from __future__ import annotations

import numpy as np
import pytest

from powertris.game.core.generator import BrickGenerator
from powertris.game.core.piece_rules import BagPieceRule, UniformPieceRule, make_piece_rule
from powertris.game.core.pieceset import PieceSet

KINDS = PieceSet.classic7().kinds()


def test_bag7_deals_every_kind_once_per_bag() -> None:
    rule = BagPieceRule()
    rule.reset(rng=np.random.default_rng(0), kinds=KINDS)
    for _ in range(5):
        bag = [rule.next_piece() for _ in range(len(KINDS))]
        assert sorted(bag) == sorted(KINDS)


def test_uniform_rule_stays_within_kinds_and_is_seed_stable() -> None:
    a = UniformPieceRule()
    b = UniformPieceRule()
    a.reset(rng=np.random.default_rng(42), kinds=KINDS)
    b.reset(rng=np.random.default_rng(42), kinds=KINDS)
    seq_a = [a.next_piece() for _ in range(200)]
    seq_b = [b.next_piece() for _ in range(200)]
    assert seq_a == seq_b
    assert set(seq_a) <= set(KINDS)


@pytest.mark.parametrize("rule", [UniformPieceRule(), BagPieceRule()])
def test_rules_require_reset(rule) -> None:
    with pytest.raises(RuntimeError, match="reset"):
        rule.next_piece()


def test_rules_reject_empty_kinds() -> None:
    with pytest.raises(ValueError, match="non-empty kinds"):
        UniformPieceRule().reset(rng=np.random.default_rng(0), kinds=())


def test_make_piece_rule() -> None:
    assert isinstance(make_piece_rule("uniform"), UniformPieceRule)
    assert isinstance(make_piece_rule("BAG7"), BagPieceRule)
    with pytest.raises(ValueError, match="unknown piece_rule"):
        make_piece_rule("tgm3")


def test_generator_next_brick_is_the_next_one_drawn() -> None:
    gen = BrickGenerator(PieceSet.classic7(), seed=7)
    for _ in range(50):
        upcoming = gen.next_brick
        assert gen.next_brick is upcoming  # peeking does not consume
        assert gen.get_brick() is upcoming


def test_generator_reset_restarts_the_stream() -> None:
    ps = PieceSet.classic7()
    gen = BrickGenerator(ps, rule=BagPieceRule(), rng=np.random.default_rng(3))
    first = [gen.get_brick().kind for _ in range(10)]
    gen.reset(rng=np.random.default_rng(3))
    assert [gen.get_brick().kind for _ in range(10)] == first


def test_generator_rejects_empty_pieceset() -> None:
    with pytest.raises(ValueError, match="empty pieceset"):
        BrickGenerator(PieceSet(pieces={}, kind_order=()))

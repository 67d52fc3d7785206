from __future__ import annotations

from random import Random

from danger_close.systems.dice import DicePoolResult, roll_pool


def test_roll_pool_size_and_faces() -> None:
    values = roll_pool(Random(4), 12)
    assert len(values) == 12
    assert all(1 <= v <= 6 for v in values)
    assert roll_pool(Random(4), -1) == ()


def test_pool_summary() -> None:
    result = DicePoolResult((6, 2, 5, 5))
    assert result.highest == 6
    assert result.lowest == 2
    assert result.count_at_least(5) == 3


def test_empty_pool_summary() -> None:
    result = DicePoolResult(())
    assert result.highest is None
    assert result.lowest is None
    assert result.count_at_least(1) == 0

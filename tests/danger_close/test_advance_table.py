from __future__ import annotations

from random import Random

import pytest
from hypothesis import given
from hypothesis import strategies as st

from danger_close.domain.types import Cover, ModifierSet, Space, ThreatLevel
from danger_close.systems.advance import (
    OUTCOME_EFFECTS,
    OUTCOME_TABLE,
    AdvanceDice,
    AdvanceOutcome,
    advance_log_text,
    determine_outcome,
    resolve_advance,
    sample_advance_dice,
)
from tests.helpers.factories import make_sector


@pytest.mark.parametrize(
    ("threat", "total", "expected"),
    [
        (ThreatLevel.LIGHT, 0, AdvanceOutcome.SPOTTED),
        (ThreatLevel.LIGHT, 4, AdvanceOutcome.ADVANTAGE),
        (ThreatLevel.LIGHT, 5, AdvanceOutcome.SURPRISE),
        (ThreatLevel.LIGHT, 6, AdvanceOutcome.OVERWHELM),
        (ThreatLevel.STANDARD, 2, AdvanceOutcome.AMBUSHED),
        (ThreatLevel.STANDARD, 3, AdvanceOutcome.SPOTTED),
        (ThreatLevel.STANDARD, 4, AdvanceOutcome.SPOTTED),
        (ThreatLevel.STANDARD, 5, AdvanceOutcome.ADVANTAGE),
        (ThreatLevel.STANDARD, 6, AdvanceOutcome.OVERWHELM),
        (ThreatLevel.HEAVY, 3, AdvanceOutcome.AMBUSHED),
        (ThreatLevel.HEAVY, 5, AdvanceOutcome.SPOTTED),
        (ThreatLevel.HEAVY, 6, AdvanceOutcome.ADVANTAGE),
        (ThreatLevel.HEAVY, 12, AdvanceOutcome.ADVANTAGE),
        (ThreatLevel.OVERWHELMING, 6, AdvanceOutcome.AMBUSHED),
        (ThreatLevel.OVERWHELMING, 7, AdvanceOutcome.SPOTTED),
    ],
)
def test_outcome_bands(threat: ThreatLevel, total: int, expected: AdvanceOutcome) -> None:
    assert determine_outcome(total, threat) == expected


def test_table_covers_every_threat_level() -> None:
    assert set(OUTCOME_TABLE) == set(ThreatLevel)
    assert set(OUTCOME_EFFECTS) == set(AdvanceOutcome)


@given(st.sampled_from(list(ThreatLevel)), st.integers(min_value=-20, max_value=30))
def test_higher_totals_never_do_worse(threat: ThreatLevel, total: int) -> None:
    order = list(AdvanceOutcome)
    assert order.index(determine_outcome(total + 1, threat)) >= order.index(determine_outcome(total, threat))


def test_advance_dice_are_two_d3() -> None:
    rng = Random(7)
    for _ in range(200):
        dice = sample_advance_dice(rng)
        assert 1 <= dice.first <= 3
        assert 1 <= dice.second <= 3


def test_resolve_advance_adds_modifiers() -> None:
    result = resolve_advance(AdvanceDice(3, 3), ModifierSet(mobility=1), ThreatLevel.STANDARD)
    assert result.total == 7
    assert result.outcome == AdvanceOutcome.OVERWHELM
    assert result.effect.positions is None

    worse = resolve_advance(AdvanceDice(1, 1), ModifierSet(weather=-2), ThreatLevel.STANDARD)
    assert worse.total == 0
    assert worse.outcome == AdvanceOutcome.AMBUSHED


def test_surprise_grants_momentum() -> None:
    assert OUTCOME_EFFECTS[AdvanceOutcome.SURPRISE].momentum == 1
    assert all(effect.momentum == 0 for outcome, effect in OUTCOME_EFFECTS.items() if outcome != AdvanceOutcome.SURPRISE)


def test_advance_log_text() -> None:
    sector = make_sector(name="  ", cover=Cover.DENSE, space=Space.OPEN)
    text = advance_log_text("Bravo", sector, AdvanceOutcome.SPOTTED)
    assert text == (
        "Bravo ADVANCES >> Unnamed Sector\n"
        "Cover: Dense ++ Space: Open ++ Threat Level: TL 2\n"
        "STATUS: Spotted"
    )

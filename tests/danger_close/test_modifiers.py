from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from danger_close.domain.types import ArmorId, Status, Weather
from danger_close.systems.modifiers import (
    compute_advance_modifiers,
    fatigue_modifier,
    injuries_modifier,
    mobility_modifier,
    weather_modifier,
)
from tests.helpers.factories import make_combatant, make_sector, make_squad


@pytest.mark.parametrize(
    ("wounded", "expected"),
    [(0, 0), (1, -1), (2, -1), (3, -2), (4, -2), (5, -2)],
)
def test_injuries_modifier_bands(wounded: int, expected: int) -> None:
    roster = tuple(
        make_combatant(i, status=Status.WOUNDED if i <= wounded else Status.OK) for i in range(1, 6)
    )
    assert injuries_modifier(roster) == expected


def test_grazed_is_not_wounded() -> None:
    assert injuries_modifier(make_squad(status=Status.GRAZED)) == 0


def test_reserve_injuries_are_ignored() -> None:
    roster = make_squad() + tuple(make_combatant(i, status=Status.DEAD) for i in range(6, 10))
    assert injuries_modifier(roster) == 0


def test_mobility_modifier() -> None:
    assert mobility_modifier(make_squad()) == 0
    assert mobility_modifier(make_squad(armor=ArmorId.LIGHT)) == 1
    assert mobility_modifier(make_squad(armor=ArmorId.MEDIUM)) == 0

    mixed = make_squad(armor=ArmorId.LIGHT)[:4] + (make_combatant(5, armor=ArmorId.HEAVY),)
    assert mobility_modifier(mixed) == -1

    partly_armored = make_squad()[:4] + (make_combatant(5, armor=ArmorId.LIGHT),)
    assert mobility_modifier(partly_armored) == 1


@pytest.mark.parametrize(("rolls", "expected"), [(0, 0), (2, 0), (3, -1), (5, -1), (6, -2), (-4, 0)])
def test_fatigue_modifier(rolls: int, expected: int) -> None:
    assert fatigue_modifier(rolls) == expected


@given(st.integers(min_value=0, max_value=200))
def test_fatigue_is_non_increasing(rolls: int) -> None:
    assert fatigue_modifier(rolls + 1) <= fatigue_modifier(rolls) <= 0


def test_weather_modifier() -> None:
    assert weather_modifier(None) == 0
    assert weather_modifier(make_sector(weather=Weather.NORMAL)) == 0
    assert weather_modifier(make_sector(weather=Weather.BAD)) == -1
    assert weather_modifier(make_sector(weather=Weather.TERRIBLE)) == -2


def test_compute_advance_modifiers_sums_components() -> None:
    roster = make_squad(armor=ArmorId.HEAVY)[:4] + (make_combatant(5, status=Status.BLEEDING_OUT),)
    modifiers = compute_advance_modifiers(roster, make_sector(weather=Weather.BAD), prior_advance_rolls=3, custom=2)

    assert modifiers.injuries == -1
    assert modifiers.mobility == -1
    assert modifiers.fatigue == -1
    assert modifiers.weather == -1
    assert modifiers.custom == 2
    assert modifiers.total == -2

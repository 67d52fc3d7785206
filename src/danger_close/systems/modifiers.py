from __future__ import annotations

from typing import Sequence

from danger_close.domain.types import ArmorId, Combatant, ModifierSet, Sector, Weather, deployed

WEATHER_MODIFIERS: dict[Weather, int] = {
    Weather.NORMAL: 0,
    Weather.BAD: -1,
    Weather.TERRIBLE: -2,
}

ROLLS_PER_FATIGUE_STEP = 3


def injuries_modifier(roster: Sequence[Combatant]) -> int:
    wounded = sum(1 for combatant in deployed(roster) if combatant.wounded)
    if wounded >= 3:
        return -2
    if wounded > 0:
        return -1
    return 0


def mobility_modifier(roster: Sequence[Combatant]) -> int:
    armored = [c for c in deployed(roster) if c.armor is not None]
    if not armored:
        return 0
    if all(c.armor == ArmorId.LIGHT for c in armored):
        return 1
    if any(c.armor == ArmorId.HEAVY for c in armored):
        return -1
    return 0


def fatigue_modifier(prior_advance_rolls: int) -> int:
    return -(max(0, prior_advance_rolls) // ROLLS_PER_FATIGUE_STEP)


def weather_modifier(sector: Sector | None) -> int:
    if sector is None:
        return 0
    return WEATHER_MODIFIERS[sector.weather]


def compute_advance_modifiers(
    roster: Sequence[Combatant],
    sector: Sector | None,
    prior_advance_rolls: int,
    custom: int = 0,
) -> ModifierSet:
    return ModifierSet(
        injuries=injuries_modifier(roster),
        mobility=mobility_modifier(roster),
        fatigue=fatigue_modifier(prior_advance_rolls),
        weather=weather_modifier(sector),
        custom=int(custom),
    )

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from danger_close.domain.types import (
    Combatant,
    DefensivePosition,
    GearId,
    IntentKind,
    OffenseContribution,
    OffensePool,
    OffensivePosition,
    Sector,
    Space,
    WeaponId,
    deployed,
    format_modifier,
)

POSITION_BONUS: dict[OffensivePosition, int] = {
    OffensivePosition.FLANKING: 1,
    OffensivePosition.ENGAGED: 0,
    OffensivePosition.LIMITED: -1,
}

FORTIFIED_GEAR_BONUS: tuple[GearId, ...] = (GearId.SNIPER_RIFLE, GearId.HMG)


def combatant_contribution(combatant: Combatant, sector: Sector | None) -> OffenseContribution:
    if combatant.incapacitated:
        return OffenseContribution(combatant.id, 0, (f"{combatant.status.value}: cannot fire",))
    if combatant.intent is None:
        return OffenseContribution(combatant.id, 0, ("No intent",))
    if combatant.intent.kind != IntentKind.FIRE:
        return OffenseContribution(combatant.id, 0, (f"{combatant.intent.label()}: not firing",))

    value = 1
    rationale = ["Fire +1"]

    position = combatant.offensive_position
    bonus = POSITION_BONUS[position]
    if bonus:
        value += bonus
        rationale.append(f"{position.value} {format_modifier(bonus)}")

    space = sector.space if sector is not None else None
    if (
        combatant.weapon == WeaponId.MARKSMAN_RIFLE
        and position == OffensivePosition.LIMITED
        and space in (Space.TRANSITIONAL, Space.OPEN)
    ):
        value += 1
        rationale.append(f"Marksman Rifle, Limited in {space.value} +1")
    if combatant.weapon == WeaponId.CARBINE and position == OffensivePosition.ENGAGED and space == Space.TIGHT:
        value += 1
        rationale.append("Carbine, Engaged in Tight +1")

    if combatant.defensive_position == DefensivePosition.FORTIFIED:
        for gear in FORTIFIED_GEAR_BONUS:
            if combatant.has_gear(gear):
                value += 1
                rationale.append(f"Fortified with {gear.value} +1")

    return OffenseContribution(combatant.id, value, tuple(rationale))


def compute_offense_pool(roster: Sequence[Combatant], sector: Sector | None) -> OffensePool:
    return OffensePool(tuple(combatant_contribution(c, sector) for c in deployed(roster)))


@dataclass(frozen=True)
class OffensePoolOverride:
    """Manual offense pool value kept alongside the computed total.

    An unpinned manual value survives recomputation until the computed total
    actually changes; a pinned one is kept until cleared.
    """

    computed: int = 0
    manual: int | None = None
    pinned: bool = False

    @property
    def value(self) -> int:
        return self.manual if self.manual is not None else self.computed

    def set_manual(self, value: int | None, pinned: bool = False) -> "OffensePoolOverride":
        if value is None:
            return OffensePoolOverride(computed=self.computed)
        return OffensePoolOverride(computed=self.computed, manual=max(0, int(value)), pinned=pinned)

    def reconcile(self, computed: int) -> "OffensePoolOverride":
        if computed == self.computed:
            return self
        if self.pinned:
            return OffensePoolOverride(computed=computed, manual=self.manual, pinned=True)
        return OffensePoolOverride(computed=computed)

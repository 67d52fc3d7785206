from __future__ import annotations

from dataclasses import replace
from typing import Literal, Sequence

from danger_close.domain.types import Combatant, Intent, clamp_ammo, clamp_grit


def _replace_one(roster: Sequence[Combatant], combatant_id: int, update) -> tuple[Combatant, ...] | None:
    for index, combatant in enumerate(roster):
        if combatant.id == combatant_id:
            changed = update(combatant)
            if changed == combatant:
                return None
            updated = list(roster)
            updated[index] = changed
            return tuple(updated)
    return None


def bump_stat(
    roster: Sequence[Combatant], combatant_id: int, stat: Literal["grit", "ammo"], delta: int
) -> tuple[Combatant, ...] | None:
    if stat == "grit":
        return _replace_one(roster, combatant_id, lambda c: replace(c, grit=clamp_grit(c.grit + delta)))
    if stat == "ammo":
        return _replace_one(roster, combatant_id, lambda c: replace(c, ammo=clamp_ammo(c.ammo + delta)))
    return None


def cycle_status(roster: Sequence[Combatant], combatant_id: int) -> tuple[Combatant, ...] | None:
    return _replace_one(roster, combatant_id, lambda c: replace(c, status=c.status.next_in_cycle()))


def set_intent(roster: Sequence[Combatant], combatant_id: int, intent: Intent | None) -> tuple[Combatant, ...] | None:
    return _replace_one(roster, combatant_id, lambda c: replace(c, intent=intent))


def toggle_at_risk(roster: Sequence[Combatant], combatant_id: int) -> tuple[Combatant, ...] | None:
    return _replace_one(roster, combatant_id, lambda c: replace(c, at_risk=not c.at_risk))


def find_combatant(roster: Sequence[Combatant], combatant_id: int) -> Combatant | None:
    for combatant in roster:
        if combatant.id == combatant_id:
            return combatant
    return None

"""Enemy tactics: a threat-gated d6 draw against a fixed six-entry table."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from random import Random
from typing import Sequence

from danger_close.domain.types import (
    Combatant,
    DefensivePosition,
    OffensivePosition,
    ThreatLevel,
    deployed,
)
from danger_close.systems.dice import roll_d6


class Tactic(str, Enum):
    ENFILADE = "Enfilade"
    SUPPRESSION = "Suppression"
    PINNED_DOWN = "Pinned Down"
    GRENADE_VOLLEY = "Grenade Volley"
    COUNTER_BATTERY = "Counter-Battery"
    ENCROACHMENT = "Encroachment"


@dataclass(frozen=True)
class TacticEffect:
    description: str
    # Which position a combatant must hold to be affected, and where it goes.
    from_offensive: OffensivePosition | None = None
    to_offensive: OffensivePosition | None = None
    from_defensive: DefensivePosition | None = None
    to_defensive: DefensivePosition | None = None
    everyone: bool = False

    def matches(self, combatant: Combatant) -> bool:
        if self.from_offensive is not None:
            return combatant.offensive_position == self.from_offensive
        return combatant.defensive_position == self.from_defensive


TACTIC_TABLE: tuple[Tactic, ...] = (
    Tactic.ENFILADE,
    Tactic.SUPPRESSION,
    Tactic.PINNED_DOWN,
    Tactic.GRENADE_VOLLEY,
    Tactic.COUNTER_BATTERY,
    Tactic.ENCROACHMENT,
)

TACTIC_EFFECTS: dict[Tactic, TacticEffect] = {
    Tactic.ENFILADE: TacticEffect(
        "One random Fortified trooper becomes Flanked.",
        from_defensive=DefensivePosition.FORTIFIED,
        to_defensive=DefensivePosition.FLANKED,
    ),
    Tactic.SUPPRESSION: TacticEffect(
        "One random Flanking trooper becomes Limited.",
        from_offensive=OffensivePosition.FLANKING,
        to_offensive=OffensivePosition.LIMITED,
    ),
    Tactic.PINNED_DOWN: TacticEffect(
        "One random Engaged trooper becomes Limited.",
        from_offensive=OffensivePosition.ENGAGED,
        to_offensive=OffensivePosition.LIMITED,
    ),
    Tactic.GRENADE_VOLLEY: TacticEffect(
        "One random In Cover trooper becomes Flanked.",
        from_defensive=DefensivePosition.IN_COVER,
        to_defensive=DefensivePosition.FLANKED,
    ),
    Tactic.COUNTER_BATTERY: TacticEffect(
        "Every Flanking trooper becomes Engaged.",
        from_offensive=OffensivePosition.FLANKING,
        to_offensive=OffensivePosition.ENGAGED,
        everyone=True,
    ),
    Tactic.ENCROACHMENT: TacticEffect(
        "One random Fortified trooper drops to In Cover.",
        from_defensive=DefensivePosition.FORTIFIED,
        to_defensive=DefensivePosition.IN_COVER,
    ),
}


@dataclass(frozen=True)
class TacticRoll:
    draw: int
    threat: ThreatLevel | None
    tactic: Tactic | None

    @property
    def triggered(self) -> bool:
        return self.tactic is not None

    @property
    def effect(self) -> TacticEffect | None:
        return TACTIC_EFFECTS[self.tactic] if self.tactic is not None else None


def sample_tactic_draw(rng: Random) -> int:
    return roll_d6(rng)


def resolve_tactic(draw: int, threat: ThreatLevel | None, rng: Random) -> TacticRoll:
    if threat is None or draw > int(threat):
        return TacticRoll(draw=draw, threat=threat, tactic=None)
    return TacticRoll(draw=draw, threat=threat, tactic=rng.choice(TACTIC_TABLE))


@dataclass(frozen=True)
class TacticApplication:
    roster: tuple[Combatant, ...]
    affected_ids: tuple[int, ...]


def apply_tactic(roster: Sequence[Combatant], tactic: Tactic, rng: Random) -> TacticApplication:
    effect = TACTIC_EFFECTS[tactic]
    deployed_count = len(deployed(roster))
    candidates = [
        index
        for index, c in enumerate(roster)
        if index < deployed_count and not c.incapacitated and effect.matches(c)
    ]
    if not candidates:
        return TacticApplication(roster=tuple(roster), affected_ids=())
    chosen = candidates if effect.everyone else [rng.choice(candidates)]

    updated = list(roster)
    for index in chosen:
        updated[index] = updated[index].with_positions(effect.to_offensive, effect.to_defensive)
    return TacticApplication(roster=tuple(updated), affected_ids=tuple(roster[i].id for i in chosen))

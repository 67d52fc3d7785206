"""Offensive/defensive position rules.

Covers the injury threshold for a stance, how many injuries a hit inflicts at a
given threat level, position transitions, and the advisory terrain limits on
how many combatants may hold a position in a sector.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from random import Random
from typing import Sequence

from danger_close.domain.events import TerrainAlert
from danger_close.domain.types import (
    ArmorId,
    Combatant,
    Cover,
    DefensivePosition,
    IntentKind,
    OffensivePosition,
    Sector,
    Space,
    Status,
    ThreatLevel,
    deployed,
)
from danger_close.systems.dice import roll_d6

INJURY_THRESHOLDS: dict[DefensivePosition, int] = {
    DefensivePosition.FORTIFIED: 1,
    DefensivePosition.IN_COVER: 2,
    DefensivePosition.FLANKED: 3,
}

# Intents that move the combatant out of its stored stance for the exchange.
INTENT_STANCE_OVERRIDES: dict[IntentKind, DefensivePosition] = {
    IntentKind.MOVE_UP: DefensivePosition.FLANKED,
    IntentKind.FALL_BACK: DefensivePosition.IN_COVER,
}

# Chance (in six) that a hit at this threat level inflicts two injuries.
DOUBLE_INJURY_CHANCE: dict[ThreatLevel, int] = {
    ThreatLevel.LIGHT: 0,
    ThreatLevel.STANDARD: 0,
    ThreatLevel.HEAVY: 2,
    ThreatLevel.OVERWHELMING: 3,
}

# None means no limit.
FORTIFIED_LIMITS: dict[Cover, int | None] = {
    Cover.EXPOSED: 0,
    Cover.NORMAL: 2,
    Cover.DENSE: None,
}

FLANKING_LIMITS: dict[Space, int | None] = {
    Space.TIGHT: 0,
    Space.TRANSITIONAL: 2,
    Space.OPEN: None,
}


def effective_stance(combatant: Combatant) -> DefensivePosition:
    if combatant.intent is not None:
        override = INTENT_STANCE_OVERRIDES.get(combatant.intent.kind)
        if override is not None:
            return override
    return combatant.defensive_position


def injury_threshold(combatant: Combatant) -> int:
    """Highest d6 result that counts as a hit; 0 means fully shielded."""
    threshold = INJURY_THRESHOLDS[effective_stance(combatant)]
    if combatant.armor == ArmorId.HEAVY:
        threshold -= 1
    return max(0, threshold)


def injury_count(threat: ThreatLevel, rng: Random) -> int:
    chance = DOUBLE_INJURY_CHANCE[threat]
    if chance and roll_d6(rng) <= chance:
        return 2
    return 1


@dataclass(frozen=True)
class IncomingFireResult:
    combatant_id: int
    roll: int
    threshold: int
    injuries: int
    status_before: Status
    status_after: Status

    @property
    def hit(self) -> bool:
        return self.injuries > 0


def resolve_incoming_fire(combatant: Combatant, threat: ThreatLevel, rng: Random) -> IncomingFireResult:
    threshold = injury_threshold(combatant)
    roll = roll_d6(rng)
    injuries = injury_count(threat, rng) if roll <= threshold else 0
    return IncomingFireResult(
        combatant_id=combatant.id,
        roll=roll,
        threshold=threshold,
        injuries=injuries,
        status_before=combatant.status,
        status_after=combatant.status.worsen(injuries),
    )


def can_change_position(combatant: Combatant, roster: Sequence[Combatant]) -> bool:
    deployed_ids = {c.id for c in deployed(roster)}
    return combatant.id in deployed_ids and not combatant.incapacitated


def set_position(
    roster: Sequence[Combatant],
    combatant_id: int,
    offensive: OffensivePosition | None = None,
    defensive: DefensivePosition | None = None,
) -> tuple[Combatant, ...] | None:
    """Return the updated roster, or None when the transition is not allowed."""
    for index, combatant in enumerate(roster):
        if combatant.id != combatant_id:
            continue
        if not can_change_position(combatant, roster):
            return None
        updated = list(roster)
        updated[index] = combatant.with_positions(offensive, defensive)
        return tuple(updated)
    return None


def apply_positions(
    roster: Sequence[Combatant],
    offensive: OffensivePosition,
    defensive: DefensivePosition,
) -> tuple[Combatant, ...]:
    """Move every deployed, able combatant into the given positions."""
    deployed_count = len(deployed(roster))
    return tuple(
        c.with_positions(offensive, defensive) if index < deployed_count and not c.incapacitated else c
        for index, c in enumerate(roster)
    )


def terrain_alerts(roster: Sequence[Combatant], sector: Sector | None) -> list[TerrainAlert]:
    if sector is None:
        return []
    active = [c for c in deployed(roster) if not c.incapacitated]
    alerts: list[TerrainAlert] = []

    fortified = tuple(c.id for c in active if c.defensive_position == DefensivePosition.FORTIFIED)
    fortified_limit = FORTIFIED_LIMITS[sector.cover]
    if fortified_limit is not None and len(fortified) > fortified_limit:
        if fortified_limit == 0:
            message = f"{sector.cover.value} cover: no trooper can be Fortified."
        else:
            message = f"{sector.cover.value} cover: no more than {fortified_limit} troopers Fortified."
        alerts.append(
            TerrainAlert(rule="cover", message=message, combatant_ids=fortified, limit=fortified_limit, count=len(fortified))
        )

    flanking = tuple(c.id for c in active if c.offensive_position == OffensivePosition.FLANKING)
    flanking_limit = FLANKING_LIMITS[sector.space]
    if flanking_limit is not None and len(flanking) > flanking_limit:
        if flanking_limit == 0:
            message = f"{sector.space.value} space: no trooper can be Flanking."
        else:
            message = f"{sector.space.value} space: no more than {flanking_limit} troopers Flanking."
        alerts.append(
            TerrainAlert(rule="space", message=message, combatant_ids=flanking, limit=flanking_limit, count=len(flanking))
        )
    return alerts


def apply_injuries(roster: Sequence[Combatant], results: Sequence[IncomingFireResult]) -> tuple[Combatant, ...]:
    by_id = {result.combatant_id: result for result in results}
    return tuple(
        replace(c, status=by_id[c.id].status_after) if c.id in by_id else c
        for c in roster
    )

from __future__ import annotations

import logging
from dataclasses import replace
from random import Random

from danger_close.domain.events import LogEvent
from danger_close.domain.reports import SectorUpdate
from danger_close.domain.types import (
    MOMENTUM_MAX,
    MOMENTUM_MIN,
    DefenseCountdown,
    EngagementStatus,
    Sector,
    ThreatLevel,
    clamp_momentum,
)

logger = logging.getLogger(__name__)

DEFENSE_HOLD_MOMENTUM = 1


def victory_threshold(threat: ThreatLevel | int) -> int:
    return min(MOMENTUM_MAX, int(threat) + 1)


def momentum_status(momentum: int, threat: ThreatLevel | None) -> EngagementStatus | None:
    if momentum <= MOMENTUM_MIN:
        return EngagementStatus.DEFEAT
    if threat is not None and momentum >= victory_threshold(threat):
        return EngagementStatus.VICTORY
    return None


def engagement_status(sector: Sector) -> EngagementStatus | None:
    if sector.defense is not None:
        return sector.defense.resolved
    return momentum_status(sector.momentum, sector.threat_level)


def _status_event(squad_name: str, sector: Sector, status: EngagementStatus) -> LogEvent:
    verb = "won" if status == EngagementStatus.VICTORY else "lost"
    return LogEvent(
        kind="momentum",
        text=f"{squad_name} {verb} engagement >> {sector.display_name} (Momentum {sector.momentum:+d})",
        data={"sector_id": sector.id, "status": status.value, "momentum": sector.momentum},
    )


def adjust(sector: Sector, delta: int, squad_name: str) -> SectorUpdate:
    step = (delta > 0) - (delta < 0)
    momentum = clamp_momentum(sector.momentum + step)
    if momentum == sector.momentum:
        logger.debug("Momentum for %s already at bound %d", sector.id, momentum)
        return SectorUpdate.unchanged(sector)

    updated = replace(sector, momentum=momentum)
    if updated.defense is not None:
        return SectorUpdate(sector=updated, changed=True)

    status = momentum_status(momentum, updated.threat_level)
    if status == sector.reported_status:
        return SectorUpdate(sector=updated, changed=True)

    updated = replace(updated, reported_status=status)
    events: tuple[LogEvent, ...] = ()
    if status is not None:
        events = (_status_event(squad_name, updated, status),)
    return SectorUpdate(sector=updated, changed=True, events=events)


def enter_defense_objective(sector: Sector, rng: Random) -> SectorUpdate:
    threat = sector.threat_level
    if threat is None or sector.defense is not None:
        return SectorUpdate.unchanged(sector)
    goal = int(threat) + rng.randint(1, 2)
    updated = replace(sector, defense=DefenseCountdown(goal=goal), reported_status=None)
    event = LogEvent(
        kind="defense",
        text=f"DEFENSE OBJECTIVE >> {sector.display_name}: hold for {goal} exchanges",
        data={"sector_id": sector.id, "goal": goal},
    )
    return SectorUpdate(sector=updated, changed=True, events=(event,))


def complete_exchange(sector: Sector, squad_name: str) -> SectorUpdate:
    defense = sector.defense
    if defense is None or defense.resolved is not None:
        return SectorUpdate.unchanged(sector)

    goal = max(0, defense.goal - 1)
    if goal > 0:
        return SectorUpdate(sector=replace(sector, defense=DefenseCountdown(goal=goal)), changed=True)

    held = sector.momentum >= DEFENSE_HOLD_MOMENTUM
    status = EngagementStatus.VICTORY if held else EngagementStatus.DEFEAT
    updated = replace(sector, defense=DefenseCountdown(goal=0, resolved=status), reported_status=status)
    if held:
        text = f"{squad_name} held {sector.display_name} ++ won engagement"
    else:
        text = f"{sector.display_name} has fallen ++ {squad_name} lost engagement"
    event = LogEvent(kind="defense", text=text, data={"sector_id": sector.id, "status": status.value})
    return SectorUpdate(sector=updated, changed=True, events=(event,))

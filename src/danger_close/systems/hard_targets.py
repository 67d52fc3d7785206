from __future__ import annotations

from dataclasses import replace

from danger_close.domain.events import LogEvent
from danger_close.domain.reports import SectorUpdate
from danger_close.domain.types import HardTarget, Sector


def find_target(sector: Sector, target_id: str) -> HardTarget | None:
    for target in sector.hard_targets:
        if target.id == target_id:
            return target
    return None


def set_hits(sector: Sector, target_id: str, hits: int) -> SectorUpdate:
    target = find_target(sector, target_id)
    if target is None:
        return SectorUpdate.unchanged(sector)
    hits = max(0, int(hits))
    if hits == target.hits:
        return SectorUpdate.unchanged(sector)

    targets = tuple(replace(t, hits=hits) if t.id == target_id else t for t in sector.hard_targets)
    updated = replace(sector, hard_targets=targets)
    events: tuple[LogEvent, ...] = ()
    if target.hits > 0 and hits == 0:
        name = target.name.strip() or "Hard target"
        events = (
            LogEvent(
                kind="hard_target",
                text=f"{name} neutralized >> {sector.display_name}",
                data={"sector_id": sector.id, "target_id": target_id},
            ),
        )
    return SectorUpdate(sector=updated, changed=True, events=events)


def adjust_hits(sector: Sector, target_id: str, delta: int) -> SectorUpdate:
    target = find_target(sector, target_id)
    if target is None:
        return SectorUpdate.unchanged(sector)
    return set_hits(sector, target_id, target.hits + delta)

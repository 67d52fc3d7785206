"""Results handed back by the sector systems."""

from __future__ import annotations

from dataclasses import dataclass, field

from danger_close.domain.events import LogEvent
from danger_close.domain.types import Sector


@dataclass(frozen=True)
class SectorUpdate:
    sector: Sector
    changed: bool
    events: tuple[LogEvent, ...] = field(default_factory=tuple)

    @staticmethod
    def unchanged(sector: Sector) -> "SectorUpdate":
        return SectorUpdate(sector=sector, changed=False)

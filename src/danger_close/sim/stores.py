"""Collaborator contracts the engine reads and writes through.

The roster, mission/sector list and log feed are owned outside the engine;
these protocols are all the engine knows about them. The in-memory versions
back tests and simple embeddings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Protocol

from danger_close.domain.events import LogSource
from danger_close.domain.normalize import normalize_mission, normalize_roster, normalize_sector
from danger_close.domain.types import Combatant, Mission, Sector

RosterUpdater = Callable[[tuple[Combatant, ...]], tuple[Combatant, ...]]
SectorsUpdater = Callable[[tuple[Sector, ...]], tuple[Sector, ...]]


class RosterStore(Protocol):
    def get(self) -> tuple[Combatant, ...]: ...

    def replace_all(self, updater: RosterUpdater) -> None: ...

    def squad_name(self) -> str: ...


class MissionStore(Protocol):
    def mission(self) -> Mission: ...

    def replace_mission(self, mission: Mission) -> None: ...

    def sectors(self) -> tuple[Sector, ...]: ...

    def replace_sectors(self, updater: SectorsUpdater) -> None: ...

    def selected_sector_id(self) -> str | None: ...

    def select(self, sector_id: str | None) -> None: ...


class LogSink(Protocol):
    def append(self, text: str, source: LogSource) -> None: ...


@dataclass()
class InMemoryRosterStore:
    combatants: tuple[Combatant, ...] = ()
    name: str = ""

    @classmethod
    def from_records(cls, records: Any, name: str = "") -> "InMemoryRosterStore":
        return cls(combatants=normalize_roster(records), name=name)

    def get(self) -> tuple[Combatant, ...]:
        return self.combatants

    def replace_all(self, updater: RosterUpdater) -> None:
        self.combatants = tuple(updater(self.combatants))

    def squad_name(self) -> str:
        return self.name


@dataclass()
class InMemoryMissionStore:
    current: Mission = field(default_factory=Mission)
    sector_list: tuple[Sector, ...] = ()
    selected_id: str | None = None

    @classmethod
    def from_records(cls, sectors: Any, mission: Any = None) -> "InMemoryMissionStore":
        records = sectors if isinstance(sectors, (list, tuple)) else []
        return cls(
            current=normalize_mission(mission),
            sector_list=tuple(normalize_sector(raw, index) for index, raw in enumerate(records)),
        )

    def mission(self) -> Mission:
        return self.current

    def replace_mission(self, mission: Mission) -> None:
        self.current = mission

    def sectors(self) -> tuple[Sector, ...]:
        return self.sector_list

    def replace_sectors(self, updater: SectorsUpdater) -> None:
        self.sector_list = tuple(updater(self.sector_list))

    def selected_sector_id(self) -> str | None:
        return self.selected_id

    def select(self, sector_id: str | None) -> None:
        self.selected_id = sector_id


@dataclass(frozen=True)
class LogEntry:
    text: str
    source: LogSource


@dataclass()
class InMemoryLogSink:
    entries: list[LogEntry] = field(default_factory=list)

    def append(self, text: str, source: LogSource) -> None:
        if not text.strip():
            return
        self.entries.append(LogEntry(text=text, source=source))

    @property
    def texts(self) -> list[str]:
        return [entry.text for entry in self.entries]

from __future__ import annotations

from danger_close.domain.events import LogSource
from danger_close.domain.types import Difficulty, SectorContent
from danger_close.sim.stores import InMemoryLogSink, InMemoryMissionStore, InMemoryRosterStore


def test_roster_store_from_records() -> None:
    store = InMemoryRosterStore.from_records([{"name": "Rook", "grit": 7}, {"id": 9}], name="Bravo")
    assert [c.id for c in store.get()] == [1, 9]
    assert store.get()[0].grit == 3
    assert store.squad_name() == "Bravo"

    store.replace_all(lambda roster: roster[:1])
    assert len(store.get()) == 1


def test_mission_store_from_records() -> None:
    store = InMemoryMissionStore.from_records(
        [{"id": "a", "content": "TL 1"}, {"id": "b", "content": "Boon"}],
        {"difficulty": "Routine"},
    )
    assert store.mission().difficulty == Difficulty.ROUTINE
    assert [s.content for s in store.sectors()] == [SectorContent.TL1, SectorContent.BOON]
    assert store.selected_sector_id() is None

    store.select("a")
    assert store.selected_sector_id() == "a"
    assert InMemoryMissionStore.from_records("junk").sectors() == ()


def test_log_sink_ignores_blank_entries() -> None:
    sink = InMemoryLogSink()
    sink.append("   ", LogSource.SYSTEM)
    sink.append("Contact front", LogSource.USER)
    assert sink.texts == ["Contact front"]
    assert sink.entries[0].source == LogSource.USER

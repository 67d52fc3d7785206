"""Random sector terrain and mission parameters, rolled on d6 tables."""

from __future__ import annotations

from dataclasses import replace
from random import Random

from danger_close.domain.types import (
    Airspace,
    Cover,
    Difficulty,
    Mission,
    Sector,
    SectorContent,
    Space,
    Weather,
)
from danger_close.systems.dice import roll_d6

CONTENT_TABLE: dict[Difficulty, dict[int, SectorContent]] = {
    Difficulty.ROUTINE: {
        1: SectorContent.TL2,
        2: SectorContent.TL1,
        3: SectorContent.TL1,
        4: SectorContent.TL1,
        5: SectorContent.NOTHING,
        6: SectorContent.BOON,
    },
    Difficulty.HAZARDOUS: {
        1: SectorContent.TL3,
        2: SectorContent.TL1,
        3: SectorContent.TL1,
        4: SectorContent.TL2,
        5: SectorContent.NOTHING,
        6: SectorContent.BOON,
    },
    Difficulty.DESPERATE: {
        1: SectorContent.TL4,
        2: SectorContent.TL3,
        3: SectorContent.TL2,
        4: SectorContent.TL2,
        5: SectorContent.TL2,
        6: SectorContent.BOON,
    },
}

MISSION_OBJECTIVES: tuple[tuple[str, str], ...] = (
    ("Seize & Secure", "Assault"),
    ("Seize & Secure", "Search & Destroy"),
    ("Seize & Secure", "Breach"),
    ("Hit & Run", "Raid"),
    ("Hit & Run", "Recon"),
    ("Hit & Run", "Extraction"),
    ("Hit & Run", "Recovery"),
    ("Hit & Run", "Sabotage"),
    ("Free Roam", "Kill Mission"),
    ("Free Roam", "Disruption"),
    ("Defense", "Siege"),
    ("Defense", "Evacuation"),
    ("Defense", "Last Stand"),
)


def random_cover(rng: Random) -> Cover:
    roll = roll_d6(rng)
    if roll == 1:
        return Cover.EXPOSED
    if roll <= 4:
        return Cover.NORMAL
    return Cover.DENSE


def random_space(rng: Random) -> Space:
    roll = roll_d6(rng)
    if roll == 1:
        return Space.TIGHT
    if roll <= 4:
        return Space.TRANSITIONAL
    return Space.OPEN


def random_weather(rng: Random) -> Weather:
    roll = roll_d6(rng)
    if roll <= 3:
        return Weather.NORMAL
    if roll <= 5:
        return Weather.BAD
    return Weather.TERRIBLE


def random_content(difficulty: Difficulty, rng: Random) -> SectorContent:
    return CONTENT_TABLE[difficulty][roll_d6(rng)]


def randomize_sector(sector: Sector, difficulty: Difficulty, rng: Random) -> Sector:
    return replace(
        sector,
        cover=random_cover(rng),
        space=random_space(rng),
        content=random_content(difficulty, rng),
        weather=random_weather(rng),
    )


def random_difficulty(rng: Random) -> Difficulty:
    # 3-in-6 Routine, 2-in-6 Hazardous, 1-in-6 Desperate
    roll = roll_d6(rng)
    if roll <= 3:
        return Difficulty.ROUTINE
    if roll <= 5:
        return Difficulty.HAZARDOUS
    return Difficulty.DESPERATE


def random_airspace(rng: Random) -> Airspace:
    # 3-in-6 Contested, 2-in-6 Clear, 1-in-6 Hostile
    roll = roll_d6(rng)
    if roll <= 3:
        return Airspace.CONTESTED
    if roll <= 5:
        return Airspace.CLEAR
    return Airspace.HOSTILE


def random_objective(rng: Random) -> str:
    mission_type, objective = rng.choice(MISSION_OBJECTIVES)
    return f"{mission_type} // {objective}"


def randomize_mission(mission: Mission, rng: Random) -> Mission:
    return replace(
        mission,
        objective=random_objective(rng),
        difficulty=random_difficulty(rng),
        airspace=random_airspace(rng),
    )

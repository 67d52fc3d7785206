"""Action definitions for the engagement engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, TypeAlias, Union

from danger_close.domain.types import DefensivePosition, Intent, OffensivePosition, Weather


@dataclass(frozen=True)
class SelectSector:
    sector_id: str | None


@dataclass(frozen=True)
class SetWeather:
    weather: Weather


@dataclass(frozen=True)
class SetAdvanceRolls:
    count: int


@dataclass(frozen=True)
class SetCustomModifier:
    value: int


@dataclass(frozen=True)
class StartAdvanceRoll:
    pass


@dataclass(frozen=True)
class ApplyAdvanceOutcome:
    pass


@dataclass(frozen=True)
class StartTacticRoll:
    pass


@dataclass(frozen=True)
class ApplyTactic:
    pass


@dataclass(frozen=True)
class StartDiceRoll:
    count: int | None = None  # None rolls the current offense pool


@dataclass(frozen=True)
class AdjustMomentum:
    delta: Literal[-1, 1]


@dataclass(frozen=True)
class EnterDefenseObjective:
    pass


@dataclass(frozen=True)
class CompleteExchange:
    pass


@dataclass(frozen=True)
class SetHardTargetHits:
    target_id: str
    hits: int


@dataclass(frozen=True)
class BumpStat:
    combatant_id: int
    stat: Literal["grit", "ammo"]
    delta: Literal[-1, 1]


@dataclass(frozen=True)
class CycleStatus:
    combatant_id: int


@dataclass(frozen=True)
class SetIntent:
    combatant_id: int
    intent: Intent | None


@dataclass(frozen=True)
class SetPosition:
    combatant_id: int
    offensive: OffensivePosition | None = None
    defensive: DefensivePosition | None = None


@dataclass(frozen=True)
class ToggleAtRisk:
    combatant_id: int


@dataclass(frozen=True)
class ResolveIncomingFire:
    pass


@dataclass(frozen=True)
class SetOffenseOverride:
    value: int | None  # None clears the manual value
    pinned: bool = False


@dataclass(frozen=True)
class RandomizeSector:
    sector_id: str


@dataclass(frozen=True)
class RandomizeMission:
    pass


Action: TypeAlias = Union[
    SelectSector,
    SetWeather,
    SetAdvanceRolls,
    SetCustomModifier,
    StartAdvanceRoll,
    ApplyAdvanceOutcome,
    StartTacticRoll,
    ApplyTactic,
    StartDiceRoll,
    AdjustMomentum,
    EnterDefenseObjective,
    CompleteExchange,
    SetHardTargetHits,
    BumpStat,
    CycleStatus,
    SetIntent,
    SetPosition,
    ToggleAtRisk,
    ResolveIncomingFire,
    SetOffenseOverride,
    RandomizeSector,
    RandomizeMission,
]

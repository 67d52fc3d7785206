"""Sector advance roll: 2d3 + modifiers looked up against the threat level."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from random import Random

from danger_close.domain.types import (
    DefensivePosition,
    ModifierSet,
    OffensivePosition,
    Sector,
    ThreatLevel,
)
from danger_close.systems.dice import roll_d3


class AdvanceOutcome(str, Enum):
    AMBUSHED = "Ambushed"
    SPOTTED = "Spotted"
    ADVANTAGE = "Advantage"
    SURPRISE = "Surprise"
    OVERWHELM = "Overwhelm"


@dataclass(frozen=True)
class OutcomeEffect:
    description: str
    positions: tuple[OffensivePosition, DefensivePosition] | None
    momentum: int = 0


OUTCOME_EFFECTS: dict[AdvanceOutcome, OutcomeEffect] = {
    AdvanceOutcome.AMBUSHED: OutcomeEffect(
        "The Squad starts Flanked + Engaged.",
        (OffensivePosition.ENGAGED, DefensivePosition.FLANKED),
    ),
    AdvanceOutcome.SPOTTED: OutcomeEffect(
        "The Squad starts In Cover + Engaged.",
        (OffensivePosition.ENGAGED, DefensivePosition.IN_COVER),
    ),
    AdvanceOutcome.ADVANTAGE: OutcomeEffect(
        "The Squad starts In Cover + Flanking.",
        (OffensivePosition.FLANKING, DefensivePosition.IN_COVER),
    ),
    AdvanceOutcome.SURPRISE: OutcomeEffect(
        "The Squad starts In Cover + Flanking + 1 Momentum.",
        (OffensivePosition.FLANKING, DefensivePosition.IN_COVER),
        momentum=1,
    ),
    AdvanceOutcome.OVERWHELM: OutcomeEffect(
        "The Squad overwhelms the enemy force, and the enemy is routed.",
        None,
    ),
}

# Bands per threat level as (minimum total, outcome), best first. The last
# band catches every lower total.
OUTCOME_TABLE: dict[ThreatLevel, tuple[tuple[int, AdvanceOutcome], ...]] = {
    ThreatLevel.LIGHT: (
        (6, AdvanceOutcome.OVERWHELM),
        (5, AdvanceOutcome.SURPRISE),
        (4, AdvanceOutcome.ADVANTAGE),
        (-99, AdvanceOutcome.SPOTTED),
    ),
    ThreatLevel.STANDARD: (
        (6, AdvanceOutcome.OVERWHELM),
        (5, AdvanceOutcome.ADVANTAGE),
        (3, AdvanceOutcome.SPOTTED),
        (-99, AdvanceOutcome.AMBUSHED),
    ),
    ThreatLevel.HEAVY: (
        (6, AdvanceOutcome.ADVANTAGE),
        (4, AdvanceOutcome.SPOTTED),
        (-99, AdvanceOutcome.AMBUSHED),
    ),
    ThreatLevel.OVERWHELMING: (
        (7, AdvanceOutcome.SPOTTED),
        (-99, AdvanceOutcome.AMBUSHED),
    ),
}


def determine_outcome(total: int, threat: ThreatLevel) -> AdvanceOutcome:
    bands = OUTCOME_TABLE[threat]
    for minimum, outcome in bands:
        if total >= minimum:
            return outcome
    return bands[-1][1]


@dataclass(frozen=True)
class AdvanceDice:
    first: int
    second: int

    @property
    def total(self) -> int:
        return self.first + self.second


def sample_advance_dice(rng: Random) -> AdvanceDice:
    return AdvanceDice(roll_d3(rng), roll_d3(rng))


@dataclass(frozen=True)
class AdvanceResult:
    dice: AdvanceDice
    modifiers: ModifierSet
    threat: ThreatLevel
    outcome: AdvanceOutcome

    @property
    def total(self) -> int:
        return self.dice.total + self.modifiers.total

    @property
    def effect(self) -> OutcomeEffect:
        return OUTCOME_EFFECTS[self.outcome]


def resolve_advance(dice: AdvanceDice, modifiers: ModifierSet, threat: ThreatLevel) -> AdvanceResult:
    total = dice.total + modifiers.total
    return AdvanceResult(dice=dice, modifiers=modifiers, threat=threat, outcome=determine_outcome(total, threat))


def advance_log_text(squad_name: str, sector: Sector, outcome: AdvanceOutcome) -> str:
    return (
        f"{squad_name} ADVANCES >> {sector.display_name}\n"
        f"Cover: {sector.cover.value} ++ Space: {sector.space.value} ++ Threat Level: {sector.content.value}\n"
        f"STATUS: {outcome.value}"
    )

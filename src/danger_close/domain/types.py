"""Common types and enums."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

GRIT_MIN = 0
GRIT_MAX = 3
AMMO_MIN = 0
AMMO_MAX = 3

MOMENTUM_MIN = -3
MOMENTUM_MAX = 5
MOMENTUM_DEFAULT = 0

DEPLOYED_SQUAD_SIZE = 5


class Status(str, Enum):
    OK = "OK"
    GRAZED = "Grazed"
    WOUNDED = "Wounded"
    BLEEDING_OUT = "Bleeding Out"
    DEAD = "Dead"

    @property
    def severity(self) -> int:
        return STATUS_ORDER.index(self)

    def worsen(self, steps: int = 1) -> "Status":
        index = min(len(STATUS_ORDER) - 1, self.severity + max(0, steps))
        return STATUS_ORDER[index]

    def next_in_cycle(self) -> "Status":
        return STATUS_ORDER[(self.severity + 1) % len(STATUS_ORDER)]


STATUS_ORDER: tuple[Status, ...] = (
    Status.OK,
    Status.GRAZED,
    Status.WOUNDED,
    Status.BLEEDING_OUT,
    Status.DEAD,
)

WOUNDED_STATUSES = frozenset({Status.WOUNDED, Status.BLEEDING_OUT, Status.DEAD})
INCAPACITATED_STATUSES = frozenset({Status.BLEEDING_OUT, Status.DEAD})


class OffensivePosition(str, Enum):
    FLANKING = "Flanking"
    ENGAGED = "Engaged"
    LIMITED = "Limited"


class DefensivePosition(str, Enum):
    FORTIFIED = "Fortified"
    IN_COVER = "In Cover"
    FLANKED = "Flanked"


class IntentKind(str, Enum):
    FIRE = "Fire"
    MOVE_UP = "Move Up"
    FALL_BACK = "Fall Back"
    COVERING_FIRE = "Covering Fire"
    USE_SPECIAL_GEAR = "Use Special Gear"
    INTERACT = "Interact"
    DISENGAGE = "Disengage"


@dataclass(frozen=True)
class Intent:
    kind: IntentKind
    target_id: int | None = None  # Covering Fire only

    def label(self) -> str:
        if self.kind == IntentKind.COVERING_FIRE and self.target_id is not None:
            return f"{self.kind.value} [{self.target_id}]"
        return self.kind.value


class WeaponId(str, Enum):
    ASSAULT_RIFLE = "assault_rifle"
    CARBINE = "carbine"
    MARKSMAN_RIFLE = "marksman_rifle"
    SHOTGUN = "shotgun"
    SQUAD_AUTOMATIC = "squad_automatic"


class ArmorId(str, Enum):
    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"


class GearId(str, Enum):
    SNIPER_RIFLE = "sniper_rifle"
    HMG = "hmg"
    GRENADE_LAUNCHER = "grenade_launcher"
    MEDKIT = "medkit"
    DEMO_CHARGE = "demo_charge"
    COMMS_RELAY = "comms_relay"


@dataclass(frozen=True)
class Combatant:
    id: int
    name: str
    status: Status = Status.OK
    grit: int = GRIT_MAX
    ammo: int = AMMO_MAX
    weapon: WeaponId = WeaponId.ASSAULT_RIFLE
    armor: ArmorId | None = None
    special_gear: tuple[GearId, ...] = ()
    offensive_position: OffensivePosition = OffensivePosition.ENGAGED
    defensive_position: DefensivePosition = DefensivePosition.IN_COVER
    intent: Intent | None = None
    at_risk: bool = False
    notes: str = ""

    @property
    def incapacitated(self) -> bool:
        return self.status in INCAPACITATED_STATUSES

    @property
    def wounded(self) -> bool:
        return self.status in WOUNDED_STATUSES

    def has_gear(self, gear: GearId) -> bool:
        return gear in self.special_gear

    def with_positions(
        self,
        offensive: OffensivePosition | None = None,
        defensive: DefensivePosition | None = None,
    ) -> "Combatant":
        return replace(
            self,
            offensive_position=offensive or self.offensive_position,
            defensive_position=defensive or self.defensive_position,
        )


def deployed(roster: tuple[Combatant, ...] | list[Combatant]) -> tuple[Combatant, ...]:
    """First five roster entries; everyone after them sits in reserve."""
    return tuple(roster[:DEPLOYED_SQUAD_SIZE])


def clamp_grit(value: int) -> int:
    return max(GRIT_MIN, min(GRIT_MAX, int(value)))


def clamp_ammo(value: int) -> int:
    return max(AMMO_MIN, min(AMMO_MAX, int(value)))


def clamp_momentum(value: int) -> int:
    return max(MOMENTUM_MIN, min(MOMENTUM_MAX, int(value)))


class Cover(str, Enum):
    EXPOSED = "Exposed"
    NORMAL = "Normal"
    DENSE = "Dense"


class Space(str, Enum):
    TIGHT = "Tight"
    TRANSITIONAL = "Transitional"
    OPEN = "Open"


class Weather(str, Enum):
    NORMAL = "Normal"
    BAD = "Bad"
    TERRIBLE = "Terrible"


class SectorContent(str, Enum):
    BOON = "Boon"
    NOTHING = "Nothing"
    TL1 = "TL 1"
    TL2 = "TL 2"
    TL3 = "TL 3"
    TL4 = "TL 4"

    @property
    def threat_level(self) -> "ThreatLevel | None":
        return _THREAT_BY_CONTENT.get(self)


class ThreatLevel(int, Enum):
    LIGHT = 1
    STANDARD = 2
    HEAVY = 3
    OVERWHELMING = 4

    @property
    def label(self) -> str:
        return self.name.capitalize()


_THREAT_BY_CONTENT: dict[SectorContent, ThreatLevel] = {
    SectorContent.TL1: ThreatLevel.LIGHT,
    SectorContent.TL2: ThreatLevel.STANDARD,
    SectorContent.TL3: ThreatLevel.HEAVY,
    SectorContent.TL4: ThreatLevel.OVERWHELMING,
}


class EngagementStatus(str, Enum):
    VICTORY = "victory"
    DEFEAT = "defeat"


@dataclass(frozen=True)
class HardTarget:
    id: str
    name: str
    hits: int = 3

    @property
    def neutralized(self) -> bool:
        return self.hits <= 0


@dataclass(frozen=True)
class DefenseCountdown:
    goal: int
    resolved: EngagementStatus | None = None


@dataclass(frozen=True)
class Sector:
    id: str
    name: str = ""
    cover: Cover = Cover.NORMAL
    space: Space = Space.TRANSITIONAL
    content: SectorContent = SectorContent.NOTHING
    weather: Weather = Weather.NORMAL
    momentum: int = MOMENTUM_DEFAULT
    hard_targets: tuple[HardTarget, ...] = ()
    defense: DefenseCountdown | None = None
    reported_status: EngagementStatus | None = None

    @property
    def threat_level(self) -> ThreatLevel | None:
        return self.content.threat_level

    @property
    def engageable(self) -> bool:
        return self.threat_level is not None

    @property
    def display_name(self) -> str:
        return self.name.strip() or "Unnamed Sector"


class Difficulty(str, Enum):
    ROUTINE = "Routine"
    HAZARDOUS = "Hazardous"
    DESPERATE = "Desperate"


class Airspace(str, Enum):
    CLEAR = "Clear"
    CONTESTED = "Contested"
    HOSTILE = "Hostile"


@dataclass(frozen=True)
class Mission:
    name: str = ""
    objective: str = ""
    difficulty: Difficulty = Difficulty.HAZARDOUS
    airspace: Airspace = Airspace.CONTESTED


@dataclass(frozen=True)
class ModifierSet:
    injuries: int = 0
    mobility: int = 0
    fatigue: int = 0
    weather: int = 0
    custom: int = 0

    @property
    def total(self) -> int:
        return self.injuries + self.mobility + self.fatigue + self.weather + self.custom


@dataclass(frozen=True)
class OffenseContribution:
    combatant_id: int
    value: int
    rationale: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class OffensePool:
    contributions: tuple[OffenseContribution, ...]

    @property
    def total(self) -> int:
        return max(0, sum(c.value for c in self.contributions))

    def for_combatant(self, combatant_id: int) -> OffenseContribution | None:
        for contribution in self.contributions:
            if contribution.combatant_id == combatant_id:
                return contribution
        return None


def format_modifier(value: int) -> str:
    return f"+{value}" if value > 0 else str(value)

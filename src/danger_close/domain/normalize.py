"""Normalization of raw roster/sector records handed over by the stores.

Collaborators persist records however they like; anything missing or invalid
falls back to a neutral default instead of raising.
"""

from __future__ import annotations

import logging
import math
import uuid
from enum import Enum
from typing import Any, Mapping, TypeVar

from danger_close.domain.types import (
    AMMO_MAX,
    GRIT_MAX,
    MOMENTUM_DEFAULT,
    Airspace,
    ArmorId,
    Combatant,
    Cover,
    DefensivePosition,
    Difficulty,
    GearId,
    HardTarget,
    Intent,
    IntentKind,
    Mission,
    OffensivePosition,
    Sector,
    SectorContent,
    Space,
    Status,
    Weather,
    WeaponId,
    clamp_ammo,
    clamp_grit,
    clamp_momentum,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

DEFAULT_HARD_TARGET_HITS = 3


def _enum_or(enum_cls: type[E], value: Any, fallback: E) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        if value is not None:
            logger.warning("Unknown %s %r; using %s", enum_cls.__name__, value, fallback.value)
        return fallback


def _finite_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        numeric = float(value)
    elif isinstance(value, str) and value.strip():
        try:
            numeric = float(value)
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(numeric):
        return None
    return int(round(numeric))


def non_negative_int(value: Any, fallback: int) -> int:
    numeric = _finite_int(value)
    if numeric is None:
        return fallback
    return max(0, numeric)


def _intent(raw: Any) -> Intent | None:
    if raw is None or isinstance(raw, Intent):
        return raw
    if isinstance(raw, Mapping):
        kind = raw.get("kind")
        target = _finite_int(raw.get("target_id"))
    else:
        kind, target = raw, None
    try:
        intent_kind = IntentKind(kind)
    except ValueError:
        logger.warning("Unknown intent %r; clearing it", kind)
        return None
    if intent_kind != IntentKind.COVERING_FIRE:
        target = None
    return Intent(kind=intent_kind, target_id=target)


def _gear(raw: Any) -> tuple[GearId, ...]:
    if not isinstance(raw, (list, tuple)):
        return ()
    gear: list[GearId] = []
    for item in raw:
        try:
            gear.append(GearId(item))
        except ValueError:
            logger.warning("Unknown special gear %r dropped", item)
    return tuple(gear)


def normalize_combatant(raw: Mapping[str, Any] | Combatant, index: int) -> Combatant:
    if isinstance(raw, Combatant):
        return raw
    if not isinstance(raw, Mapping):
        return Combatant(id=index + 1, name="")

    combatant_id = _finite_int(raw.get("id"))
    grit = _finite_int(raw.get("grit"))
    ammo = _finite_int(raw.get("ammo"))
    armor_raw = raw.get("armor")
    armor: ArmorId | None = None
    if armor_raw is not None:
        try:
            armor = ArmorId(armor_raw)
        except ValueError:
            logger.warning("Unknown armor %r; treating as unarmored", armor_raw)

    return Combatant(
        id=combatant_id if combatant_id is not None else index + 1,
        name=str(raw.get("name") or ""),
        status=_enum_or(Status, raw.get("status"), Status.OK),
        grit=clamp_grit(grit if grit is not None else GRIT_MAX),
        ammo=clamp_ammo(ammo if ammo is not None else AMMO_MAX),
        weapon=_enum_or(WeaponId, raw.get("weapon"), WeaponId.ASSAULT_RIFLE),
        armor=armor,
        special_gear=_gear(raw.get("special_gear")),
        offensive_position=_enum_or(OffensivePosition, raw.get("offensive_position"), OffensivePosition.ENGAGED),
        defensive_position=_enum_or(DefensivePosition, raw.get("defensive_position"), DefensivePosition.IN_COVER),
        intent=_intent(raw.get("intent")),
        at_risk=bool(raw.get("at_risk", False)),
        notes=str(raw.get("notes") or ""),
    )


def normalize_roster(raw: Any) -> tuple[Combatant, ...]:
    if not isinstance(raw, (list, tuple)):
        return ()
    return tuple(normalize_combatant(item, index) for index, item in enumerate(raw))


def normalize_hard_target(raw: Mapping[str, Any] | HardTarget, index: int) -> HardTarget:
    if isinstance(raw, HardTarget):
        return HardTarget(id=raw.id, name=raw.name, hits=max(0, raw.hits))
    if not isinstance(raw, Mapping):
        return HardTarget(id=f"hard-target-{uuid.uuid4().hex[:8]}", name="", hits=DEFAULT_HARD_TARGET_HITS)
    target_id = raw.get("id")
    if not isinstance(target_id, str) or not target_id.strip():
        target_id = f"legacy-hard-target-{index}-{uuid.uuid4().hex[:8]}"
    return HardTarget(
        id=target_id,
        name=str(raw.get("name") or ""),
        hits=non_negative_int(raw.get("hits"), DEFAULT_HARD_TARGET_HITS),
    )


def normalize_sector(raw: Mapping[str, Any] | Sector, index: int) -> Sector:
    if isinstance(raw, Sector):
        return raw
    if not isinstance(raw, Mapping):
        return Sector(id=str(uuid.uuid4()))

    sector_id = raw.get("id")
    if not isinstance(sector_id, str) or not sector_id.strip():
        sector_id = f"legacy-sector-{index}-{uuid.uuid4().hex[:8]}"
    momentum = _finite_int(raw.get("momentum"))
    targets = raw.get("hard_targets")

    return Sector(
        id=sector_id,
        name=str(raw.get("name") or ""),
        cover=_enum_or(Cover, raw.get("cover"), Cover.NORMAL),
        space=_enum_or(Space, raw.get("space"), Space.TRANSITIONAL),
        content=_enum_or(SectorContent, raw.get("content"), SectorContent.NOTHING),
        weather=_enum_or(Weather, raw.get("weather"), Weather.NORMAL),
        momentum=clamp_momentum(momentum if momentum is not None else MOMENTUM_DEFAULT),
        hard_targets=(
            tuple(normalize_hard_target(t, i) for i, t in enumerate(targets))
            if isinstance(targets, (list, tuple))
            else ()
        ),
    )


def normalize_mission(raw: Any) -> Mission:
    if isinstance(raw, Mission):
        return raw
    if not isinstance(raw, Mapping):
        return Mission()
    return Mission(
        name=str(raw.get("name") or ""),
        objective=str(raw.get("objective") or ""),
        difficulty=_enum_or(Difficulty, raw.get("difficulty"), Difficulty.HAZARDOUS),
        airspace=_enum_or(Airspace, raw.get("airspace"), Airspace.CONTESTED),
    )

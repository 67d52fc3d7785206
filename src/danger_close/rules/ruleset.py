"""Data-driven rules: loadout catalog and roll timings."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, TypeVar

from danger_close.domain.types import ArmorId, GearId, WeaponId

E = TypeVar("E", bound=Enum)


class RulesError(ValueError):
    """Error loading or validating rules."""


@dataclass(frozen=True)
class CatalogEntry:
    """A weapon, armor or special gear definition."""

    id: str
    name: str
    info: str = ""
    requisition: int = 0


@dataclass(frozen=True)
class RollTiming:
    tick_ms: int
    advance_duration_ms: int
    tactic_duration_ms: int
    dice_duration_ms: int


@dataclass(frozen=True)
class DicePoolConfig:
    min_dice: int
    max_dice: int
    default_dice: int

    def clamp(self, count: int) -> int:
        return max(self.min_dice, min(self.max_dice, int(count)))


@dataclass(frozen=True)
class Ruleset:
    """Loaded and validated ruleset."""

    weapons: dict[WeaponId, CatalogEntry]
    armor: dict[ArmorId, CatalogEntry]
    special_gear: dict[GearId, CatalogEntry]
    timing: RollTiming
    dice_pool: DicePoolConfig

    @staticmethod
    def load(data_dir: Path) -> "Ruleset":
        """Load ruleset from rules.json in the data directory."""
        path = data_dir / "rules.json"
        data = _load_json(path)
        return Ruleset(
            weapons=_load_catalog(path, data, "weapons", WeaponId),
            armor=_load_catalog(path, data, "armor", ArmorId),
            special_gear=_load_catalog(path, data, "special_gear", GearId),
            timing=_load_timing(path, data.get("timing", {})),
            dice_pool=_load_dice_pool(path, data.get("dice_pool", {})),
        )

    @staticmethod
    def default() -> "Ruleset":
        return Ruleset.load(default_data_dir())

    def weapon_name(self, weapon: WeaponId) -> str:
        entry = self.weapons.get(weapon)
        return entry.name if entry is not None else "Unknown"

    def gear_summary(self, weapon: WeaponId, armor: ArmorId | None, gear: tuple[GearId, ...]) -> str:
        parts = [self.weapon_name(weapon)]
        armor_entry = self.armor.get(armor) if armor is not None else None
        parts.append(armor_entry.name if armor_entry is not None else "Unknown")
        parts.extend(self.special_gear[g].name for g in gear if g in self.special_gear)
        return ", ".join(parts)

    def loadout_entries(
        self, weapon: WeaponId, armor: ArmorId | None, gear: tuple[GearId, ...]
    ) -> list[CatalogEntry]:
        entries = [self.weapons.get(weapon)]
        if armor is not None:
            entries.append(self.armor.get(armor))
        entries.extend(self.special_gear.get(g) for g in gear)
        return [entry for entry in entries if entry is not None]

    def requisition_cost(self, weapon: WeaponId, armor: ArmorId | None, gear: tuple[GearId, ...]) -> int:
        return sum(entry.requisition for entry in self.loadout_entries(weapon, armor, gear))

    def loadout_notes(self, weapon: WeaponId, armor: ArmorId | None, gear: tuple[GearId, ...]) -> list[str]:
        """One "Name: info" line per catalog entry that carries rules text."""
        return [f"{entry.name}: {entry.info}" for entry in self.loadout_entries(weapon, armor, gear) if entry.info]


def default_data_dir() -> Path:
    return Path(__file__).resolve().parents[1] / "data"


def _load_json(path: Path) -> dict[str, Any]:
    """Load JSON file."""
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except FileNotFoundError as exc:
        raise RulesError(f"Rules file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise RulesError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise RulesError(f"{path}: top level must be object")
    return data


def _load_catalog(path: Path, data: dict[str, Any], key: str, id_enum: type[E]) -> dict[E, CatalogEntry]:
    if key not in data:
        raise RulesError(f"{path}: missing '{key}' key")
    if not isinstance(data[key], list):
        raise RulesError(f"{path}: '{key}' must be array")
    entries: dict[E, CatalogEntry] = {}
    for item in data[key]:
        if not isinstance(item, dict):
            raise RulesError(f"{path}: {key} entry must be object")
        raw_id = item.get("id")
        if not isinstance(raw_id, str):
            raise RulesError(f"{path}: {key}.id must be string")
        try:
            entry_id = id_enum(raw_id)
        except ValueError as exc:
            raise RulesError(f"{path}: unknown {key} id '{raw_id}'") from exc
        info = item.get("info", "")
        if info is None:
            info = ""
        if not isinstance(info, str):
            raise RulesError(f"{path}: {key}.info must be string")
        entries[entry_id] = CatalogEntry(
            id=raw_id,
            name=str(item.get("name", raw_id)),
            info=info,
            requisition=int(item.get("requisition", 0)),
        )
    missing = [member.value for member in id_enum if member not in entries]
    if missing:
        raise RulesError(f"{path}: {key} missing definitions for {', '.join(missing)}")
    return entries


def _load_timing(path: Path, data: Any) -> RollTiming:
    if not isinstance(data, dict):
        raise RulesError(f"{path}: 'timing' must be object")
    timing = RollTiming(
        tick_ms=int(data.get("tick_ms", 120)),
        advance_duration_ms=int(data.get("advance_duration_ms", 900)),
        tactic_duration_ms=int(data.get("tactic_duration_ms", 900)),
        dice_duration_ms=int(data.get("dice_duration_ms", 900)),
    )
    if timing.tick_ms <= 0:
        raise RulesError(f"{path}: timing.tick_ms must be positive")
    for name in ("advance_duration_ms", "tactic_duration_ms", "dice_duration_ms"):
        if getattr(timing, name) < timing.tick_ms:
            raise RulesError(f"{path}: timing.{name} must be at least tick_ms")
    return timing


def _load_dice_pool(path: Path, data: Any) -> DicePoolConfig:
    if not isinstance(data, dict):
        raise RulesError(f"{path}: 'dice_pool' must be object")
    config = DicePoolConfig(
        min_dice=int(data.get("min_dice", 1)),
        max_dice=int(data.get("max_dice", 20)),
        default_dice=int(data.get("default_dice", 6)),
    )
    if not 1 <= config.min_dice <= config.default_dice <= config.max_dice:
        raise RulesError(f"{path}: dice_pool requires 1 <= min_dice <= default_dice <= max_dice")
    return config

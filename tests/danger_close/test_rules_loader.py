from __future__ import annotations

import json

import pytest

from danger_close.domain.types import ArmorId, GearId, WeaponId
from danger_close.rules.ruleset import Ruleset, RulesError, default_data_dir


def _write_rules(tmp_path, mutate=None):
    data = json.loads((default_data_dir() / "rules.json").read_text(encoding="utf-8"))
    if mutate is not None:
        mutate(data)
    (tmp_path / "rules.json").write_text(json.dumps(data), encoding="utf-8")
    return tmp_path


def test_default_ruleset_contracts() -> None:
    rules = Ruleset.default()

    assert set(rules.weapons) == set(WeaponId)
    assert set(rules.armor) == set(ArmorId)
    assert set(rules.special_gear) == set(GearId)
    for entries in (rules.weapons, rules.armor, rules.special_gear):
        for entry_id, entry in entries.items():
            assert entry.id == entry_id.value
            assert entry.name.strip()

    assert rules.timing.tick_ms == 120
    assert rules.timing.advance_duration_ms == 900
    assert rules.dice_pool.clamp(0) == 1
    assert rules.dice_pool.clamp(99) == 20


def test_gear_summary() -> None:
    rules = Ruleset.default()
    summary = rules.gear_summary(WeaponId.CARBINE, None, (GearId.MEDKIT,))
    assert summary.startswith("Carbine, Unknown, ")


def test_requisition_and_notes_read_the_catalog() -> None:
    rules = Ruleset.default()
    gear = (GearId.HMG, GearId.MEDKIT)
    assert rules.requisition_cost(WeaponId.ASSAULT_RIFLE, ArmorId.HEAVY, gear) == 4
    assert rules.requisition_cost(WeaponId.CARBINE, None, ()) == 0

    notes = rules.loadout_notes(WeaponId.CARBINE, ArmorId.HEAVY, (GearId.MEDKIT,))
    assert notes == [
        "Carbine: +1 offense when Engaged in a Tight sector.",
        "Heavy Armor: Injury threshold -1. Any heavy armor gives the squad -1 mobility.",
        "Field Medkit: Stabilize a Bleeding Out trooper.",
    ]


def test_missing_file_raises(tmp_path) -> None:
    with pytest.raises(RulesError, match="not found"):
        Ruleset.load(tmp_path)


def test_invalid_json_raises(tmp_path) -> None:
    (tmp_path / "rules.json").write_text("{nope", encoding="utf-8")
    with pytest.raises(RulesError, match="Invalid JSON"):
        Ruleset.load(tmp_path)


def test_catalog_must_cover_every_id(tmp_path) -> None:
    def drop_heavy(data):
        data["armor"] = [entry for entry in data["armor"] if entry["id"] != "heavy"]

    with pytest.raises(RulesError, match="missing definitions for heavy"):
        Ruleset.load(_write_rules(tmp_path, drop_heavy))


def test_unknown_catalog_id_raises(tmp_path) -> None:
    def add_laser(data):
        data["weapons"].append({"id": "laser", "name": "Laser"})

    with pytest.raises(RulesError, match="unknown weapons id 'laser'"):
        Ruleset.load(_write_rules(tmp_path, add_laser))


def test_timing_validation(tmp_path) -> None:
    def short_roll(data):
        data["timing"]["advance_duration_ms"] = 50

    with pytest.raises(RulesError, match="advance_duration_ms"):
        Ruleset.load(_write_rules(tmp_path, short_roll))


def test_dice_pool_validation(tmp_path) -> None:
    def inverted(data):
        data["dice_pool"] = {"min_dice": 5, "max_dice": 2, "default_dice": 3}

    with pytest.raises(RulesError, match="dice_pool"):
        Ruleset.load(_write_rules(tmp_path, inverted))

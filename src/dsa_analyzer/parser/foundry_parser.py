"""Parse Foundry VTT dsa5 actor exports into CharacterRecords.

An export is a JSON document with a top-level "items" array (skills,
spells, advantages, ... each with a "type" and a "system" block of
{"value": ...} wrappers) and a "system" block holding characteristics,
status energies, and details such as species and experience.

Structurally unusable documents raise ValueError; the analysis never sees
them. Everything else is carried over as-is, including odd values the
analysis is meant to flag.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from dsa_analyzer.models.character import CharacterRecord, EnergyPool, SpecialAbility
from dsa_analyzer.models.constants import ABILITY_KIND_CATEGORY, ITEM_TYPES, Category


logger = logging.getLogger(__name__)

# status key -> energy name; LeP has no rebuy
_ENERGY_KEYS: dict[str, str] = {
    "wounds": "LeP",
    "astralenergy": "AsP",
    "karmaenergy": "KaP",
}


def _object(value: Any, what: str) -> dict[str, Any]:
    """*value* as a dict; missing or null becomes {}."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{what} must be an object, got {type(value).__name__}")
    return value


def _system_value(item: dict[str, Any], key: str) -> Any:
    """item["system"][key]["value"], or None when any level is missing."""
    system = item.get("system")
    if not isinstance(system, dict):
        return None
    entry = system.get(key)
    if isinstance(entry, dict):
        return entry.get("value")
    return None


def _parse_tier(value: Any, what: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{what}: bool is not a valid tier")
    if isinstance(value, int):
        tier = value
    elif isinstance(value, float) and value.is_integer():
        tier = int(value)
    elif isinstance(value, str):
        try:
            tier = int(value.strip())
        except ValueError:
            raise ValueError(f"{what}: expected an integer tier, got {value!r}") from None
    else:
        raise ValueError(f"{what}: expected an integer tier, got {value!r}")
    if tier < 0:
        raise ValueError(f"{what}: tier must be >= 0, got {tier}")
    return tier


def _int_field(block: dict[str, Any], key: str, what: str, default: int | None = 0) -> int | None:
    value = block.get(key, default)
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{what}.{key}: expected an integer, got {value!r}") from None


def _parse_step(value: Any) -> tuple[int | None, str | None]:
    """(rank, None) for an integer step, (None, raw text) for anything else.

    A bad rank is an entry-level problem; the calculator flags it.
    """
    if value is None or value == "":
        return None, None
    try:
        return int(str(value).strip()), None
    except ValueError:
        return None, str(value)


def _parse_characteristics(system: dict[str, Any]) -> dict[str, int]:
    attributes: dict[str, int] = {}
    characteristics = _object(system.get("characteristics"), "system.characteristics")
    for key, block in characteristics.items():
        if not isinstance(block, dict):
            continue
        what = f"characteristics.{key}"
        # Nominal value: species modifiers are not bought with AP.
        attributes[key] = _int_field(block, "initial", what) + _int_field(block, "advances", what)
    return attributes


def _parse_energies(system: dict[str, Any]) -> dict[str, EnergyPool]:
    energies: dict[str, EnergyPool] = {}
    status = _object(system.get("status"), "system.status")
    for key, name in _ENERGY_KEYS.items():
        block = status.get(key)
        if not isinstance(block, dict):
            continue
        what = f"status.{key}"
        rebuy = _int_field(block, "rebuy", what) if name != "LeP" else 0
        energies[name] = EnergyPool(advances=_int_field(block, "advances", what), rebuy=rebuy)
    return energies


def _parse_experience(details: dict[str, Any]) -> tuple[int, int | None]:
    experience = _object(details.get("experience"), "details.experience")
    spent = _int_field(experience, "spent", "details.experience")
    total = _int_field(experience, "total", "details.experience", default=None)
    return spent, total


def _parse_species(details: dict[str, Any]) -> str:
    species = details.get("species")
    if isinstance(species, dict):
        species = species.get("value")
    if not species:
        return "Mensch"
    return str(species)


def parse_character(data: dict[str, Any]) -> CharacterRecord:
    """Convert one parsed actor export into a CharacterRecord."""
    if not isinstance(data, dict):
        raise ValueError("Character export must be a JSON object")
    items = data.get("items")
    if not isinstance(items, list):
        raise ValueError("Character export has no 'items' array")
    system = _object(data.get("system"), "Character export 'system'")
    details = _object(system.get("details"), "system.details")

    reported_total, experience_total = _parse_experience(details)
    record = CharacterRecord(
        name=str(data.get("name") or "Unnamed"),
        species=_parse_species(details),
        attributes=_parse_characteristics(system),
        energies=_parse_energies(system),
        reported_total=reported_total,
        experience_total=experience_total,
    )

    tiered: dict[str, tuple[Category, dict[str, int]]] = {
        "skill": (Category.SKILLS, record.skills),
        "combatskill": (Category.COMBAT_TECHNIQUES, record.combat_techniques),
    }
    for item_type in ITEM_TYPES[Category.SPELLS]:
        tiered[item_type] = (Category.SPELLS, record.spells)
    for item_type in ITEM_TYPES[Category.LITURGIES]:
        tiered[item_type] = (Category.LITURGIES, record.liturgies)
    flat = {
        "magictrick": record.magic_tricks,
        "blessing": record.blessings,
    }

    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise ValueError(f"items[{index}] must be an object")
        item_type = str(item.get("type", ""))
        name = item.get("name")
        if not name:
            raise ValueError(f"items[{index}] ({item_type or 'untyped'}) has no name")
        name = str(name)

        if item_type in tiered:
            category, tiers = tiered[item_type]
            tier = _parse_tier(_system_value(item, "talentValue"), f"{item_type} {name!r}")
            if name in tiers:
                # One trait per name; the higher tier is the one that was paid for.
                logger.warning(
                    "Duplicate %s %r (tiers %d and %d); keeping the higher",
                    category.value, name, tiers[name], tier,
                )
                if tier <= tiers[name]:
                    continue
            tiers[name] = tier
            column = _system_value(item, "StF")
            if column:
                record.improvement_costs[(category, name)] = str(column)
        elif item_type in flat:
            flat[item_type].append(name)
        else:
            ap_value = _system_value(item, "APValue")
            if ap_value is None:
                # Equipment, notes, and other items without an AP price.
                continue
            step, raw_step = _parse_step(_system_value(item, "step"))
            record.special_abilities.append(
                SpecialAbility(
                    name=name,
                    kind=item_type if item_type in ABILITY_KIND_CATEGORY else "specialability",
                    ap_value=str(ap_value),
                    step=step,
                    raw_step=raw_step,
                )
            )

    return record


def load_character(path: Path) -> CharacterRecord:
    """Read and parse an exported actor JSON file."""
    with open(path, encoding="utf-8") as f:
        return parse_character(json.load(f))

"""Per-category AP calculators.

Each progression category has one calculator. They share a contract,
compute(category, record) -> CategoryBreakdown, and differ only in the
formula that turns current tiers into AP:

  - tiered traits sum single-step costs from the category baseline up to
    the current tier (attributes from 8, combat techniques from 6,
    everything else from 0)
  - spells and liturgies add their column's acquisition fee once
  - magic tricks and blessings are flat purchases
  - advantages, disadvantages and special abilities are priced from
    their declared AP value, by shape: one value is a per-rank cost, a
    ";"-separated list holds cumulative per-rank costs

Faults are isolated to the entry that caused them: an unpriceable step
costs 0, an unresolvable trait costs 0, and either way the entry is
flagged and kept in the breakdown.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import replace

from dsa_analyzer.engine.analysis_config import AnalysisConfig
from dsa_analyzer.models.catalog import (
    ATTRIBUTES,
    COMBAT_TECHNIQUE_COLUMNS,
    SKILL_COLUMNS,
    attribute_key,
)
from dsa_analyzer.models.character import CharacterRecord, SpecialAbility
from dsa_analyzer.models.constants import (
    ABILITY_KIND_CATEGORY,
    ENERGY_NAMES,
    Category,
    CostColumn,
)
from dsa_analyzer.models.cost_table import DEFAULT_COST_TABLE, CostTable
from dsa_analyzer.models.errors import UnrecognizedTrait, UnsupportedTier
from dsa_analyzer.models.report import CategoryBreakdown, CostEntry, EntryFlag


logger = logging.getLogger(__name__)

Calculator = Callable[[CharacterRecord, CostTable, AnalysisConfig], list[CostEntry]]


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _unrecognized(exc: UnrecognizedTrait, start: int, end: int) -> CostEntry:
    return CostEntry(exc.name, start, end, 0, EntryFlag.UNRECOGNIZED_TRAIT, str(exc))


def _resolve_column(
    category: Category,
    name: str,
    record: CharacterRecord,
    catalog: Mapping[str, CostColumn],
) -> CostColumn:
    """Declared cost column for *name*, else the catalog's."""
    declared = record.improvement_costs.get((category, name))
    if declared is not None:
        try:
            return CostColumn(str(declared).strip().upper())
        except ValueError:
            raise UnrecognizedTrait(
                category.value, name, f"unknown cost column {declared!r}"
            ) from None
    column = catalog.get(name)
    if column is None:
        raise UnrecognizedTrait(category.value, name, "no cost column declared or known")
    return column


def _tiered_entry(
    name: str,
    tier: int,
    baseline: int,
    column: CostColumn,
    table: CostTable,
    *,
    acquisition: bool = False,
) -> CostEntry:
    """Raise *name* from baseline to tier one step at a time."""
    if tier < baseline:
        return CostEntry(
            name, tier, tier, 0, EntryFlag.BELOW_BASELINE, f"below baseline {baseline}"
        )

    cost = 0
    problems: list[str] = []
    if acquisition:
        try:
            cost += table.acquisition_cost(column)
        except UnsupportedTier as exc:
            problems.append(str(exc))

    unpriced: list[int] = []
    for k in range(baseline, tier):
        try:
            cost += table.cost_of_step(column, k, k + 1)
        except UnsupportedTier:
            unpriced.append(k + 1)
    if unpriced:
        problems.append(
            f"tiers {unpriced[0]}-{unpriced[-1]} exceed column {column.value} "
            f"(max {table.max_tier(column)}), counted as 0"
        )

    if problems:
        return CostEntry(
            name, baseline, tier, cost, EntryFlag.UNSUPPORTED_TIER, "; ".join(problems)
        )
    return CostEntry(name, baseline, tier, cost)


def _tiered_entries(
    category: Category,
    traits: Mapping[str, int],
    record: CharacterRecord,
    table: CostTable,
    *,
    baseline: int = 0,
    catalog: Mapping[str, CostColumn] | None = None,
    acquisition: bool = False,
) -> list[CostEntry]:
    entries: list[CostEntry] = []
    for name, tier in sorted(traits.items()):
        try:
            column = _resolve_column(category, name, record, catalog or {})
        except UnrecognizedTrait as exc:
            entries.append(_unrecognized(exc, baseline, tier))
            continue
        entries.append(
            _tiered_entry(name, tier, baseline, column, table, acquisition=acquisition)
        )
    return entries


# ---------------------------------------------------------------------------
# Tiered categories
# ---------------------------------------------------------------------------


def _attribute_entries(
    record: CharacterRecord, table: CostTable, config: AnalysisConfig
) -> list[CostEntry]:
    tiers: dict[str, int] = {}
    unknown: list[str] = []
    for name, tier in record.attributes.items():
        key = attribute_key(name)
        if key is None:
            unknown.append(name)
        else:
            tiers[key] = tier

    baseline = config.attribute_baseline
    entries = [
        _tiered_entry(display, tiers[key], baseline, config.attribute_column, table)
        for key, display in ATTRIBUTES.items()
        if key in tiers
    ]
    for name in sorted(unknown):
        exc = UnrecognizedTrait(Category.ATTRIBUTES.value, name, "not a DSA5 attribute")
        entries.append(_unrecognized(exc, baseline, record.attributes[name]))
    return entries


def _energy_entries(
    record: CharacterRecord, table: CostTable, config: AnalysisConfig
) -> list[CostEntry]:
    entries: list[CostEntry] = []
    known = [n for n in ENERGY_NAMES if n in record.energies]
    unknown = sorted(n for n in record.energies if n not in ENERGY_NAMES)
    for name in known:
        pool = record.energies[name]
        entries.append(_tiered_entry(name, pool.advances, 0, config.energy_column, table))
        if pool.rebuy < 0:
            entries.append(
                CostEntry(f"{name} rebuy", pool.rebuy, pool.rebuy, 0,
                          EntryFlag.BELOW_BASELINE, "negative rebuy points")
            )
        elif pool.rebuy:
            entries.append(
                CostEntry(f"{name} rebuy", 0, pool.rebuy, pool.rebuy * config.rebuy_cost,
                          note=f"{pool.rebuy} × {config.rebuy_cost}")
            )
    for name in unknown:
        exc = UnrecognizedTrait(Category.ENERGIES.value, name, "not LeP, AsP or KaP")
        entries.append(_unrecognized(exc, 0, record.energies[name].advances))
    return entries


def _skill_entries(
    record: CharacterRecord, table: CostTable, config: AnalysisConfig
) -> list[CostEntry]:
    return _tiered_entries(
        Category.SKILLS, record.skills, record, table, catalog=SKILL_COLUMNS
    )


def _combat_technique_entries(
    record: CharacterRecord, table: CostTable, config: AnalysisConfig
) -> list[CostEntry]:
    return _tiered_entries(
        Category.COMBAT_TECHNIQUES,
        record.combat_techniques,
        record,
        table,
        baseline=config.combat_technique_baseline,
        catalog=COMBAT_TECHNIQUE_COLUMNS,
    )


def _spell_entries(
    record: CharacterRecord, table: CostTable, config: AnalysisConfig
) -> list[CostEntry]:
    return _tiered_entries(
        Category.SPELLS, record.spells, record, table, acquisition=True
    )


def _liturgy_entries(
    record: CharacterRecord, table: CostTable, config: AnalysisConfig
) -> list[CostEntry]:
    return _tiered_entries(
        Category.LITURGIES, record.liturgies, record, table, acquisition=True
    )


# ---------------------------------------------------------------------------
# Flat purchases
# ---------------------------------------------------------------------------


def _magic_trick_entries(
    record: CharacterRecord, table: CostTable, config: AnalysisConfig
) -> list[CostEntry]:
    return [CostEntry(n, 0, 1, config.magic_trick_cost) for n in sorted(record.magic_tricks)]


def _blessing_entries(
    record: CharacterRecord, table: CostTable, config: AnalysisConfig
) -> list[CostEntry]:
    return [CostEntry(n, 0, 1, config.blessing_cost) for n in sorted(record.blessings)]


# ---------------------------------------------------------------------------
# Advantages, disadvantages, special abilities
# ---------------------------------------------------------------------------


def ability_category(kind: str) -> Category:
    """Category an ability of export type *kind* is reported under."""
    return ABILITY_KIND_CATEGORY.get(kind.strip().lower(), Category.SPECIAL_ABILITIES)


def _base_name(name: str) -> str:
    """'Prinzipientreue (Hesindekirche)' -> 'Prinzipientreue'."""
    return name.split("(", 1)[0].strip()


def _parse_ap_value(category: Category, ability: SpecialAbility) -> list[int]:
    try:
        return [int(part.strip()) for part in str(ability.ap_value).split(";")]
    except ValueError:
        raise UnrecognizedTrait(
            category.value, ability.name, f"unparseable AP value {ability.ap_value!r}"
        ) from None


def _ranked_cost(values: list[int], rank: int, raw: str) -> tuple[int, str]:
    """Cost and calculation note for *rank* ranks of an ability."""
    if len(values) == 1:
        if rank == 1:
            return values[0], str(values[0])
        return values[0] * rank, f"{values[0]} × {rank}"
    if rank > len(values):
        raise UnsupportedTier(raw, len(values), rank, f"only {len(values)} ranks declared")
    taken = values[:rank]
    if len(taken) == 1:
        return taken[0], str(taken[0])
    return sum(taken), "Sum: " + " + ".join(str(v) for v in taken)


def _ability_entry(category: Category, ability: SpecialAbility) -> CostEntry:
    if ability.raw_step is not None:
        exc = UnrecognizedTrait(
            category.value, ability.name, f"unparseable rank {ability.raw_step!r}"
        )
        return _unrecognized(exc, 0, 0)

    rank = ability.step if ability.step is not None else 1
    try:
        values = _parse_ap_value(category, ability)
    except UnrecognizedTrait as exc:
        return _unrecognized(exc, 0, rank)

    if rank < 1:
        return CostEntry(
            ability.name, 0, rank, 0, EntryFlag.BELOW_BASELINE, "rank must be at least 1"
        )
    try:
        cost, note = _ranked_cost(values, rank, str(ability.ap_value))
    except UnsupportedTier as exc:
        return CostEntry(
            ability.name, 0, rank, sum(values), EntryFlag.UNSUPPORTED_TIER,
            f"{exc}, extra ranks counted as 0",
        )
    return CostEntry(ability.name, 0, rank, cost, note=note)


def _ability_entries(
    category: Category, record: CharacterRecord, config: AnalysisConfig
) -> list[CostEntry]:
    entries: list[CostEntry] = []
    # Base name -> instances charged only at their highest rank
    groups: dict[str, list[CostEntry]] = {}

    for ability in record.special_abilities:
        if ability_category(ability.kind) != category:
            continue
        entry = _ability_entry(category, ability)
        base = _base_name(ability.name)
        # Unpriceable instances never outrank a priced one
        if base in config.highest_step_only and entry.flag != EntryFlag.UNRECOGNIZED_TRAIT:
            groups.setdefault(base, []).append(entry)
        else:
            entries.append(entry)

    for group in groups.values():
        group.sort(key=lambda e: e.end_tier, reverse=True)
        kept = group[0]
        entries.append(kept)
        for dup in group[1:]:
            entries.append(
                replace(
                    dup,
                    ap_cost=0,
                    flag=EntryFlag.DUPLICATE_EXCLUDED,
                    note=f"lower rank than {kept.name}; would cost {dup.ap_cost}",
                )
            )

    entries.sort(key=lambda e: (e.name, -e.end_tier))
    return entries


def _advantage_entries(
    record: CharacterRecord, table: CostTable, config: AnalysisConfig
) -> list[CostEntry]:
    return _ability_entries(Category.ADVANTAGES, record, config)


def _disadvantage_entries(
    record: CharacterRecord, table: CostTable, config: AnalysisConfig
) -> list[CostEntry]:
    return _ability_entries(Category.DISADVANTAGES, record, config)


def _special_ability_entries(
    record: CharacterRecord, table: CostTable, config: AnalysisConfig
) -> list[CostEntry]:
    return _ability_entries(Category.SPECIAL_ABILITIES, record, config)


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


_CALCULATORS: dict[Category, Calculator] = {
    Category.ATTRIBUTES: _attribute_entries,
    Category.ENERGIES: _energy_entries,
    Category.SKILLS: _skill_entries,
    Category.COMBAT_TECHNIQUES: _combat_technique_entries,
    Category.SPELLS: _spell_entries,
    Category.MAGIC_TRICKS: _magic_trick_entries,
    Category.LITURGIES: _liturgy_entries,
    Category.BLESSINGS: _blessing_entries,
    Category.ADVANTAGES: _advantage_entries,
    Category.DISADVANTAGES: _disadvantage_entries,
    Category.SPECIAL_ABILITIES: _special_ability_entries,
}


def compute(
    category: Category | str,
    record: CharacterRecord,
    table: CostTable | None = None,
    config: AnalysisConfig | None = None,
) -> CategoryBreakdown:
    """Cost every trait of *category* on *record*.

    Never raises for bad character data; problem entries come back
    flagged with cost 0 for the parts that could not be priced.
    """
    category = Category(category)
    table = table or DEFAULT_COST_TABLE
    config = config or AnalysisConfig()

    entries = _CALCULATORS[category](record, table, config)
    for entry in entries:
        if entry.flagged:
            logger.debug(
                "%s: %s flagged %s (%s)",
                category.value, entry.name, entry.flag.value, entry.note,
            )
    return CategoryBreakdown.from_entries(category, entries)

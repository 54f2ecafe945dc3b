"""Tests for the analysis pipeline: aggregate, verify, analyze."""

import logging

import pytest

from dsa_analyzer.engine import (
    AnalysisConfig,
    aggregate,
    analyze,
    compute_breakdowns,
    verify,
)
from dsa_analyzer.engine.aggregate import subtotals_by_category
from dsa_analyzer.engine.analyzer import check_species
from dsa_analyzer.export.report_payload import report_to_json
from dsa_analyzer.models.character import CharacterRecord, EnergyPool, SpecialAbility
from dsa_analyzer.models.constants import Category
from dsa_analyzer.models.cost_table import CostTable
from dsa_analyzer.models.errors import UnsupportedSpecies
from dsa_analyzer.models.report import CategoryBreakdown, CostEntry, EntryFlag


@pytest.fixture
def flat_table():
    return CostTable.flat(1, 14)


@pytest.fixture
def haggler():
    """Feilschen 3 (A) and Klettern 5 (B); 8 AP on a flat table."""
    return CharacterRecord(
        name="Alrik",
        skills={"Feilschen": 3, "Klettern": 5},
        improvement_costs={
            (Category.SKILLS, "Feilschen"): "A",
            (Category.SKILLS, "Klettern"): "B",
        },
        reported_total=10,
    )


@pytest.fixture
def adventurer():
    return CharacterRecord(
        name="Gerion",
        attributes={"mu": 12, "kl": 13, "ge": 8},
        skills={"Klettern": 5, "Körperbeherrschung": 13, "Zechen": 2},
        combat_techniques={"Schwerter": 10, "Dolche": 6},
        energies={"LeP": EnergyPool(advances=2)},
        special_abilities=[
            SpecialAbility("Glück", "advantage", "30"),
            SpecialAbility("Neugier", "disadvantage", "-5"),
            SpecialAbility("Finte", ap_value="15;20;25", step=2),
        ],
        reported_total=300,
    )


# --- aggregate ---

def test_aggregate_sums_subtotals():
    breakdowns = [
        CategoryBreakdown(Category.SKILLS, 8),
        CategoryBreakdown(Category.DISADVANTAGES, -20),
        CategoryBreakdown(Category.ATTRIBUTES, 60),
    ]
    assert aggregate(breakdowns) == 48


def test_aggregate_empty():
    assert aggregate([]) == 0


def test_subtotals_by_category_merges_repeats():
    breakdowns = [
        CategoryBreakdown(Category.SKILLS, 8),
        CategoryBreakdown(Category.SKILLS, 2),
        CategoryBreakdown(Category.SPELLS, 5),
    ]
    assert subtotals_by_category(breakdowns) == {Category.SKILLS: 10, Category.SPELLS: 5}


# --- verify ---

def test_verify_grand_total_only():
    record = CharacterRecord(reported_total=10)
    report = verify(8, record)
    assert report.discrepancy == -2
    assert report.category_discrepancies == ()
    assert not report.is_consistent


def test_verify_category_discrepancies_follow_report_order():
    record = CharacterRecord(
        reported_total=20,
        reported_subtotals={Category.SPELLS: 5, Category.SKILLS: 10},
    )
    breakdowns = (
        CategoryBreakdown(Category.SKILLS, 8),
        CategoryBreakdown(Category.SPELLS, 5),
    )
    report = verify(13, record, breakdowns)
    assert [d.category for d in report.category_discrepancies] == [
        Category.SKILLS,
        Category.SPELLS,
    ]
    assert [d.discrepancy for d in report.category_discrepancies] == [-2, 0]


def test_verify_missing_breakdown_counts_as_zero():
    record = CharacterRecord(reported_subtotals={"blessings": 3})
    report = verify(0, record)
    (d,) = report.category_discrepancies
    assert d.category == Category.BLESSINGS
    assert d.computed == 0
    assert d.discrepancy == -3


# --- analyze ---

def test_baseline_character_costs_nothing():
    record = CharacterRecord(
        attributes={"mu": 8, "kl": 8},
        combat_techniques={"Schwerter": 6},
        skills={"Zechen": 0},
    )
    report = analyze(record)
    assert report.bottom_up_total == 0
    assert report.discrepancy == 0
    assert report.is_consistent
    assert report.warnings == ()


def test_empty_record_has_all_categories():
    report = analyze(CharacterRecord())
    assert [b.category for b in report.breakdowns] == list(Category)
    assert report.bottom_up_total == 0


def test_haggler_discrepancy(haggler, flat_table):
    """Computed 8 against a reported 10."""
    report = analyze(haggler, flat_table)
    assert report.bottom_up_total == 8
    assert report.reported_total == 10
    assert report.discrepancy == -2
    assert report.breakdown_for(Category.SKILLS).subtotal == 8
    assert report.category_discrepancies == ()


def test_matching_category_subtotal(haggler, flat_table):
    haggler.reported_subtotals = {Category.SKILLS: 8}
    report = analyze(haggler, flat_table)
    (d,) = report.category_discrepancies
    assert d.category == Category.SKILLS
    assert d.discrepancy == 0
    assert report.discrepancy == -2


def test_adventurer_total(adventurer):
    """
    attributes  MU 12: 60, KL 13: 75, GE 8: 0                 = 135
    energies    LeP 2 advances (D)                            =   8
    skills      Klettern 10, Körperbeherrschung 56, Zechen 2  =  68
    combat      Schwerter 12, Dolche 0                        =  12
    abilities   Glück 30, Neugier -5, Finte 15 + 20           =  60
    """
    report = analyze(adventurer)
    subtotals = {b.category: b.subtotal for b in report.breakdowns}
    assert subtotals[Category.ATTRIBUTES] == 135
    assert subtotals[Category.ENERGIES] == 8
    assert subtotals[Category.SKILLS] == 68
    assert subtotals[Category.COMBAT_TECHNIQUES] == 12
    assert subtotals[Category.ADVANTAGES] == 30
    assert subtotals[Category.DISADVANTAGES] == -5
    assert subtotals[Category.SPECIAL_ABILITIES] == 35
    assert report.bottom_up_total == 283
    assert report.discrepancy == -17


def test_total_is_sum_of_subtotals(adventurer):
    report = analyze(adventurer)
    assert report.bottom_up_total == sum(b.subtotal for b in report.breakdowns)


def test_analyze_is_deterministic(adventurer):
    first = analyze(adventurer)
    second = analyze(adventurer)
    assert first == second
    assert report_to_json(first) == report_to_json(second)


def test_parallel_matches_sequential(adventurer):
    sequential = analyze(adventurer)
    parallel = analyze(adventurer, config=AnalysisConfig(parallel=True, max_workers=4))
    assert parallel == sequential


def test_compute_breakdowns_order(adventurer):
    breakdowns = compute_breakdowns(adventurer, config=AnalysisConfig(parallel=True))
    assert [b.category for b in breakdowns] == list(Category)


def test_unrecognized_trait_isolated(adventurer):
    baseline = analyze(adventurer)
    adventurer.skills["Blubbern"] = 9
    report = analyze(adventurer)

    assert report.bottom_up_total == baseline.bottom_up_total
    for before, after in zip(baseline.breakdowns, report.breakdowns):
        assert after.subtotal == before.subtotal
    ((category, entry),) = report.flagged_entries
    assert category == Category.SKILLS
    assert entry.name == "Blubbern"
    assert entry.flag == EntryFlag.UNRECOGNIZED_TRAIT
    assert report.warnings == ("1 entries flagged and counted with partial or zero cost",)


# --- species ---

def test_check_species():
    check_species(CharacterRecord(species="Mensch"), AnalysisConfig())
    check_species(CharacterRecord(species=" human "), AnalysisConfig())
    with pytest.raises(UnsupportedSpecies) as excinfo:
        check_species(CharacterRecord(species="Elf"), AnalysisConfig())
    assert excinfo.value.species == "Elf"


def test_unsupported_species_still_reported(adventurer, caplog):
    adventurer.species = "Elf"
    with caplog.at_level(logging.WARNING, logger="dsa_analyzer"):
        report = analyze(adventurer)

    assert not report.species_supported
    assert report.bottom_up_total == 283
    assert any("Elf" in w for w in report.warnings)
    assert any("Elf" in r.getMessage() for r in caplog.records)


def test_species_configurable(adventurer):
    adventurer.species = "Elf"
    config = AnalysisConfig(supported_species=frozenset({"Mensch", "Elf"}))
    assert analyze(adventurer, config=config).species_supported


# --- config ---

def test_config_rejects_negative_values():
    with pytest.raises(ValueError, match="rebuy_cost"):
        AnalysisConfig(rebuy_cost=-1)
    with pytest.raises(ValueError, match="max_workers"):
        AnalysisConfig(max_workers=0)


def test_report_flagged_entries_empty_when_clean(haggler, flat_table):
    report = analyze(haggler, flat_table)
    assert report.flagged_entries == ()
    assert report.breakdown_for(Category.SKILLS).entries[0] == CostEntry("Feilschen", 0, 3, 3)

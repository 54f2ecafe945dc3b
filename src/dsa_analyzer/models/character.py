"""Character record consumed by the AP analysis.

Represents one imported DSA5 character: current tiers per progression
category, purchased abilities, energy advances, and the AP totals the
originating platform tracked while the character was played. Built by
the import layer; the analysis only reads it.
"""

from dataclasses import dataclass, field

from dsa_analyzer.models.constants import Category


@dataclass(frozen=True, slots=True)
class SpecialAbility:
    """An advantage, disadvantage, or special ability with a declared AP value.

    ap_value is kept as exported: a single integer ("10", "-20") is a
    per-rank cost, a ";"-separated list ("5;10;15") holds the cumulative
    per-rank costs.
    """
    name: str
    kind: str = "specialability"   # "advantage" | "disadvantage" | "specialability"
    ap_value: str = "0"
    step: int | None = None        # rank; None means a single purchase
    raw_step: str | None = None    # exported rank text that is not an integer


@dataclass(frozen=True, slots=True)
class EnergyPool:
    """Bought advances of LeP, AsP or KaP."""
    advances: int = 0
    rebuy: int = 0                 # permanently lost points bought back


@dataclass
class CharacterRecord:
    """One imported character.

    Trait mappings are name -> current tier. improvement_costs holds the
    cost column (A-E) the export declared per (category, trait name);
    traits missing from it are looked up in the built-in catalog.
    """

    # Identity
    name: str = "Unnamed"
    species: str = "Mensch"

    # Tiered traits
    attributes: dict[str, int] = field(default_factory=dict)
    skills: dict[str, int] = field(default_factory=dict)
    combat_techniques: dict[str, int] = field(default_factory=dict)
    spells: dict[str, int] = field(default_factory=dict)
    liturgies: dict[str, int] = field(default_factory=dict)
    improvement_costs: dict[tuple[Category, str], str] = field(default_factory=dict)

    # Flat purchases
    magic_tricks: list[str] = field(default_factory=list)
    blessings: list[str] = field(default_factory=list)
    special_abilities: list[SpecialAbility] = field(default_factory=list)

    # Energy name ("LeP", "AsP", "KaP") -> bought advances
    energies: dict[str, EnergyPool] = field(default_factory=dict)

    # Top-down totals tracked by the platform
    reported_total: int = 0
    reported_subtotals: dict[Category, int] | None = None
    experience_total: int | None = None

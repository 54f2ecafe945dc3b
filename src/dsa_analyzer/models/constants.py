"""DSA5 progression categories, cost columns, and rule constants.

Column factors and flat ranges follow the published improvement-cost
table (Steigerungsfaktoren A-E). Category labels match the headings used
by the analysis view.
"""

from enum import Enum


class Category(str, Enum):
    """Progression categories, in report order."""
    ATTRIBUTES = "attributes"
    ENERGIES = "energies"
    SKILLS = "skills"
    COMBAT_TECHNIQUES = "combat_techniques"
    SPELLS = "spells"                  # spells + rituals
    MAGIC_TRICKS = "magic_tricks"
    LITURGIES = "liturgies"            # liturgies + ceremonies
    BLESSINGS = "blessings"
    ADVANTAGES = "advantages"
    DISADVANTAGES = "disadvantages"
    SPECIAL_ABILITIES = "special_abilities"


CATEGORY_LABELS: dict[Category, str] = {
    Category.ATTRIBUTES: "Characteristics",
    Category.ENERGIES: "Energies (LeP/AsP/KaP)",
    Category.SKILLS: "Skills",
    Category.COMBAT_TECHNIQUES: "Combat Skills",
    Category.SPELLS: "Spells/Rituals",
    Category.MAGIC_TRICKS: "Magic Tricks",
    Category.LITURGIES: "Liturgies/Ceremonies",
    Category.BLESSINGS: "Blessings",
    Category.ADVANTAGES: "Advantages",
    Category.DISADVANTAGES: "Disadvantages",
    Category.SPECIAL_ABILITIES: "Special Abilities",
}


class CostColumn(str, Enum):
    """Improvement-cost column (StF) of the published cost table."""
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"


# AP per step inside the flat range; also the acquisition fee for
# spells and liturgies of that column.
COLUMN_FACTORS: dict[CostColumn, int] = {
    CostColumn.A: 1,
    CostColumn.B: 2,
    CostColumn.C: 3,
    CostColumn.D: 4,
    CostColumn.E: 15,
}

# Highest tier still bought at the flat factor. The step into tier t above
# this costs factor * (t - limit + 1).
FLAT_LIMITS: dict[CostColumn, int] = {
    CostColumn.A: 12,
    CostColumn.B: 12,
    CostColumn.C: 12,
    CostColumn.D: 12,
    CostColumn.E: 14,
}

# Highest tier the default table models for every column.
DEFAULT_MAX_TIER = 25

# Export item types feeding each tiered category.
ITEM_TYPES: dict[Category, tuple[str, ...]] = {
    Category.SKILLS: ("skill",),
    Category.COMBAT_TECHNIQUES: ("combatskill",),
    Category.SPELLS: ("spell", "ritual"),
    Category.LITURGIES: ("liturgy", "ceremony"),
    Category.MAGIC_TRICKS: ("magictrick",),
    Category.BLESSINGS: ("blessing",),
}

# Ability kinds that get their own category; anything else with an AP
# value lands in SPECIAL_ABILITIES.
ABILITY_KIND_CATEGORY: dict[str, Category] = {
    "advantage": Category.ADVANTAGES,
    "disadvantage": Category.DISADVANTAGES,
    "specialability": Category.SPECIAL_ABILITIES,
}

ENERGY_NAMES: tuple[str, ...] = ("LeP", "AsP", "KaP")

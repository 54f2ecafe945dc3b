"""Analysis result structures handed to presentation collaborators.

Everything here is frozen and built from tuples, so two analyses of the
same record compare equal and serialise identically.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from dsa_analyzer.models.constants import Category


class EntryFlag(str, Enum):
    """Why a cost entry deserves a second look."""
    UNSUPPORTED_TIER = "unsupported_tier"
    UNRECOGNIZED_TRAIT = "unrecognized_trait"
    BELOW_BASELINE = "below_baseline"
    DUPLICATE_EXCLUDED = "duplicate_excluded"


@dataclass(frozen=True, slots=True)
class CostEntry:
    """Cost of raising one trait from start_tier to end_tier."""
    name: str
    start_tier: int
    end_tier: int
    ap_cost: int
    flag: EntryFlag | None = None
    note: str = ""

    @property
    def flagged(self) -> bool:
        return self.flag is not None


@dataclass(frozen=True, slots=True)
class CategoryBreakdown:
    """Per-category subtotal with its per-trait audit rows."""
    category: Category
    subtotal: int
    entries: tuple[CostEntry, ...] = ()

    @classmethod
    def from_entries(cls, category: Category, entries: list[CostEntry]) -> CategoryBreakdown:
        return cls(
            category=category,
            subtotal=sum(e.ap_cost for e in entries),
            entries=tuple(entries),
        )

    @property
    def flagged_entries(self) -> tuple[CostEntry, ...]:
        return tuple(e for e in self.entries if e.flagged)


@dataclass(frozen=True, slots=True)
class CategoryDiscrepancy:
    """Computed minus reported AP for one category."""
    category: Category
    computed: int
    reported: int

    @property
    def discrepancy(self) -> int:
        return self.computed - self.reported


@dataclass(frozen=True, slots=True)
class AnalysisReport:
    """Bottom-up AP total reconciled against the platform's own total.

    category_discrepancies is empty when the record carried no per-category
    subtotals; that is "no data", not "no discrepancy".
    """

    character_name: str
    species: str
    bottom_up_total: int
    reported_total: int
    breakdowns: tuple[CategoryBreakdown, ...] = ()
    category_discrepancies: tuple[CategoryDiscrepancy, ...] = ()
    species_supported: bool = True
    warnings: tuple[str, ...] = field(default=())
    experience_total: int | None = None

    @property
    def discrepancy(self) -> int:
        return self.bottom_up_total - self.reported_total

    @property
    def unspent(self) -> int | None:
        """AP earned but not yet spent, by the platform's own numbers."""
        if self.experience_total is None:
            return None
        return self.experience_total - self.reported_total

    @property
    def is_consistent(self) -> bool:
        return self.discrepancy == 0 and all(
            d.discrepancy == 0 for d in self.category_discrepancies
        )

    @property
    def flagged_entries(self) -> tuple[tuple[Category, CostEntry], ...]:
        return tuple(
            (b.category, e) for b in self.breakdowns for e in b.flagged_entries
        )

    def breakdown_for(self, category: Category) -> CategoryBreakdown | None:
        for breakdown in self.breakdowns:
            if breakdown.category == category:
                return breakdown
        return None

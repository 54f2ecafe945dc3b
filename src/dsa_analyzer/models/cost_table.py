"""Improvement-cost table with per-step lookups.

A column's steps are stored as a tuple where index k holds the cost of
raising a trait from tier k to tier k + 1. Tables are immutable after
construction; DEFAULT_COST_TABLE is built once at import time and shared
by every calculator.

Reference: DSA5 Regelwerk, "Steigerungskosten" table (columns A-E).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from dsa_analyzer.models.constants import (
    COLUMN_FACTORS,
    DEFAULT_MAX_TIER,
    FLAT_LIMITS,
    CostColumn,
)
from dsa_analyzer.models.errors import UnsupportedTier


def _column_steps(factor: int, flat_limit: int, max_tier: int) -> tuple[int, ...]:
    """Step costs for one published column.

    The step into tier t costs the flat factor up to flat_limit, then
    factor * (t - flat_limit + 1): column B goes 2, 2, ..., 2, 4, 6, 8.
    """
    steps: list[int] = []
    for to_tier in range(1, max_tier + 1):
        if to_tier <= flat_limit:
            steps.append(factor)
        else:
            steps.append(factor * (to_tier - flat_limit + 1))
    return tuple(steps)


def _as_column(column: CostColumn | str) -> CostColumn | None:
    if isinstance(column, CostColumn):
        return column
    try:
        return CostColumn(str(column).strip().upper())
    except ValueError:
        return None


@dataclass(frozen=True)
class CostTable:
    """Immutable (column, tier step) -> AP cost mapping.

    Use defaults() for the published table or flat() for a uniform one.
    Two tables with equal contents compare equal.
    """

    steps: Mapping[CostColumn, tuple[int, ...]] = field(default_factory=dict)
    acquisition: Mapping[CostColumn, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        steps: dict[CostColumn, tuple[int, ...]] = {}
        for column, costs in self.steps.items():
            col = _as_column(column)
            if col is None:
                raise ValueError(f"Unknown cost column: {column!r}")
            costs = tuple(int(c) for c in costs)
            if any(c < 0 for c in costs):
                raise ValueError(f"Column {col.value} has a negative step cost")
            if any(b < a for a, b in zip(costs, costs[1:])):
                raise ValueError(f"Column {col.value} step costs must not decrease")
            steps[col] = costs

        acquisition: dict[CostColumn, int] = {}
        for column, cost in self.acquisition.items():
            col = _as_column(column)
            if col is None:
                raise ValueError(f"Unknown cost column: {column!r}")
            if int(cost) < 0:
                raise ValueError(f"Column {col.value} has a negative acquisition cost")
            acquisition[col] = int(cost)

        object.__setattr__(self, "steps", MappingProxyType(steps))
        object.__setattr__(self, "acquisition", MappingProxyType(acquisition))

    # --- Lookups -----------------------------------------------------------

    @property
    def columns(self) -> tuple[CostColumn, ...]:
        return tuple(c for c in CostColumn if c in self.steps)

    def max_tier(self, column: CostColumn | str) -> int:
        """Highest tier reachable in *column* (0 if the column is absent)."""
        col = _as_column(column)
        if col is None or col not in self.steps:
            return 0
        return len(self.steps[col])

    def cost_of_step(self, column: CostColumn | str, from_tier: int, to_tier: int) -> int:
        """AP cost of raising a trait in *column* from from_tier to to_tier.

        Only single steps are accepted. Steps outside the modeled range
        raise UnsupportedTier instead of extrapolating.
        """
        if to_tier != from_tier + 1:
            raise ValueError(
                f"cost_of_step takes single steps, got {from_tier}->{to_tier}"
            )
        col = _as_column(column)
        if col is None or col not in self.steps:
            raise UnsupportedTier(str(column), from_tier, to_tier, "column not in table")
        costs = self.steps[col]
        if from_tier < 0 or to_tier > len(costs):
            raise UnsupportedTier(
                col.value, from_tier, to_tier, f"table covers tiers 0-{len(costs)}"
            )
        return costs[from_tier]

    def cost_to_reach(self, column: CostColumn | str, from_tier: int, to_tier: int) -> int:
        """Sum of the single-step costs from from_tier up to to_tier."""
        return sum(
            self.cost_of_step(column, k, k + 1) for k in range(from_tier, to_tier)
        )

    def acquisition_cost(self, column: CostColumn | str) -> int:
        """One-off fee for learning a spell or liturgy of *column*."""
        col = _as_column(column)
        if col is None or col not in self.acquisition:
            raise UnsupportedTier(str(column), 0, 0, "no acquisition cost for column")
        return self.acquisition[col]

    # --- Factories ---------------------------------------------------------

    @classmethod
    def defaults(cls, max_tier: int = DEFAULT_MAX_TIER) -> CostTable:
        """The published DSA5 table, modeled up to *max_tier*."""
        steps = {
            column: _column_steps(COLUMN_FACTORS[column], FLAT_LIMITS[column], max_tier)
            for column in CostColumn
        }
        return cls(steps=steps, acquisition=dict(COLUMN_FACTORS))

    @classmethod
    def flat(
        cls,
        cost: int,
        max_tier: int,
        columns: Iterable[CostColumn] = tuple(CostColumn),
    ) -> CostTable:
        """Uniform table: every step and every acquisition costs *cost*."""
        columns = tuple(columns)
        return cls(
            steps={c: (cost,) * max_tier for c in columns},
            acquisition={c: cost for c in columns},
        )


DEFAULT_COST_TABLE = CostTable.defaults()

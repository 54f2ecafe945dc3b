"""Bottom-up AP total from per-category breakdowns."""

from collections.abc import Iterable

from dsa_analyzer.models.constants import Category
from dsa_analyzer.models.report import CategoryBreakdown


def aggregate(breakdowns: Iterable[CategoryBreakdown]) -> int:
    """Exact sum of all category subtotals, flagged zero-cost entries included."""
    return sum(b.subtotal for b in breakdowns)


def subtotals_by_category(breakdowns: Iterable[CategoryBreakdown]) -> dict[Category, int]:
    """Category -> subtotal, summing repeated categories."""
    subtotals: dict[Category, int] = {}
    for breakdown in breakdowns:
        subtotals[breakdown.category] = (
            subtotals.get(breakdown.category, 0) + breakdown.subtotal
        )
    return subtotals

"""Reconcile the bottom-up AP total against the platform's reported totals.

A nonzero discrepancy can mean a rule-application error in the
character's history, a species or house rule not modeled here, or a
flagged entry that was counted as 0. The report does not guess which.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from dsa_analyzer.engine.aggregate import subtotals_by_category
from dsa_analyzer.models.character import CharacterRecord
from dsa_analyzer.models.constants import Category
from dsa_analyzer.models.report import (
    AnalysisReport,
    CategoryBreakdown,
    CategoryDiscrepancy,
)


logger = logging.getLogger(__name__)


def verify(
    bottom_up_total: int,
    record: CharacterRecord,
    breakdowns: Sequence[CategoryBreakdown] = (),
    *,
    species_supported: bool = True,
    warnings: Iterable[str] = (),
) -> AnalysisReport:
    """Build the AnalysisReport for *record*.

    Per-category discrepancies are produced only for categories the record
    reports a subtotal for, in report order; a record without subtotals
    yields an empty sequence rather than zeros.
    """
    computed = subtotals_by_category(breakdowns)

    category_discrepancies: list[CategoryDiscrepancy] = []
    if record.reported_subtotals is not None:
        reported = {Category(k): v for k, v in record.reported_subtotals.items()}
        for category in Category:
            if category not in reported:
                continue
            category_discrepancies.append(
                CategoryDiscrepancy(
                    category=category,
                    computed=computed.get(category, 0),
                    reported=int(reported[category]),
                )
            )

    report = AnalysisReport(
        character_name=record.name,
        species=record.species,
        bottom_up_total=int(bottom_up_total),
        reported_total=int(record.reported_total),
        breakdowns=tuple(breakdowns),
        category_discrepancies=tuple(category_discrepancies),
        species_supported=species_supported,
        warnings=tuple(warnings),
        experience_total=record.experience_total,
    )

    logger.info(
        "%s: computed %d AP, reported %d AP, discrepancy %+d",
        report.character_name,
        report.bottom_up_total,
        report.reported_total,
        report.discrepancy,
    )
    for d in report.category_discrepancies:
        if d.discrepancy:
            logger.info("  %s: %+d", d.category.value, d.discrepancy)
    return report

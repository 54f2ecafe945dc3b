"""AP analysis pipeline: calculators -> aggregate -> verify.

analyze() is stateless; the only shared object is the read-only cost
table, so calculators may run on a thread pool when the config asks for it.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

from dsa_analyzer.engine.aggregate import aggregate
from dsa_analyzer.engine.analysis_config import AnalysisConfig
from dsa_analyzer.engine.calculators import compute
from dsa_analyzer.engine.verify import verify
from dsa_analyzer.models.character import CharacterRecord
from dsa_analyzer.models.constants import Category
from dsa_analyzer.models.cost_table import DEFAULT_COST_TABLE, CostTable
from dsa_analyzer.models.errors import UnsupportedSpecies
from dsa_analyzer.models.report import AnalysisReport, CategoryBreakdown


logger = logging.getLogger(__name__)


def check_species(record: CharacterRecord, config: AnalysisConfig) -> None:
    """Raise UnsupportedSpecies unless *record*'s species is modeled."""
    if not config.supports_species(record.species):
        raise UnsupportedSpecies(record.species)


def compute_breakdowns(
    record: CharacterRecord,
    table: CostTable | None = None,
    config: AnalysisConfig | None = None,
) -> tuple[CategoryBreakdown, ...]:
    """One breakdown per category, in report order."""
    table = table or DEFAULT_COST_TABLE
    config = config or AnalysisConfig()

    if not config.parallel:
        return tuple(compute(c, record, table, config) for c in Category)

    with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
        futures = [executor.submit(compute, c, record, table, config) for c in Category]
        return tuple(f.result() for f in futures)


def analyze(
    record: CharacterRecord,
    table: CostTable | None = None,
    config: AnalysisConfig | None = None,
) -> AnalysisReport:
    """Recompute the AP *record* should have spent and compare with its totals.

    Always returns a report. An unmodeled species is costed with the
    human baseline and marked untrustworthy.
    """
    config = config or AnalysisConfig()

    warnings: list[str] = []
    species_supported = True
    try:
        check_species(record, config)
    except UnsupportedSpecies as exc:
        logger.warning("%s: %s", record.name, exc)
        warnings.append(str(exc))
        species_supported = False

    breakdowns = compute_breakdowns(record, table, config)
    flagged = sum(len(b.flagged_entries) for b in breakdowns)
    if flagged:
        warnings.append(f"{flagged} entries flagged and counted with partial or zero cost")

    return verify(
        aggregate(breakdowns),
        record,
        breakdowns,
        species_supported=species_supported,
        warnings=warnings,
    )

"""Export an AnalysisReport as a JSON-ready payload for presentation."""

from __future__ import annotations

import json
from typing import Any

from dsa_analyzer.models.constants import CATEGORY_LABELS
from dsa_analyzer.models.report import AnalysisReport, CategoryBreakdown, CostEntry


def _entry_payload(entry: CostEntry) -> dict[str, Any]:
    return {
        "name": entry.name,
        "start_tier": int(entry.start_tier),
        "end_tier": int(entry.end_tier),
        "ap_cost": int(entry.ap_cost),
        "flag": entry.flag.value if entry.flag is not None else None,
        "note": entry.note,
    }


def _breakdown_payload(breakdown: CategoryBreakdown) -> dict[str, Any]:
    return {
        "category": breakdown.category.value,
        "label": CATEGORY_LABELS[breakdown.category],
        "subtotal": int(breakdown.subtotal),
        "flagged": len(breakdown.flagged_entries),
        "entries": [_entry_payload(e) for e in breakdown.entries],
    }


def comparison_label(discrepancy: int) -> str:
    """Human-readable verdict for a grand-total discrepancy."""
    if discrepancy == 0:
        return "Perfect match"
    if discrepancy > 0:
        return f"Platform shows {discrepancy} AP less"
    return f"Platform shows {-discrepancy} AP more"


def build_report_payload(report: AnalysisReport) -> dict[str, Any]:
    """Snapshot of *report* using only JSON types."""
    return {
        "character": {
            "name": report.character_name,
            "species": report.species,
            "species_supported": report.species_supported,
        },
        "totals": {
            "computed": int(report.bottom_up_total),
            "reported": int(report.reported_total),
            "discrepancy": int(report.discrepancy),
            "verdict": comparison_label(report.discrepancy),
            "consistent": report.is_consistent,
            "experience_total": report.experience_total,
            "unspent": report.unspent,
        },
        "categories": [_breakdown_payload(b) for b in report.breakdowns],
        "category_discrepancies": [
            {
                "category": d.category.value,
                "label": CATEGORY_LABELS[d.category],
                "computed": int(d.computed),
                "reported": int(d.reported),
                "discrepancy": int(d.discrepancy),
            }
            for d in report.category_discrepancies
        ],
        "warnings": list(report.warnings),
    }


def report_to_json(report: AnalysisReport, indent: int | None = 2) -> str:
    """Deterministic JSON text; equal reports give identical strings."""
    return json.dumps(
        build_report_payload(report), indent=indent, sort_keys=True, ensure_ascii=False
    )

"""Recompute the AP spent by an exported character and compare totals.

Usage examples:
    python -m scripts.analyze_character hero.json
    python -m scripts.analyze_character hero.json --json
    python -m scripts.analyze_character hero.json --config-file house_rules.json -v

The config file is a JSON object whose keys are AnalysisConfig fields, e.g.
    {"supported_species": ["Mensch", "Elf"], "rebuy_cost": 3, "parallel": true}
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import fields
from pathlib import Path
from typing import Any

from dsa_analyzer.engine import AnalysisConfig, analyze
from dsa_analyzer.export.report_payload import comparison_label, report_to_json
from dsa_analyzer.models.constants import CATEGORY_LABELS, CostColumn
from dsa_analyzer.models.report import AnalysisReport
from dsa_analyzer.parser.foundry_parser import load_character
from dsa_analyzer.utils import setup_logger


_SET_FIELDS = {"supported_species", "highest_step_only"}
_COLUMN_FIELDS = {"attribute_column", "energy_column"}


def _config_from_dict(data: dict[str, Any]) -> AnalysisConfig:
    known = {f.name for f in fields(AnalysisConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(unknown)}")

    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        if key in _SET_FIELDS:
            if isinstance(value, str) or not isinstance(value, list):
                raise ValueError(f"{key} must be a list of names")
            kwargs[key] = frozenset(str(v) for v in value)
        elif key in _COLUMN_FIELDS:
            kwargs[key] = CostColumn(str(value).strip().upper())
        elif key == "parallel":
            kwargs[key] = bool(value)
        elif key == "max_workers":
            kwargs[key] = None if value is None else int(value)
        else:
            if isinstance(value, bool):
                raise ValueError(f"{key} must be an integer")
            kwargs[key] = int(value)
    return AnalysisConfig(**kwargs)


def _print_report(report: AnalysisReport) -> None:
    print(f"\n{'='*56}")
    print(f"  {report.character_name} ({report.species})")
    print(f"{'='*56}")
    if not report.species_supported:
        print("  WARNING: species not modeled, totals use the human baseline")

    print("\n--- AP COMPARISON ---")
    print(f"  Our calculation   {report.bottom_up_total:>6} AP")
    print(f"  Platform          {report.reported_total:>6} AP")
    print(f"  Difference        {report.discrepancy:>+6}  {comparison_label(report.discrepancy)}")
    if report.experience_total is not None:
        print(f"  Total earned      {report.experience_total:>6} AP")
        print(f"  Unspent           {report.unspent:>6} AP")

    print("\n--- AP BY CATEGORY ---")
    for b in report.breakdowns:
        if not b.entries:
            continue
        marks = f"  [{len(b.flagged_entries)} flagged]" if b.flagged_entries else ""
        print(f"  {CATEGORY_LABELS[b.category]:<24} {b.subtotal:>6}{marks}")

    if report.category_discrepancies:
        print("\n--- CATEGORY DISCREPANCIES ---")
        for d in report.category_discrepancies:
            print(
                f"  {CATEGORY_LABELS[d.category]:<24} "
                f"{d.computed:>6} vs {d.reported:>6}  {d.discrepancy:>+5}"
            )

    flagged = report.flagged_entries
    if flagged:
        print("\n--- FLAGGED ENTRIES ---")
        for category, entry in flagged:
            print(
                f"  [{CATEGORY_LABELS[category]}] {entry.name}: "
                f"{entry.flag.value} ({entry.note})"
            )
    print()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Audit the AP spent by a character export")
    parser.add_argument("path", type=Path, help="Foundry VTT dsa5 actor export (JSON)")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    parser.add_argument("--config-file", type=Path, help="JSON file with AnalysisConfig overrides")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log flagged entries")
    args = parser.parse_args(argv)

    setup_logger(args.verbose)

    try:
        config = AnalysisConfig()
        if args.config_file:
            config = _config_from_dict(json.loads(args.config_file.read_text(encoding="utf-8")))
        record = load_character(args.path)
    except (OSError, ValueError) as exc:
        # json.JSONDecodeError is a ValueError
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    report = analyze(record, config=config)
    if args.json:
        print(report_to_json(report))
    else:
        _print_report(report)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

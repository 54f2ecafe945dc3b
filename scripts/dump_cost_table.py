"""Dump the improvement-cost table used by the AP analysis.

Usage:
    python -m scripts.dump_cost_table [--max-tier N] [--cumulative]
"""

import argparse

from dsa_analyzer.models.constants import DEFAULT_MAX_TIER
from dsa_analyzer.models.cost_table import CostTable


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Dump the DSA5 improvement-cost table")
    parser.add_argument("--max-tier", type=int, default=DEFAULT_MAX_TIER,
                        help="Highest tier to model (default: %(default)s)")
    parser.add_argument("--cumulative", action="store_true",
                        help="Show total cost from tier 0 instead of per-step cost")
    args = parser.parse_args(argv)

    table = CostTable.defaults(max_tier=args.max_tier)
    columns = table.columns

    print(f"{'Tier':>4} " + " ".join(f"{c.value:>6}" for c in columns))
    for tier in range(1, args.max_tier + 1):
        if args.cumulative:
            row = [table.cost_to_reach(c, 0, tier) for c in columns]
        else:
            row = [table.cost_of_step(c, tier - 1, tier) for c in columns]
        print(f"{tier:>4} " + " ".join(f"{v:>6}" for v in row))
    print(f"{'Acq':>4} " + " ".join(f"{table.acquisition_cost(c):>6}" for c in columns))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

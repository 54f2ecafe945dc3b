"""Configuration knobs for the AP analysis.

Defaults match the DSA5 core rules for human characters. House rules may
override baselines, flat purchase costs, or the set of abilities that only
charge their highest rank.
"""

from dataclasses import dataclass

from dsa_analyzer.models.constants import CostColumn


@dataclass(slots=True)
class AnalysisConfig:
    """Tuneable parameters that aren't part of the cost table."""

    attribute_baseline: int = 8          # every attribute starts here
    combat_technique_baseline: int = 6   # free combat-technique tiers
    magic_trick_cost: int = 1
    blessing_cost: int = 1
    rebuy_cost: int = 2                  # per permanently lost AsP/KaP bought back
    attribute_column: CostColumn = CostColumn.E
    energy_column: CostColumn = CostColumn.D
    supported_species: frozenset[str] = frozenset({"mensch", "human"})
    highest_step_only: frozenset[str] = frozenset({"Prinzipientreue", "Verpflichtungen"})
    parallel: bool = False
    max_workers: int | None = None

    def __post_init__(self) -> None:
        for name in (
            "attribute_baseline",
            "combat_technique_baseline",
            "magic_trick_cost",
            "blessing_cost",
            "rebuy_cost",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")

    def supports_species(self, species: str) -> bool:
        return species.strip().lower() in {s.lower() for s in self.supported_species}

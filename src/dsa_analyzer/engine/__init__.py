"""AP calculation and verification engine."""

from dsa_analyzer.engine.aggregate import aggregate
from dsa_analyzer.engine.analysis_config import AnalysisConfig
from dsa_analyzer.engine.analyzer import analyze, compute_breakdowns
from dsa_analyzer.engine.calculators import compute
from dsa_analyzer.engine.verify import verify

__all__ = [
    "AnalysisConfig",
    "aggregate",
    "analyze",
    "compute",
    "compute_breakdowns",
    "verify",
]

"""Conditions raised while costing a character.

All of them are recovered inside the analysis pipeline; they exist so the
recovery sites can tell the cases apart and flag entries accordingly.
"""


class AnalysisError(Exception):
    """Base class for recoverable analysis conditions."""


class UnsupportedSpecies(AnalysisError):
    """The record's species has cost modifiers this analyzer does not model."""

    def __init__(self, species: str) -> None:
        super().__init__(f"Species {species!r} is not modeled; costs use the human baseline")
        self.species = species


class UnsupportedTier(AnalysisError):
    """A cost-table lookup outside the modeled tier range."""

    def __init__(self, column: str, from_tier: int, to_tier: int, reason: str = "") -> None:
        message = f"No cost for step {from_tier}->{to_tier} in column {column!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.column = column
        self.from_tier = from_tier
        self.to_tier = to_tier


class UnrecognizedTrait(AnalysisError):
    """A trait whose cost shape cannot be determined."""

    def __init__(self, category: str, name: str, reason: str = "") -> None:
        message = f"Unrecognized {category} trait {name!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.category = category
        self.name = name

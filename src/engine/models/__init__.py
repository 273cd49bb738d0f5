"""Engine layer models."""

from src.engine.models.performance import EnrichedPosition, TrendDirection, TrendResult

__all__ = [
    "EnrichedPosition",
    "TrendDirection",
    "TrendResult",
]

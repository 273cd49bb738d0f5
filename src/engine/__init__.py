"""Calculation Engine Layer.

Derives performance signals from the local snapshot series. The engine is
pure: it takes positions and snapshots from the data layer and returns
result models for the business layer, without touching storage.

Architecture:
- performance/: Signals over the daily snapshot series
    - daily_change: Day-over-day change per position
    - trend: Multi-day up/down trends over a window of snapshots
- models/: Result models (EnrichedPosition, TrendResult)
"""

from src.engine.models import EnrichedPosition, TrendDirection, TrendResult
from src.engine.performance import (
    calc_change_percent,
    calc_daily_changes,
    detect_downtrends,
    detect_trends,
    detect_uptrends,
)

__all__ = [
    "EnrichedPosition",
    "TrendDirection",
    "TrendResult",
    "calc_change_percent",
    "calc_daily_changes",
    "detect_downtrends",
    "detect_trends",
    "detect_uptrends",
]

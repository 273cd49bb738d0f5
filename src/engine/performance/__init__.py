"""Performance signals derived from the snapshot series."""

from src.engine.performance.daily_change import calc_change_percent, calc_daily_changes
from src.engine.performance.trend import (
    DEFAULT_DOWNTREND_THRESHOLD,
    DEFAULT_TREND_DAYS,
    DEFAULT_UPTREND_THRESHOLD,
    detect_downtrends,
    detect_trends,
    detect_uptrends,
)

__all__ = [
    "DEFAULT_DOWNTREND_THRESHOLD",
    "DEFAULT_TREND_DAYS",
    "DEFAULT_UPTREND_THRESHOLD",
    "calc_change_percent",
    "calc_daily_changes",
    "detect_downtrends",
    "detect_trends",
    "detect_uptrends",
]

"""Multi-day trend detection over the snapshot window."""

from typing import Sequence

from src.data.models import Snapshot
from src.data.utils.symbol_formatter import SymbolFormatter
from src.engine.models.performance import TrendDirection, TrendResult
from src.engine.performance.daily_change import calc_change_percent

DEFAULT_TREND_DAYS = 5
DEFAULT_DOWNTREND_THRESHOLD = -10.0
DEFAULT_UPTREND_THRESHOLD = 10.0


def detect_trends(
    window: Sequence[Snapshot],
    threshold_percent: float,
    direction: TrendDirection,
) -> list[TrendResult]:
    """Find tickers whose price moved past a threshold across the window.

    Only the first and last snapshot of the window are compared, not every
    pair of days. Tickers must be present in both.

    Args:
        window: Snapshots in ascending date order.
        threshold_percent: Negative for downtrends (e.g., -10), positive for
            uptrends (e.g., 10).
        direction: Which side of the threshold qualifies.

    Returns:
        Qualifying trends. Downtrends are sorted worst first, uptrends best
        first; ties are broken by ticker. Empty if the window has fewer than
        two snapshots.

    Example:
        >>> # day1: AAPL=100, day5: AAPL=85, threshold -10
        >>> # -> one DOWN trend, change_percent=-15.0, days=2
    """
    if window is None or len(window) < 2:
        return []

    first, last = window[0], window[-1]
    start_prices = first.price_map()

    results: list[TrendResult] = []
    for position in last.positions:
        start_price = start_prices.get(position.ticker)
        if start_price is None or start_price <= 0:
            continue

        change_percent = calc_change_percent(start_price, position.current_price)

        if direction == TrendDirection.DOWN:
            qualifies = change_percent <= threshold_percent
        else:
            qualifies = change_percent >= threshold_percent

        if qualifies:
            results.append(
                TrendResult(
                    ticker=position.ticker,
                    short_ticker=SymbolFormatter.short_ticker(position.ticker),
                    direction=direction,
                    start_price=start_price,
                    end_price=position.current_price,
                    change_percent=change_percent,
                    days=len(window),
                    start_date=first.date,
                    end_date=last.date,
                )
            )

    if direction == TrendDirection.DOWN:
        results.sort(key=lambda r: (r.change_percent, r.ticker))
    else:
        results.sort(key=lambda r: (-r.change_percent, r.ticker))

    return results


def detect_downtrends(
    window: Sequence[Snapshot],
    threshold_percent: float = DEFAULT_DOWNTREND_THRESHOLD,
) -> list[TrendResult]:
    """Tickers that fell by at least |threshold| percent over the window."""
    return detect_trends(window, threshold_percent, TrendDirection.DOWN)


def detect_uptrends(
    window: Sequence[Snapshot],
    threshold_percent: float = DEFAULT_UPTREND_THRESHOLD,
) -> list[TrendResult]:
    """Tickers that rose by at least threshold percent over the window."""
    return detect_trends(window, threshold_percent, TrendDirection.UP)

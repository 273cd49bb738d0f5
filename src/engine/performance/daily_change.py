"""Day-over-day position changes.

Compares current positions against the snapshot of the previous calendar day.
"""

from typing import Mapping, Sequence

from src.data.models import Position, Snapshot
from src.data.utils.symbol_formatter import SymbolFormatter
from src.engine.models.performance import EnrichedPosition


def calc_change_percent(start_price: float, end_price: float) -> float:
    """Calculate percentage change between two prices.

    Args:
        start_price: Reference price.
        end_price: Later price.

    Returns:
        (end - start) / start * 100, or 0.0 if start_price <= 0.

    Example:
        >>> calc_change_percent(160.0, 150.0)
        -6.25
    """
    if start_price <= 0:
        return 0.0
    return (end_price - start_price) / start_price * 100


def calc_daily_changes(
    current: Sequence[Position],
    previous: Snapshot | None,
    annotations: Mapping[str, tuple[str | None, str | None]] | None = None,
) -> list[EnrichedPosition]:
    """Attach daily change data to each current position.

    Positions are matched by exact ticker. A ticker only in ``current`` gets
    zeroed deltas and has_previous_data=False; a ticker only in ``previous``
    is ignored. Output order mirrors ``current``.

    Args:
        current: Positions just fetched.
        previous: Snapshot of the previous calendar day, or None.
        annotations: Optional ticker -> (company_name, currency) lookup.

    Returns:
        List of EnrichedPosition, one per current position.
    """
    previous_prices = previous.price_map() if previous is not None else {}
    annotations = annotations or {}

    enriched: list[EnrichedPosition] = []
    for position in current:
        daily_change = 0.0
        daily_change_percent = 0.0
        has_previous = position.ticker in previous_prices

        if has_previous:
            previous_price = previous_prices[position.ticker]
            daily_change = position.current_price - previous_price
            daily_change_percent = calc_change_percent(previous_price, position.current_price)

        company_name, currency = annotations.get(position.ticker, (None, None))
        enriched.append(
            EnrichedPosition(
                position=position,
                daily_change=daily_change,
                daily_change_percent=daily_change_percent,
                has_previous_data=has_previous,
                short_ticker=SymbolFormatter.short_ticker(position.ticker),
                company_name=company_name,
                instrument_currency=currency,
            )
        )

    return enriched

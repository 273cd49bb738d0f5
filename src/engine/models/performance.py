"""Result models for derived performance signals."""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

from src.data.models import Position


class TrendDirection(Enum):
    """Multi-day trend direction."""

    DOWN = "down"
    UP = "up"


@dataclass(frozen=True)
class EnrichedPosition:
    """Position with day-over-day change data.

    Attributes:
        position: The position as fetched.
        daily_change: current_price - previous day's price (0 without history).
        daily_change_percent: Daily change as a percentage (0 without history
            or when the previous price is not positive).
        has_previous_data: Whether the previous day's snapshot held this ticker.
        short_ticker: Display symbol (e.g., "AAPL" for "AAPL_US_EQ").
        company_name: Instrument name from metadata, if known.
        instrument_currency: Instrument trading currency, if known.
        market_value_base: Market value in account currency, if convertible.
    """

    position: Position
    daily_change: float
    daily_change_percent: float
    has_previous_data: bool
    short_ticker: str
    company_name: str | None = None
    instrument_currency: str | None = None
    market_value_base: float | None = None

    @property
    def ticker(self) -> str:
        return self.position.ticker

    @property
    def current_price(self) -> float:
        return self.position.current_price

    @property
    def total_return_percent(self) -> float:
        """Return since purchase, based on average price."""
        if self.position.average_price <= 0:
            return 0.0
        return (
            (self.position.current_price - self.position.average_price)
            / self.position.average_price
            * 100
        )

    def to_dict(self) -> dict[str, Any]:
        """Flatten into a JSON-friendly dictionary."""
        data = self.position.to_dict()
        data.update(
            {
                "daily_change": self.daily_change,
                "daily_change_percent": self.daily_change_percent,
                "has_previous_data": self.has_previous_data,
                "short_ticker": self.short_ticker,
                "company_name": self.company_name,
                "instrument_currency": self.instrument_currency,
                "market_value_base": self.market_value_base,
                "total_return_percent": self.total_return_percent,
            }
        )
        return data


@dataclass(frozen=True)
class TrendResult:
    """Multi-day trend for one ticker.

    Attributes:
        ticker: Exchange-qualified symbol.
        short_ticker: Display symbol.
        direction: DOWN or UP.
        start_price: Price in the first snapshot of the window.
        end_price: Price in the last snapshot of the window.
        change_percent: (end - start) / start * 100.
        days: Number of distinct snapshot days in the window.
        start_date: Date key of the first snapshot.
        end_date: Date key of the last snapshot.
    """

    ticker: str
    short_ticker: str
    direction: TrendDirection
    start_price: float
    end_price: float
    change_percent: float
    days: int
    start_date: str
    end_date: str

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["direction"] = self.direction.value
        return data

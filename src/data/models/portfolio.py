"""Portfolio data models.

Provides the records exchanged with the Trading 212 API and persisted in the
local snapshot series: positions, daily snapshots, instrument metadata and
cash balances.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


def _to_float(value: Any, default: float = 0.0) -> float:
    """Convert an API value to float, falling back to default."""
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class Position:
    """Single open position as returned by the portfolio endpoint.

    Attributes:
        ticker: Exchange-qualified symbol (e.g., "AAPL_US_EQ").
        quantity: Number of shares held (non-negative).
        average_price: Average purchase price in instrument currency.
        current_price: Current market price in instrument currency.
        ppl: Profit/loss in account currency.
        fx_ppl: Profit/loss from currency movement, if applicable.
    """

    ticker: str
    quantity: float
    average_price: float
    current_price: float
    ppl: float = 0.0
    fx_ppl: float | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Position":
        """Create from a Trading 212 API payload (camelCase keys)."""
        fx_ppl = data.get("fxPpl")
        return cls(
            ticker=str(data["ticker"]),
            quantity=_to_float(data.get("quantity")),
            average_price=_to_float(data.get("averagePrice")),
            current_price=_to_float(data.get("currentPrice")),
            ppl=_to_float(data.get("ppl")),
            fx_ppl=_to_float(fx_ppl) if fx_ppl is not None else None,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Position":
        """Create from a persisted dictionary."""
        fx_ppl = data.get("fx_ppl")
        return cls(
            ticker=str(data["ticker"]),
            quantity=float(data["quantity"]),
            average_price=float(data["average_price"]),
            current_price=float(data["current_price"]),
            ppl=float(data.get("ppl", 0.0)),
            fx_ppl=float(fx_ppl) if fx_ppl is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for persistence."""
        return {
            "ticker": self.ticker,
            "quantity": self.quantity,
            "average_price": self.average_price,
            "current_price": self.current_price,
            "ppl": self.ppl,
            "fx_ppl": self.fx_ppl,
        }

    @property
    def market_value(self) -> float:
        """Position value in instrument currency."""
        return self.quantity * self.current_price


@dataclass(frozen=True)
class Snapshot:
    """All positions captured on one calendar day.

    Attributes:
        date: Calendar day key (YYYY-MM-DD).
        positions: Positions in the order the API returned them.
        captured_at: When the snapshot was taken.
    """

    date: str
    positions: tuple[Position, ...]
    captured_at: datetime

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Snapshot":
        """Create from a persisted dictionary."""
        return cls(
            date=str(data["date"]),
            positions=tuple(Position.from_dict(p) for p in data.get("positions", [])),
            captured_at=datetime.fromisoformat(data["captured_at"]),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for persistence."""
        return {
            "date": self.date,
            "positions": [p.to_dict() for p in self.positions],
            "captured_at": self.captured_at.isoformat(),
        }

    def price_map(self) -> dict[str, float]:
        """Ticker -> current price lookup."""
        return {p.ticker: p.current_price for p in self.positions}


@dataclass(frozen=True)
class InstrumentMetadata:
    """Static instrument information from the metadata endpoint.

    Attributes:
        ticker: Exchange-qualified symbol.
        name: Company or fund name (e.g., "Apple Inc").
        currency_code: Currency the instrument trades in (e.g., "USD", "GBX").
        isin: International Securities Identification Number.
    """

    ticker: str
    name: str | None = None
    currency_code: str | None = None
    isin: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "InstrumentMetadata":
        """Create from a Trading 212 API payload."""
        return cls(
            ticker=str(data["ticker"]),
            name=data.get("name"),
            currency_code=data.get("currencyCode"),
            isin=data.get("isin"),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InstrumentMetadata":
        """Create from a persisted dictionary."""
        return cls(
            ticker=str(data["ticker"]),
            name=data.get("name"),
            currency_code=data.get("currency_code"),
            isin=data.get("isin"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for persistence."""
        return {
            "ticker": self.ticker,
            "name": self.name,
            "currency_code": self.currency_code,
            "isin": self.isin,
        }


@dataclass
class CashBalance:
    """Account cash balance in account currency.

    Attributes:
        free: Cash available to invest.
        total: Total account value.
        ppl: Unrealized profit/loss of open positions.
        result: Realized result.
        invested: Amount invested in open positions.
        blocked: Cash blocked by pending operations.
    """

    free: float = 0.0
    total: float = 0.0
    ppl: float = 0.0
    result: float = 0.0
    invested: float = 0.0
    blocked: float | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "CashBalance":
        """Create from a Trading 212 API payload."""
        known = {"free", "total", "ppl", "result", "invested", "blocked"}
        blocked = data.get("blocked")
        return cls(
            free=_to_float(data.get("free")),
            total=_to_float(data.get("total")),
            ppl=_to_float(data.get("ppl")),
            result=_to_float(data.get("result")),
            invested=_to_float(data.get("invested")),
            blocked=_to_float(blocked) if blocked is not None else None,
            extra={k: v for k, v in data.items() if k not in known},
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CashBalance":
        """Create from a persisted dictionary."""
        blocked = data.get("blocked")
        return cls(
            free=float(data.get("free", 0.0)),
            total=float(data.get("total", 0.0)),
            ppl=float(data.get("ppl", 0.0)),
            result=float(data.get("result", 0.0)),
            invested=float(data.get("invested", 0.0)),
            blocked=float(blocked) if blocked is not None else None,
            extra=dict(data.get("extra", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for persistence."""
        return {
            "free": self.free,
            "total": self.total,
            "ppl": self.ppl,
            "result": self.result,
            "invested": self.invested,
            "blocked": self.blocked,
            "extra": self.extra,
        }

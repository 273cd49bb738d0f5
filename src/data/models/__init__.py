"""Data models for portfolio data."""

from src.data.models.portfolio import (
    CashBalance,
    InstrumentMetadata,
    Position,
    Snapshot,
)

__all__ = [
    "CashBalance",
    "InstrumentMetadata",
    "Position",
    "Snapshot",
]

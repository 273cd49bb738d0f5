"""Data layer module for fetching and storing portfolio data."""

from src.data.models import (
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

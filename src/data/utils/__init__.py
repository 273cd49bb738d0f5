"""Data utilities package."""

from .date_key import (
    InvalidDateKeyError,
    date_key,
    is_valid_date_key,
    parse_date_key,
    shift_date_key,
)
from .symbol_formatter import Market, SymbolFormatter

__all__ = [
    "InvalidDateKeyError",
    "Market",
    "SymbolFormatter",
    "date_key",
    "is_valid_date_key",
    "parse_date_key",
    "shift_date_key",
]

"""Data providers for fetching portfolio data."""

from src.data.providers.base import (
    AuthenticationError,
    DataProviderError,
    PortfolioDataSource,
    RateLimitError,
    SourceUnavailableError,
)
from src.data.providers.fx_provider import FxRateProvider
from src.data.providers.trading212_provider import Trading212Config, Trading212Provider

__all__ = [
    "AuthenticationError",
    "DataProviderError",
    "FxRateProvider",
    "PortfolioDataSource",
    "RateLimitError",
    "SourceUnavailableError",
    "Trading212Config",
    "Trading212Provider",
]

"""Abstract base class for portfolio data sources."""

from abc import ABC, abstractmethod

from src.data.models import CashBalance, InstrumentMetadata, Position


class PortfolioDataSource(ABC):
    """Abstract base class for read-only portfolio data sources.

    All data source implementations must inherit from this class
    and implement the required methods. Failures are reported by
    raising a DataProviderError subclass.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Data source name (e.g., 'trading212')."""
        pass

    @abstractmethod
    def fetch_positions(self) -> list[Position]:
        """Get all open positions.

        Returns:
            List of Position instances in API order.

        Raises:
            DataProviderError: If the request fails.
        """
        pass

    @abstractmethod
    def fetch_cash(self) -> CashBalance:
        """Get account cash balance.

        Raises:
            DataProviderError: If the request fails.
        """
        pass

    @abstractmethod
    def fetch_instrument_metadata(self) -> list[InstrumentMetadata]:
        """Get metadata for every tradable instrument.

        This is a large payload (thousands of records) and should be cached.

        Raises:
            DataProviderError: If the request fails.
        """
        pass

    def test_connection(self) -> bool:
        """Verify the source is reachable.

        Raises:
            DataProviderError: If the source cannot be reached.
        """
        self.fetch_cash()
        return True


class DataProviderError(Exception):
    """Base exception for data provider errors."""

    pass


class SourceUnavailableError(DataProviderError):
    """Network, HTTP or payload errors that make the source unusable."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(SourceUnavailableError):
    """Credentials rejected (HTTP 401/403)."""

    pass


class RateLimitError(SourceUnavailableError):
    """Rate limit exceeded errors (HTTP 429)."""

    pass

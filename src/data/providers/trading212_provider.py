"""Trading 212 read-only API provider.

Fetches positions, cash, account info and instrument metadata from the
Trading 212 public API. API documentation: https://docs.trading212.com/api

Authentication is HTTP Basic with the API key as username and the API secret
as password.

SECURITY NOTE: this client only implements GET endpoints. There are no
methods for placing, amending or cancelling orders, so leaked credentials
used through this code cannot trade.
"""

import logging
import os
import time
from dataclasses import dataclass
from typing import Any

import requests
from dotenv import load_dotenv

from src.data.models import CashBalance, InstrumentMetadata, Position
from src.data.providers.base import (
    AuthenticationError,
    PortfolioDataSource,
    RateLimitError,
    SourceUnavailableError,
)

logger = logging.getLogger(__name__)


API_BASE_URLS = {
    "demo": "https://demo.trading212.com/api/v0",
    "live": "https://live.trading212.com/api/v0",
}

# All READ-ONLY endpoints
ENDPOINT_POSITIONS = "/equity/portfolio"
ENDPOINT_ACCOUNT_CASH = "/equity/account/cash"
ENDPOINT_ACCOUNT_INFO = "/equity/account/info"
ENDPOINT_INSTRUMENTS = "/equity/metadata/instruments"
ENDPOINT_DIVIDENDS = "/equity/history/dividends"


@dataclass
class Trading212Config:
    """Trading 212 API configuration."""

    api_key: str
    api_secret: str
    environment: str = "live"
    timeout: int = 30
    rate_limit: float = 1.0  # minimum seconds between requests

    @classmethod
    def from_env(cls) -> "Trading212Config":
        """Load configuration from environment variables (.env supported)."""
        load_dotenv()
        return cls(
            api_key=os.getenv("TRADING212_API_KEY", ""),
            api_secret=os.getenv("TRADING212_API_SECRET", ""),
            environment=os.getenv("TRADING212_ENVIRONMENT", "live"),
            timeout=int(os.getenv("TRADING212_TIMEOUT", "30")),
        )


class Trading212Provider(PortfolioDataSource):
    """Read-only Trading 212 API client.

    Usage:
        provider = Trading212Provider(Trading212Config.from_env())
        positions = provider.fetch_positions()
        cash = provider.fetch_cash()
    """

    def __init__(
        self,
        config: Trading212Config,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize Trading 212 provider.

        Args:
            config: API configuration.
            session: Optional requests session (for connection reuse/testing).

        Raises:
            ValueError: If the environment is not 'demo' or 'live'.
        """
        base_url = API_BASE_URLS.get(config.environment)
        if base_url is None:
            raise ValueError(
                f"Invalid environment: {config.environment}. Use 'demo' or 'live'."
            )

        self._config = config
        self._base_url = base_url
        self._session = session or requests.Session()
        self._session.auth = (config.api_key, config.api_secret)
        self._session.headers.update({"Content-Type": "application/json"})
        self._last_request_time = 0.0

    @classmethod
    def from_env(cls) -> "Trading212Provider":
        """Create from environment variables."""
        return cls(Trading212Config.from_env())

    @property
    def name(self) -> str:
        return "trading212"

    @property
    def environment(self) -> str:
        return self._config.environment

    @property
    def base_url(self) -> str:
        return self._base_url

    def _check_rate_limit(self) -> None:
        """Enforce minimum spacing between requests."""
        elapsed = time.time() - self._last_request_time
        if elapsed < self._config.rate_limit:
            time.sleep(self._config.rate_limit - elapsed)
        self._last_request_time = time.time()

    def _get(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        """Make an authenticated GET request.

        Args:
            endpoint: API endpoint path (e.g., '/equity/portfolio').
            params: Query parameters.

        Returns:
            Decoded JSON response.

        Raises:
            AuthenticationError: Credentials rejected.
            RateLimitError: Too many requests.
            SourceUnavailableError: Any other HTTP, network or parse error.
        """
        self._check_rate_limit()
        url = f"{self._base_url}{endpoint}"

        try:
            response = self._session.get(url, params=params, timeout=self._config.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            body = e.response.text if e.response is not None else ""
            message = f"API request failed: {status} on {endpoint}: {body[:200]}"
            if status in (401, 403):
                logger.error(f"Trading 212 authentication failed - check your API key ({status})")
                raise AuthenticationError(message, status_code=status) from e
            if status == 429:
                logger.error("Trading 212 rate limit exceeded")
                raise RateLimitError(message, status_code=status) from e
            logger.error(message)
            raise SourceUnavailableError(message, status_code=status) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Network error calling {endpoint}: {e}")
            raise SourceUnavailableError(f"Network error calling {endpoint}: {e}") from e
        except ValueError as e:
            logger.error(f"Trading 212 response parse error on {endpoint}: {e}")
            raise SourceUnavailableError(f"Invalid JSON from {endpoint}: {e}") from e

    # Portfolio data

    def fetch_positions(self) -> list[Position]:
        """Get all open positions."""
        data = self._get(ENDPOINT_POSITIONS)
        if not isinstance(data, list):
            raise SourceUnavailableError(f"Unexpected positions payload: {type(data).__name__}")
        try:
            return [Position.from_api(item) for item in data]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.error(f"Malformed position in {ENDPOINT_POSITIONS}: {e!r}")
            raise SourceUnavailableError(f"Malformed positions payload: {e!r}") from e

    def fetch_cash(self) -> CashBalance:
        """Get account cash balance."""
        data = self._get(ENDPOINT_ACCOUNT_CASH)
        if not isinstance(data, dict):
            raise SourceUnavailableError(f"Unexpected cash payload: {type(data).__name__}")
        try:
            return CashBalance.from_api(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.error(f"Malformed cash payload from {ENDPOINT_ACCOUNT_CASH}: {e!r}")
            raise SourceUnavailableError(f"Malformed cash payload: {e!r}") from e

    def fetch_account_info(self) -> dict[str, Any]:
        """Get account metadata (id, currencyCode)."""
        return self._get(ENDPOINT_ACCOUNT_INFO)

    def fetch_instrument_metadata(self) -> list[InstrumentMetadata]:
        """Get all instruments with names, currencies and ISINs.

        Items that are not objects or carry no ticker are skipped.
        """
        data = self._get(ENDPOINT_INSTRUMENTS)
        if not isinstance(data, list):
            raise SourceUnavailableError(
                f"Unexpected instruments payload: {type(data).__name__}"
            )

        items = [item for item in data if isinstance(item, dict) and item.get("ticker")]
        if len(items) < len(data):
            logger.warning(f"Skipped {len(data) - len(items)} malformed instrument records")
        try:
            return [InstrumentMetadata.from_api(item) for item in items]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.error(f"Malformed instrument in {ENDPOINT_INSTRUMENTS}: {e!r}")
            raise SourceUnavailableError(f"Malformed instruments payload: {e!r}") from e

    def fetch_dividends(self, limit: int = 50) -> list[dict[str, Any]]:
        """Get dividend history.

        Args:
            limit: Maximum number of records (API maximum is 50).
        """
        data = self._get(ENDPOINT_DIVIDENDS, params={"limit": limit})
        if isinstance(data, dict):
            return list(data.get("items", []))
        return list(data or [])

    def get_full_summary(self) -> dict[str, Any]:
        """Fetch account info, cash and positions in one summary."""
        account = self.fetch_account_info()
        cash = self.fetch_cash()
        positions = self.fetch_positions()

        return {
            "account_id": account.get("id"),
            "currency": account.get("currencyCode"),
            "cash": cash,
            "positions": positions,
            "position_count": len(positions),
            "total_ppl": sum(p.ppl for p in positions),
        }

    def test_connection(self) -> bool:
        """Verify credentials by fetching account info.

        Raises:
            SourceUnavailableError: If the API cannot be reached or auth fails.
        """
        info = self.fetch_account_info()
        logger.info(
            f"Connected to Trading 212 ({self._config.environment}), "
            f"account currency {info.get('currencyCode')}"
        )
        return True

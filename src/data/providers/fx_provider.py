"""Foreign exchange rates from frankfurter.app (ECB reference rates).

Used to show account-currency equivalents for positions priced in other
currencies. The API is free, needs no key and publishes daily ECB rates.
"""

import logging

import requests

logger = logging.getLogger(__name__)


class FxRateProvider:
    """FX rate fetcher.

    Rates are quoted as units of target currency per one unit of base, so
    converting 100 USD into a GBP base is ``100 / rates["USD"]``.

    Usage:
        provider = FxRateProvider()
        rates = provider.fetch_rates(["USD", "EUR"], base="GBP")
    """

    BASE_URL = "https://api.frankfurter.app/latest"

    # Minor units quoted by exchanges: code -> (major currency, divisor)
    MINOR_UNITS: dict[str, tuple[str, float]] = {
        "GBX": ("GBP", 100.0),
        "GBp": ("GBP", 100.0),
    }

    def __init__(self, timeout: float = 5.0) -> None:
        """Initialize FX provider.

        Args:
            timeout: Request timeout in seconds.
        """
        self._timeout = timeout

    def fetch_rates(
        self,
        currencies: list[str],
        base: str = "GBP",
    ) -> dict[str, float] | None:
        """Fetch latest rates from base to target currencies.

        Args:
            currencies: Target currency codes (e.g., ['USD', 'EUR']).
            base: Base currency code.

        Returns:
            Mapping of currency -> rate, or None on failure.
        """
        targets = sorted({c for c in currencies if c and c != base})
        if not targets:
            return {}

        params = {"from": base, "to": ",".join(targets)}
        logger.debug(f"Fetching FX rates {base} -> {params['to']}")

        try:
            response = requests.get(self.BASE_URL, params=params, timeout=self._timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            logger.warning(f"Failed to fetch FX rates: {e}")
            return None
        except ValueError as e:
            logger.warning(f"FX rates response parse error: {e}")
            return None

        rates = data.get("rates") if isinstance(data, dict) else None
        if not rates:
            logger.warning("FX rates response contained no rates")
            return None

        return {code: float(rate) for code, rate in rates.items()}

    @classmethod
    def normalize_currency(cls, currency: str | None) -> tuple[str | None, float]:
        """Map minor units to (major currency, divisor).

        Examples:
            >>> FxRateProvider.normalize_currency("GBX")  # ("GBP", 100.0)
            >>> FxRateProvider.normalize_currency("USD")  # ("USD", 1.0)
        """
        if currency is None:
            return None, 1.0
        return cls.MINOR_UNITS.get(currency, (currency, 1.0))

    @classmethod
    def convert_to_base(
        cls,
        amount: float,
        currency: str | None,
        base: str,
        rates: dict[str, float] | None,
    ) -> float | None:
        """Convert an amount in instrument currency into the base currency.

        Returns:
            Converted amount, or None if the rate is unknown.
        """
        major, divisor = cls.normalize_currency(currency)
        if major is None:
            return None

        amount = amount / divisor
        if major == base:
            return amount
        if not rates or not rates.get(major):
            return None
        return amount / rates[major]

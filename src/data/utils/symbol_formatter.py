"""Trading 212 ticker formatting utility.

Trading 212 tickers carry exchange information in the symbol itself.

Symbol Formats:
    - US listings: "AAPL_US_EQ", "TSLA_US_EQ"
    - London listings: "VODl_EQ" (lowercase "l" marks the LSE)
    - Other European listings: "SAPd_EQ" (Xetra), "AIRp_EQ" (Paris)
    - Short: "AAPL", "VOD" (display form)
"""

from enum import Enum


class Market(Enum):
    """Market type enumeration."""

    US = "US"
    UK = "UK"
    EU = "EU"
    UNKNOWN = "UNKNOWN"


class SymbolFormatter:
    """Trading 212 ticker formatting utility.

    All methods are static and stateless for easy usage.

    Examples:
        >>> SymbolFormatter.short_ticker("AAPL_US_EQ")  # "AAPL"
        >>> SymbolFormatter.display_ticker("VODl_EQ")   # "VOD"
        >>> SymbolFormatter.detect_market("VODl_EQ")    # Market.UK
    """

    # Lowercase exchange suffixes used on non-US listings
    EXCHANGE_SUFFIXES: dict[str, Market] = {
        "l": Market.UK,
        "d": Market.EU,
        "p": Market.EU,
        "a": Market.EU,
        "m": Market.EU,
        "e": Market.EU,
    }

    @staticmethod
    def short_ticker(ticker: str | None) -> str:
        """Extract the short symbol (text before the first underscore).

        Examples:
            >>> SymbolFormatter.short_ticker("AAPL_US_EQ")  # "AAPL"
            >>> SymbolFormatter.short_ticker("VODl_EQ")     # "VODl"
            >>> SymbolFormatter.short_ticker("")            # ""
        """
        if not ticker:
            return ""
        return ticker.split("_")[0]

    @staticmethod
    def detect_market(ticker: str) -> Market:
        """Detect listing market from a Trading 212 ticker.

        Examples:
            >>> SymbolFormatter.detect_market("AAPL_US_EQ")  # Market.US
            >>> SymbolFormatter.detect_market("VODl_EQ")     # Market.UK
            >>> SymbolFormatter.detect_market("AAPL")        # Market.UNKNOWN
        """
        parts = ticker.split("_")
        if len(parts) >= 3 and parts[1] == "US":
            return Market.US

        head = parts[0]
        if len(parts) >= 2 and len(head) > 1 and head[-1].islower():
            return SymbolFormatter.EXCHANGE_SUFFIXES.get(head[-1], Market.UNKNOWN)

        return Market.UNKNOWN

    @staticmethod
    def display_ticker(ticker: str | None) -> str:
        """Short symbol without the lowercase exchange marker.

        Examples:
            >>> SymbolFormatter.display_ticker("VODl_EQ")     # "VOD"
            >>> SymbolFormatter.display_ticker("AAPL_US_EQ")  # "AAPL"
        """
        short = SymbolFormatter.short_ticker(ticker)
        if not short:
            return ""
        if SymbolFormatter.detect_market(ticker or "") in (Market.UK, Market.EU):
            return short[:-1]
        return short

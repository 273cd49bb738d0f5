"""Calendar-day keys for the snapshot series.

Every day boundary in the monitor is derived here. Keys are canonical
``YYYY-MM-DD`` strings, so lexicographic order equals chronological order.

Timezone policy:
    - ``date`` objects are formatted as-is.
    - Naive ``datetime`` values are taken as wall time in the monitor's zone.
    - Aware ``datetime`` values are converted into ``tz`` first (if given).
"""

import re
from datetime import date, datetime, timedelta, tzinfo

_DATE_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class InvalidDateKeyError(ValueError):
    """Raised for a date key that is not a canonical YYYY-MM-DD string."""

    pass


def date_key(timestamp: datetime | date, tz: tzinfo | None = None) -> str:
    """Convert a timestamp to its calendar-day key.

    Args:
        timestamp: Point in time (or a plain date).
        tz: Zone that defines the day boundary for aware datetimes.

    Returns:
        Day key in ``YYYY-MM-DD`` format.

    Example:
        >>> date_key(datetime(2025, 3, 14, 23, 30))
        '2025-03-14'
    """
    if isinstance(timestamp, datetime):
        if tz is not None and timestamp.tzinfo is not None:
            timestamp = timestamp.astimezone(tz)
        return timestamp.date().isoformat()
    return timestamp.isoformat()


def parse_date_key(key: str) -> date:
    """Parse a day key back into a date.

    Raises:
        InvalidDateKeyError: If the key is malformed.
    """
    if not isinstance(key, str) or not _DATE_KEY_RE.match(key):
        raise InvalidDateKeyError(f"Invalid date key: {key!r}")
    try:
        return date.fromisoformat(key)
    except ValueError as e:
        raise InvalidDateKeyError(f"Invalid date key: {key!r}") from e


def shift_date_key(key: str, days: int) -> str:
    """Move a day key by a number of calendar days (negative = earlier)."""
    return (parse_date_key(key) + timedelta(days=days)).isoformat()


def is_valid_date_key(key: str) -> bool:
    """Check whether a key is canonical without raising."""
    try:
        parse_date_key(key)
    except InvalidDateKeyError:
        return False
    return True

"""UTC datetime and block-time utilities.

Block timestamps are int seconds since the epoch, like `block.timestamp`.
"""

from datetime import datetime, timezone

MINUTE = 60
HOUR = 60 * MINUTE
DAY = 24 * HOUR
WEEK = 7 * DAY


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def timestamp_to_datetime(timestamp: int) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def minutes(n: int) -> int:
    return n * MINUTE


def hours(n: int) -> int:
    return n * HOUR


def days(n: int) -> int:
    return n * DAY


def weeks(n: int) -> int:
    return n * WEEK

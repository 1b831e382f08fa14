"""Date parsing utilities for validation rules.

Record dates arrive as ISO strings, date or datetime objects. Rules compare
them as calendar instants in UTC. The reference "now" is always passed in
explicitly so passes are deterministic under test.
"""

import logging
from datetime import date, datetime, time, timezone
from typing import Any, Optional

logger = logging.getLogger(__name__)


# Fallback patterns tried after ISO-8601 (order matters - most specific first)
DATE_FORMATS = [
    '%Y-%m-%d %H:%M:%S',  # 2024-01-15 14:30:00
    '%Y/%m/%d',           # 2024/01/15
    '%d %B %Y',           # 15 January 2024
    '%d %b %Y',           # 15 Jan 2024
    '%B %d, %Y',          # January 15, 2024
    '%b %d, %Y',          # Jan 15, 2024
]


def utc_now() -> datetime:
    """Current instant as an aware UTC datetime"""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_instant(value: Any) -> Optional[datetime]:
    """Parse a record date into an aware UTC datetime.

    Args:
        value: str, date, datetime or None

    Returns:
        datetime in UTC, or None if the value cannot be parsed

    Examples:
        >>> parse_instant('2024-01-15')
        datetime(2024, 1, 15, 0, 0, tzinfo=timezone.utc)
        >>> parse_instant('2024-01-15T10:00:00Z')
        datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)
        >>> parse_instant('not a date')
        None
    """
    if value is None or isinstance(value, bool):
        return None

    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)

    if not isinstance(value, str):
        return None

    value = value.strip()
    if not value:
        return None

    iso_value = value[:-1] + '+00:00' if value.endswith(('Z', 'z')) else value
    try:
        return ensure_utc(datetime.fromisoformat(iso_value))
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return ensure_utc(datetime.strptime(value, fmt))
        except ValueError:
            continue

    logger.debug(f"Failed to parse date: {value}")
    return None


def is_valid_date(value: Any) -> bool:
    """Check if value can be parsed as a calendar instant"""
    return parse_instant(value) is not None


def start_of_day(moment: datetime) -> datetime:
    """Midnight (UTC) of the day containing moment"""
    moment = ensure_utc(moment)
    return datetime.combine(moment.date(), time.min, tzinfo=timezone.utc)

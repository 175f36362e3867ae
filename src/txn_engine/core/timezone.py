"""Timezone utilities for cache clocks and record timestamps."""

from datetime import datetime
from typing import Optional

import pytz
from dateutil import parser as date_parser

UTC = pytz.utc


def now_utc() -> datetime:
    """Return current time in UTC."""
    return datetime.now(UTC)


def to_utc(dt: datetime) -> datetime:
    """Convert a datetime to UTC."""
    if dt.tzinfo is None:
        # Assume naive datetime is already UTC
        return UTC.localize(dt)
    return dt.astimezone(UTC)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a date or datetime string from the remote store into UTC.

    Returns None for empty or unparsable values; record dates are
    informational and never block a transform.
    """
    if not value:
        return None
    try:
        dt = date_parser.parse(value)
    except (ValueError, OverflowError):
        return None
    return to_utc(dt)

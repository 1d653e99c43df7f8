from datetime import date, datetime, timezone
from typing import Optional, Union
import logging

import pytz

logger = logging.getLogger(__name__)

DateLike = Union[str, datetime, date, None]


def parse_datetime(value: DateLike) -> Optional[datetime]:
    """
    Parses Canvas and Notion timestamps into timezone-aware datetimes.

    Naive values (including date-only Notion dates) are taken as UTC.
    Unparseable strings are logged and treated as absent.
    """
    if not value:
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    else:
        try:
            if value.endswith('Z'):
                value = value[:-1] + '+00:00'
            dt = datetime.fromisoformat(value)
        except ValueError as e:
            logger.warning(f"Could not parse date: {value}. Error: {e}")
            return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def to_iso(value: DateLike) -> Optional[str]:
    dt = parse_datetime(value)
    return dt.astimezone(timezone.utc).isoformat() if dt else None


def format_date(value: DateLike, tz=pytz.timezone('US/Eastern')) -> str:
    """Short human-facing date in the configured timezone, e.g. 10/17/2026."""
    dt = parse_datetime(value)
    if dt is None:
        return 'Not specified'
    return dt.astimezone(tz).strftime('%m/%d/%Y')

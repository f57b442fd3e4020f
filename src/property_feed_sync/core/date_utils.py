"""
Date parsing utilities for the property feed sync package.

Feed dates arrive in several ISO-ish shapes ("2024-01-15", "2024-01-15
10:30:00", "2024-01-15T10:30:00+02:00"). They are parsed with
python-dateutil and rendered in the format the content store expects.

Parsing never raises: parse_feed_datetime returns a (value, error) pair so
that callers can log the problem and leave the field out.

Author: Leonardo Pacciani-Mori
License: MIT
"""

import datetime
from typing import Any, Optional, Tuple

from dateutil import parser as dateutil_parser
from dateutil import tz

from property_feed_sync.config.settings import SITE_TIMEZONE


# Second-precision format used for every stored timestamp.
STORE_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

# Day-precision format used for the "Available From" feature.
STORE_DATE_FORMAT = "%Y-%m-%d"


def parse_feed_datetime(value: Any) -> Tuple[Optional[datetime.datetime], Optional[str]]:
    """
    Parse a date value from the feed.

    Args:
        value: The raw date, normally a string.

    Returns:
        Tuple containing:
            - datetime or None: The parsed value (naive if the input carried
              no offset), or None if parsing failed.
            - str or None: A human-readable error message, or None on success.

    Example:
        >>> parse_feed_datetime("2024-01-15 10:30:00")
        (datetime.datetime(2024, 1, 15, 10, 30), None)
        >>> parse_feed_datetime("not a date")[0] is None
        True
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None, "empty date value"
    if isinstance(value, datetime.datetime):
        return value, None

    try:
        return dateutil_parser.parse(str(value).strip()), None
    except (ValueError, OverflowError, TypeError) as e:
        return None, f"unparseable date {value!r}: {e}"


def to_local_and_gmt(
    value: datetime.datetime,
    site_timezone: str = SITE_TIMEZONE
) -> Tuple[str, str]:
    """
    Render a parsed date as the site-local and the UTC timestamp strings.

    Naive values are taken to be in the site timezone, aware values are
    converted into it.

    Args:
        value: The parsed datetime.
        site_timezone: IANA name of the site timezone. Unknown names fall
            back to UTC.

    Returns:
        Tuple[str, str]: (local, gmt), both formatted as STORE_DATETIME_FORMAT.

    Example:
        >>> to_local_and_gmt(datetime.datetime(2024, 1, 15, 10, 30), "Europe/Warsaw")
        ('2024-01-15 10:30:00', '2024-01-15 09:30:00')
    """
    zone = tz.gettz(site_timezone) or tz.UTC

    if value.tzinfo is None:
        local = value.replace(tzinfo=zone)
    else:
        local = value.astimezone(zone)

    gmt = local.astimezone(tz.UTC)
    return local.strftime(STORE_DATETIME_FORMAT), gmt.strftime(STORE_DATETIME_FORMAT)


def format_store_date(value: datetime.datetime) -> str:
    """Format a datetime at day precision (YYYY-MM-DD)."""
    return value.strftime(STORE_DATE_FORMAT)

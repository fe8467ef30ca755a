"""Date helpers for per-user calendar days."""

import datetime as dt
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from workforce.core.constants import DEFAULT_TIMEZONE


def validate_timezone(name: str) -> str:
    """Return ``name`` if it is a known IANA timezone.

    Raises:
        ValueError: If the timezone is unknown

    Examples:
        >>> validate_timezone("Asia/Riyadh")
        'Asia/Riyadh'
    """
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown timezone {name!r}") from e
    return name


def local_today(timezone: str | None, now: dt.datetime | None = None) -> dt.date:
    """The calendar day it currently is in ``timezone``.

    Unknown or missing timezones fall back to UTC.
    """
    now = now or dt.datetime.now(dt.UTC)
    try:
        zone = ZoneInfo(timezone or DEFAULT_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        zone = ZoneInfo(DEFAULT_TIMEZONE)
    return now.astimezone(zone).date()


def as_utc(value: dt.datetime) -> dt.datetime:
    """Make ``value`` timezone-aware in UTC; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.UTC)
    return value.astimezone(dt.UTC)


# Sunday through Thursday, as ``date.weekday()`` numbers
WORKING_WEEKDAYS = frozenset({6, 0, 1, 2, 3})


def week_start(day: dt.date) -> dt.date:
    """The Sunday opening the working week that contains ``day``."""
    return day - dt.timedelta(days=(day.weekday() + 1) % 7)


def days_between(start: dt.date, end: dt.date) -> list[dt.date]:
    """Every calendar day from ``start`` to ``end`` inclusive."""
    return [start + dt.timedelta(days=n) for n in range((end - start).days + 1)]


def working_days(start: dt.date, end: dt.date) -> int:
    """Number of working days from ``start`` to ``end`` inclusive.

    Examples:
        >>> working_days(dt.date(2025, 6, 1), dt.date(2025, 6, 7))
        5
    """
    return sum(1 for day in days_between(start, end) if day.weekday() in WORKING_WEEKDAYS)

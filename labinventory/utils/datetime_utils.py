"""Datetime utility functions."""

from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from labinventory.config import settings

# Timezone for API responses (from config)
API_TIMEZONE = ZoneInfo(settings.timezone)


def ensure_utc(dt: datetime) -> datetime:
    """Return a timezone-aware UTC datetime, assuming UTC for naive values.

    SQLite drops tzinfo on DateTime(timezone=True) columns.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def to_api_timezone(dt: datetime | None) -> datetime | None:
    """Convert a datetime to API timezone (from config).

    Args:
        dt: Datetime to convert (can be None)

    Returns:
        Datetime in API timezone, or None if input was None
    """
    if dt is None:
        return None
    return ensure_utc(dt).astimezone(API_TIMEZONE)

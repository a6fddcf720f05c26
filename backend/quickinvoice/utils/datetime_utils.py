"""Datetime utility functions."""

from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from quickinvoice.config import settings

# Timezone for API responses and printed documents (from config)
DISPLAY_TIMEZONE = ZoneInfo(settings.timezone)


def utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime) -> datetime:
    """Return ``dt`` as an aware UTC datetime.

    SQLite hands back naive values for timezone-aware columns; those are
    assumed to already be UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def to_display_timezone(dt: datetime | None) -> datetime | None:
    """Convert a datetime to the display timezone (from config).

    Args:
        dt: Datetime to convert (can be None)

    Returns:
        Datetime in display timezone, or None if input was None
    """
    if dt is None:
        return None
    return ensure_utc(dt).astimezone(DISPLAY_TIMEZONE)

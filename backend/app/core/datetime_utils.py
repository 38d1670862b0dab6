"""
Datetime helpers. All timestamps the service stores or returns are UTC and
timezone-aware.
"""
from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """
    Return the current time as a timezone-aware UTC datetime.

    Used for wall-clock timestamps (record completion times, health checks).
    Response timing inside a session uses a monotonic clock instead.

    Example:
        >>> utc_now().tzinfo == timezone.utc
        True
    """
    return datetime.now(timezone.utc)


def ensure_timezone_aware(dt: Optional[datetime]) -> datetime:
    """
    Return dt as a timezone-aware datetime, assuming UTC for naive values.

    SQLite returns naive datetimes even for timezone-aware columns, and
    callers may pass naive completion times.

    Args:
        dt: The datetime to normalise

    Returns:
        A timezone-aware datetime (naive input is tagged as UTC)

    Raises:
        ValueError: If dt is None
    """
    if dt is None:
        raise ValueError("datetime cannot be None")
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt

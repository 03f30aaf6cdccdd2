"""
Utility functions for the application.
"""
from typing import Optional
from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def utcnow() -> datetime:
    """Current time as a naive UTC datetime (the storage convention)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(dt: datetime) -> datetime:
    """Normalize an aware datetime to naive UTC. Naive values are treated as UTC."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def to_local(dt: Optional[datetime], tz_name: Optional[str]) -> Optional[datetime]:
    """Convert a stored UTC datetime to the given IANA timezone, UTC if unknown."""
    if not dt:
        return None

    # Treat naive DB values as UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    try:
        zone = ZoneInfo(tz_name) if tz_name else timezone.utc
    except (ZoneInfoNotFoundError, ValueError):
        zone = timezone.utc
    return dt.astimezone(zone)


def format_date_time(dt: datetime, tz_name: Optional[str] = None) -> str:
    """Short human form, e.g. 'Sun, Jun 1, 07:00 PM'."""
    local = to_local(dt, tz_name)
    return f"{local:%a, %b} {local.day}, {local:%I:%M %p}"

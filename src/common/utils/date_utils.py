# File: common/utils/date_utils.py

from datetime import datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    """Returns current UTC time as aware datetime."""
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """Treats naive datetimes coming back from storage as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def hours_before(base: Optional[datetime], hours: int) -> datetime:
    base_time = base or utc_now()
    return base_time - timedelta(hours=hours)


def local_midnight(now: Optional[datetime], tz_name: str = "UTC") -> datetime:
    """
    Start of the current day in the given timezone, returned in UTC.

    Args:
        now (Optional[datetime]): Reference instant (defaults to current time).
        tz_name (str): IANA timezone name defining where the day starts.

    Returns:
        datetime: Aware UTC datetime of the most recent local midnight.
    """
    tz = ZoneInfo(tz_name)
    local_now = ensure_aware(now or utc_now()).astimezone(tz)
    midnight = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight.astimezone(timezone.utc)

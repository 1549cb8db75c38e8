"""Time helpers. All persisted timestamps are UTC."""

from datetime import date, datetime

import pytz

UTC = pytz.utc


def now_utc() -> datetime:
    """Return current time in UTC."""
    return datetime.now(UTC)


def today_utc() -> date:
    """Return the current UTC calendar date."""
    return now_utc().date()


def to_utc(dt: datetime) -> datetime:
    """Convert a datetime to UTC; naive values are assumed to already be UTC."""
    if dt.tzinfo is None:
        return UTC.localize(dt)
    return dt.astimezone(UTC)


def month_start(dt: datetime) -> datetime:
    """Midnight UTC on the first day of the month containing ``dt``."""
    dt = to_utc(dt)
    return dt.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def previous_month_start(dt: datetime) -> datetime:
    start = month_start(dt)
    if start.month == 1:
        return start.replace(year=start.year - 1, month=12)
    return start.replace(month=start.month - 1)

"""
Conversion between church-local wall-clock time and UTC instants.

A church carries a fixed offset in minutes from UTC (``Church.time_offset``);
there is no daylight-saving adjustment. The same contract is used everywhere:

* a naive timestamp is the church's local wall-clock time, and the offset is
  subtracted to reach UTC;
* an aware timestamp already names an instant and is only converted to UTC.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from app.core.config import settings
from app.core.exceptions import ValidationFailed


def church_timezone(time_offset: int) -> timezone:
    return timezone(timedelta(minutes=time_offset))


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Read a stored or query timestamp as UTC; naive values are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_utc(value: datetime, time_offset: int) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=church_timezone(time_offset))
    return value.astimezone(timezone.utc)


def normalize_interval(start: datetime, end: datetime, time_offset: int) -> Tuple[datetime, datetime]:
    """
    Convert a caller-supplied start/end pair to UTC using the church offset.

    Raises:
        ValidationFailed: if the interval is empty or reversed
    """
    start_utc = to_utc(start, time_offset)
    end_utc = to_utc(end, time_offset)
    if end_utc <= start_utc:
        raise ValidationFailed("Service date start must be earlier than service date end")
    return start_utc, end_utc


def local_day_window(time_offset: int, now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """
    Return ``[start of today, start of tomorrow)`` for the church's local day, in UTC.
    """
    if now is None:
        now = utc_now()
    local_now = as_utc(now).astimezone(church_timezone(time_offset))
    day_start = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    day_end = day_start + timedelta(days=1)
    return day_start.astimezone(timezone.utc), day_end.astimezone(timezone.utc)


def search_window(
    date_from: Optional[datetime],
    date_to: Optional[datetime],
    now: Optional[datetime] = None,
    max_days: Optional[int] = None,
) -> Tuple[datetime, datetime]:
    """
    Resolve the public search window.

    Both bounds omitted gives ``[now, now + max_days)``. Supplying only one
    bound, a reversed window, or a window longer than ``max_days`` is rejected.
    """
    if max_days is None:
        max_days = settings.SEARCH_WINDOW_DAYS

    if date_from is None and date_to is None:
        start = as_utc(now) if now is not None else utc_now()
        return start, start + timedelta(days=max_days)

    if date_from is None or date_to is None:
        raise ValidationFailed("One of the date is empty")

    start = as_utc(date_from)
    end = as_utc(date_to)
    if start >= end:
        raise ValidationFailed("Service date from must be earlier than service date to")
    if end - start > timedelta(days=max_days):
        raise ValidationFailed(f"You can only search maximum {max_days} days range")

    return start, end

from datetime import datetime, date, time, timedelta, timezone
from typing import Iterable, List, Optional, Tuple
from zoneinfo import ZoneInfo

from coachdesk.core.config import settings


def get_local_zone() -> ZoneInfo:
    return ZoneInfo(settings.APP_TIMEZONE)


def utc_now() -> datetime:
    """Naive UTC timestamp, the format stored in every DateTime column."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def get_local_now() -> datetime:
    """Returns the current date and time in the application's time zone."""
    return datetime.now(get_local_zone())


def get_local_date() -> date:
    return get_local_now().date()


def day_bounds_utc(day: date) -> Tuple[datetime, datetime]:
    """
    Returns [start, end) of the local calendar day ``day`` as naive UTC datetimes.
    DST transitions are handled by the zone, so a day may be 23 or 25 hours long.
    """
    zone = get_local_zone()
    start_local = datetime.combine(day, time.min, tzinfo=zone)
    end_local = datetime.combine(day + timedelta(days=1), time.min, tzinfo=zone)
    return (
        start_local.astimezone(timezone.utc).replace(tzinfo=None),
        end_local.astimezone(timezone.utc).replace(tzinfo=None),
    )


def range_bounds_utc(start: date, end: date) -> Tuple[datetime, datetime]:
    """UTC bounds covering the local days ``start`` through ``end`` inclusive."""
    return day_bounds_utc(start)[0], day_bounds_utc(end)[1]


def normalize_tags(values: Optional[Iterable[str]]) -> List[str]:
    """Trims tags, drops blanks and keeps the first occurrence of each (case-insensitive)."""
    result: List[str] = []
    seen = set()
    for value in values or []:
        if value is None:
            continue
        tag = str(value).strip()
        key = tag.lower()
        if not tag or key in seen:
            continue
        seen.add(key)
        result.append(tag)
    return result

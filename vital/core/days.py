from __future__ import annotations

from datetime import date as DateType, datetime, time, timedelta, tzinfo
from zoneinfo import ZoneInfo


def resolve_timezone(name: str | None) -> tzinfo | None:
    """Return the configured zone, or None for the host's local zone."""
    if not name:
        return None
    return ZoneInfo(name)


def to_local(moment: datetime | DateType, tz: tzinfo | None = None) -> datetime:
    """
    Convert to a naive local wall-clock datetime.

    Naive datetimes are assumed to already be local. A bare date becomes
    local midnight of that day.
    """
    if not isinstance(moment, datetime):
        return datetime.combine(moment, time.min)
    if moment.tzinfo is None:
        return moment
    # astimezone(None) converts to the host's local zone
    return moment.astimezone(tz).replace(tzinfo=None)


def start_of_day(moment: datetime | DateType, tz: tzinfo | None = None) -> datetime:
    local = to_local(moment, tz)
    return datetime.combine(local.date(), time.min)


def day_bounds(moment: datetime | DateType, tz: tzinfo | None = None) -> tuple[datetime, datetime]:
    """Half-open local-calendar day [startOfDay, startOfDay + 1 day) containing moment."""
    start = start_of_day(moment, tz)
    return start, start + timedelta(days=1)

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo


def _offset_at(instant: datetime, zone: ZoneInfo) -> timedelta:
    offset = instant.astimezone(zone).utcoffset()
    return offset if offset is not None else timedelta(0)


def wall_time_to_utc(day: date, hour: int, minute: int, zone: ZoneInfo) -> datetime:
    """
    Resolve a wall-clock time in ``zone`` to a UTC instant.

    The wall-clock components are first read as if they were UTC. The zone
    offset at that guess is subtracted; because the offset depends on the
    instant itself, it is read again at the corrected instant and applied a
    second time when it changed (a DST switch lies between guess and result).

    ``hour`` may be 24 and rolls over into the next day.
    """
    guess = datetime(day.year, day.month, day.day, tzinfo=timezone.utc) + timedelta(
        hours=hour, minutes=minute
    )
    first = _offset_at(guess, zone)
    instant = guess - first

    second = _offset_at(instant, zone)
    if second != first:
        instant = guess - second
    return instant


def zoned_iso(day: date, hour: int, minute: int, zone: ZoneInfo) -> str:
    """Format as ``YYYY-MM-DDTHH:MM:SS+HH:MM`` in ``zone``."""
    instant = wall_time_to_utc(day, hour, minute, zone)
    return instant.astimezone(zone).isoformat(timespec="seconds")

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

UTC = timezone.utc


def resolve_timezone(name: str) -> ZoneInfo:
    """Returns the IANA zone, raising ValueError for unknown names."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"unknown timezone: {name!r}") from exc


def parse_wall_clock(value: str | time) -> time:
    """Accepts a `time` or an "HH:MM" string (seconds are tolerated)."""
    if isinstance(value, time):
        return value
    parts = value.strip().split(":")
    if len(parts) not in (2, 3):
        raise ValueError(f"invalid wall-clock time: {value!r}")
    try:
        hour, minute = int(parts[0]), int(parts[1])
        second = int(parts[2]) if len(parts) == 3 else 0
        return time(hour, minute, second)
    except ValueError as exc:
        raise ValueError(f"invalid wall-clock time: {value!r}") from exc


def campaign_local_date(now_utc: datetime, tz_name: str) -> date:
    return now_utc.astimezone(resolve_timezone(tz_name)).date()


def campaign_day_index(*, start_date: date, tz_name: str, now_utc: datetime) -> int:
    """Whole days elapsed since local midnight of the campaign start date.

    Negative before the campaign starts.
    """
    return (campaign_local_date(now_utc, tz_name) - start_date).days


def question_local_date(*, start_date: date, day_index: int) -> date:
    return start_date + timedelta(days=day_index)


def regular_window(
    *,
    start_date: date,
    tz_name: str,
    day_index: int,
    schedule_time: time,
    deadline_time: time,
) -> tuple[datetime, datetime]:
    tz = resolve_timezone(tz_name)
    local_date = question_local_date(start_date=start_date, day_index=day_index)
    open_at = datetime.combine(local_date, schedule_time, tzinfo=tz)
    close_at = datetime.combine(local_date, deadline_time, tzinfo=tz)
    return open_at.astimezone(UTC), close_at.astimezone(UTC)


def special_window(*, special_start_at: datetime, window_minutes: int) -> tuple[datetime, datetime]:
    return special_start_at, special_start_at + timedelta(minutes=window_minutes)

# stafftrack_api/common/timeutil.py
"""
Period boundaries for hour aggregation.

Every timestamp in the tracker is a naive datetime in UTC. Day, week and
month boundaries are all computed at UTC midnight so the answer never depends
on the server's local zone.

Weekday integers follow the group dashboard convention:
    0 = Sunday, 1 = Monday, ... 6 = Saturday
"""
from __future__ import annotations

import calendar
from datetime import datetime, timedelta, timezone

EPOCH = datetime(1970, 1, 1)
MONDAY = 1
WEEKDAY_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def day_index(dt: datetime) -> int:
    """Python's Monday=0 mapped onto the Sunday=0 convention."""
    return (dt.weekday() + 1) % 7


def start_of_day(dt: datetime) -> datetime:
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_week(dt: datetime, week_start: int = MONDAY) -> datetime:
    """
    Most recent `week_start` weekday at 00:00. If `dt` already falls on that
    weekday the boundary is today at midnight.
    """
    back = (day_index(dt) - int(week_start)) % 7
    return start_of_day(dt) - timedelta(days=back)


def end_of_week(week_start_dt: datetime) -> datetime:
    """Last microsecond of the 7-day window opened at `week_start_dt`."""
    return week_start_dt + timedelta(days=7) - timedelta(microseconds=1)


def start_of_month(dt: datetime) -> datetime:
    return start_of_day(dt).replace(day=1)


def add_months(dt: datetime, months: int) -> datetime:
    idx = dt.month - 1 + months
    year = dt.year + idx // 12
    month = idx % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


def weekday_label(dt: datetime) -> str:
    return WEEKDAY_LABELS[day_index(dt)]

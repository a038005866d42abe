# stafftrack_api/services/aggregation.py
from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, List, Dict, Any

from stafftrack_api.common.timeutil import (
    EPOCH,
    start_of_day,
    start_of_week,
    utcnow,
    weekday_label,
)

_CENT = Decimal("0.01")


def round_hours(value: float) -> float:
    """Half-up to two decimals (0.125 -> 0.13), matching what the dashboard shows."""
    return float(Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP))


class HoursAggregator:
    """
    Range sums over the session log. Nothing is cached: every figure is
    recomputed from the stored entries on each call.
    """

    def __init__(self, repo):
        self.repo = repo

    # ---- primitives ----
    def week_start_day(self) -> int:
        return int(self.repo.get_quota_settings().week_start)

    def hours_in_range(self, staff_id: int, start: datetime, end: Optional[datetime] = None) -> float:
        """Sum of duration for entries whose session_start is in [start, end); end=None is open."""
        return round_hours(self.repo.sum_duration(staff_id, start, end))

    def period_bounds(self, now: Optional[datetime] = None) -> Dict[str, datetime]:
        now = now or utcnow()
        return {
            "day": start_of_day(now),
            "week": start_of_week(now, self.week_start_day()),
            "alltime": EPOCH,
        }

    # ---- rollups ----
    def daily_hours(self, staff_id: int, now: Optional[datetime] = None) -> float:
        return self.hours_in_range(staff_id, start_of_day(now or utcnow()))

    def weekly_hours(self, staff_id: int, now: Optional[datetime] = None) -> float:
        now = now or utcnow()
        return self.hours_in_range(staff_id, start_of_week(now, self.week_start_day()))

    def all_time_hours(self, staff_id: int) -> float:
        return self.hours_in_range(staff_id, EPOCH)

    def rollup(self, staff_id: int, now: Optional[datetime] = None) -> Dict[str, Any]:
        bounds = self.period_bounds(now)
        return {
            "daily_hours": self.hours_in_range(staff_id, bounds["day"]),
            "weekly_hours": self.hours_in_range(staff_id, bounds["week"]),
            "all_time_hours": self.hours_in_range(staff_id, bounds["alltime"]),
            "last_active": self.repo.last_session_start(staff_id),
        }

    def weekly_activity(self, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        """Seven daily buckets across all staff, starting at the current week start."""
        now = now or utcnow()
        week_start = start_of_week(now, self.week_start_day())
        out: List[Dict[str, Any]] = []
        for i in range(7):
            day = week_start + timedelta(days=i)
            total = self.repo.sum_duration(None, day, day + timedelta(days=1))
            out.append({
                "date": weekday_label(day),
                "day": day.date().isoformat(),
                "total_hours": round_hours(total),
            })
        return out

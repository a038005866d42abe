# stafftrack_api/services/leaderboard.py
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional, List, Dict, Any, Tuple

from stafftrack_api.common.errors import InvalidInput
from stafftrack_api.common.timeutil import (
    EPOCH,
    add_months,
    start_of_day,
    start_of_month,
    start_of_week,
    utcnow,
)
from stafftrack_api.services.aggregation import HoursAggregator, round_hours

PERIODS = ("daily", "weekly", "monthly", "alltime")


class LeaderboardRanker:

    def __init__(self, repo):
        self.repo = repo
        self.hours = HoursAggregator(repo)

    def windows(self, period: str, now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
        """
        Returns (current_start, previous_start). The previous window is
        [previous_start, current_start).

        alltime compares against the day before the epoch, which is always
        empty, so its change equals its total.
        """
        if period not in PERIODS:
            raise InvalidInput(f"Invalid period '{period}'", payload={"allowed": list(PERIODS)})
        now = now or utcnow()

        if period == "daily":
            start = start_of_day(now)
        elif period == "weekly":
            start = start_of_week(now, self.hours.week_start_day())
        elif period == "monthly":
            start = start_of_month(now)
        else:
            start = EPOCH

        if period == "weekly":
            prev = start - timedelta(days=7)
        elif period == "monthly":
            prev = add_months(start, -1)
        else:
            prev = start - timedelta(days=1)
        return start, prev

    def leaderboard(self, period: str, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        start, prev = self.windows(period, now)

        entries: List[Dict[str, Any]] = []
        for m in self.repo.list_staff():
            total = self.hours.hours_in_range(m.id, start)
            before = self.hours.hours_in_range(m.id, prev, start)
            row = m.to_dict()
            row.update({
                "total_hours": total,
                "weekly_change": round_hours(total - before),
                "position": 0,
            })
            entries.append(row)

        # stable sort: equal totals keep roster order and still get distinct positions
        entries.sort(key=lambda e: e["total_hours"], reverse=True)
        for i, e in enumerate(entries, start=1):
            e["position"] = i
        return entries

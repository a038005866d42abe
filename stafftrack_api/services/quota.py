# stafftrack_api/services/quota.py
from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta
from typing import Optional, List, Dict, Any

from stafftrack_api.common.errors import InvalidInput
from stafftrack_api.common.timeutil import start_of_week, utcnow
from stafftrack_api.services.aggregation import HoursAggregator, round_hours

log = logging.getLogger(__name__)


def _number(value, field: str) -> float:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise InvalidInput(f"{field} must be a finite number")
    return float(value)


class QuotaEvaluator:
    """Weekly quota compliance on top of the aggregation rollups."""

    def __init__(self, repo, demotion_threshold: int = 2):
        self.repo = repo
        self.hours = HoursAggregator(repo)
        self.demotion_threshold = demotion_threshold

    # ---------------- settings ----------------
    def settings(self):
        return self.repo.get_quota_settings()

    def update_settings(self, weekly_requirement=None, week_start=None):
        """
        Replace the settings record. Omitted fields keep their current value.
        Takes effect for every aggregation immediately, past weeks included.
        """
        current = self.settings()
        req = current.weekly_requirement if weekly_requirement is None else _number(weekly_requirement, "weekly_requirement")
        if req < 0:
            raise InvalidInput("weekly_requirement must be >= 0")

        ws = current.week_start
        if week_start is not None:
            if isinstance(week_start, bool) or not isinstance(week_start, int) or not 0 <= week_start <= 6:
                raise InvalidInput("week_start must be an integer 0 (Sunday) .. 6 (Saturday)")
            ws = week_start

        settings = self.repo.replace_quota_settings(req, ws)
        log.info("quota settings updated: requirement=%.2fh week_start=%s", settings.weekly_requirement, settings.week_start)
        return settings

    # ---------------- evaluation ----------------
    def quota_met(self, staff_id: int, now: Optional[datetime] = None) -> bool:
        return self.hours.weekly_hours(staff_id, now) >= self.settings().weekly_requirement

    def staff_with_stats(self, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        now = now or utcnow()
        requirement = float(self.settings().weekly_requirement)
        staff = self.repo.list_staff()
        strikes = self.repo.active_strike_counts(m.id for m in staff)

        out: List[Dict[str, Any]] = []
        for m in staff:
            r = self.hours.rollup(m.id, now)
            n_strikes = strikes.get(m.id, 0)
            row = m.to_dict()
            row.update({
                "daily_hours": r["daily_hours"],
                "weekly_hours": r["weekly_hours"],
                "all_time_hours": r["all_time_hours"],
                "quota_met": r["weekly_hours"] >= requirement,
                "last_active": r["last_active"].isoformat() if r["last_active"] else None,
                "quota_strikes": n_strikes,
                "demotion_eligible": n_strikes >= self.demotion_threshold,
            })
            out.append(row)
        return out

    def completion(self, now: Optional[datetime] = None) -> Dict[str, List[Dict[str, Any]]]:
        """Partition the roster into completed / incomplete for the current week."""
        rows = self.staff_with_stats(now)
        return {
            "completed": [r for r in rows if r["quota_met"]],
            "incomplete": [r for r in rows if not r["quota_met"]],
        }

    def dashboard_stats(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        now = now or utcnow()
        requirement = float(self.settings().weekly_requirement)
        staff = self.repo.list_staff()

        met = 0
        active_today = 0
        total_weekly = 0.0
        for m in staff:
            weekly = self.hours.weekly_hours(m.id, now)
            daily = self.hours.daily_hours(m.id, now)
            total_weekly += weekly
            if weekly >= requirement:
                met += 1
            if daily > 0:
                active_today += 1

        avg = total_weekly / len(staff) if staff else 0.0
        return {
            "total_staff": len(staff),
            "quota_met": met,
            "avg_weekly_hours": round_hours(avg),
            "active_today": active_today,
        }

    # ---------------- snapshots ----------------
    def snapshot_week(self, now: Optional[datetime] = None):
        """Persist one QuotaStatus row per staff member for the current week (overwrites)."""
        now = now or utcnow()
        settings = self.settings()
        week_start = start_of_week(now, settings.week_start)
        week_end = week_start + timedelta(days=6)

        rows = []
        for m in self.repo.list_staff():
            weekly = self.hours.hours_in_range(m.id, week_start)
            rows.append(self.repo.put_quota_status(
                m.id, week_start, week_end, weekly, weekly >= settings.weekly_requirement,
            ))
        self.repo.commit()
        log.info("quota snapshot for week %s: %d staff", week_start.date(), len(rows))
        return rows

    def status_for(self, staff_id: int, week_start: datetime):
        return self.repo.get_quota_status(staff_id, week_start)

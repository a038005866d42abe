# stafftrack_api/repository.py
"""
Persistence for the tracker: staff roster, append-only session log, the
quota-settings singleton, weekly quota snapshots and the strike ledger.

A TrackerRepository wraps one SQLAlchemy session. Routes obtain the
request-scoped instance through `get_repository()`; tests and CLI commands
build their own around `db.session`.
"""
from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional

from flask import current_app, g
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from stafftrack_api.common.errors import StorageFailure
from stafftrack_api.common.timeutil import utcnow
from stafftrack_api.extensions import db
from stafftrack_api.models.quota import QuotaSettings, QuotaStatus, QuotaStrike
from stafftrack_api.models.staff import StaffMember
from stafftrack_api.models.time_entry import TimeEntry

STAFF_FIELDS = ("username", "rank", "rank_name")


class TrackerRepository:

    def __init__(self, session, default_requirement: float = 1.0, default_week_start: int = 1):
        self.session = session
        self.default_requirement = default_requirement
        self.default_week_start = default_week_start

    # ---------------- transactions ----------------
    def commit(self):
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageFailure("Could not write to the tracker store", payload=detail_of(e)) from e

    # ---------------- staff ----------------
    def get_staff(self, staff_id: int) -> Optional[StaffMember]:
        return self.session.get(StaffMember, staff_id)

    def get_staff_by_user_id(self, user_id: str) -> Optional[StaffMember]:
        return self.session.query(StaffMember).filter_by(user_id=str(user_id)).first()

    def list_staff(self) -> List[StaffMember]:
        # insertion order; leaderboard ties rely on it being stable
        return self.session.query(StaffMember).order_by(StaffMember.id.asc()).all()

    def create_staff(self, user_id: str, username: str, rank: int, rank_name: str) -> StaffMember:
        member = StaffMember(user_id=str(user_id), username=username, rank=int(rank), rank_name=rank_name)
        self.session.add(member)
        self.commit()
        return member

    def update_staff(self, staff_id: int, **updates) -> Optional[StaffMember]:
        member = self.get_staff(staff_id)
        if member is None:
            return None
        for key in STAFF_FIELDS:
            if updates.get(key) is not None:
                setattr(member, key, updates[key])
        self.commit()
        return member

    # ---------------- session log ----------------
    def add_time_entry(
        self,
        staff_id: int,
        session_start: datetime,
        action: str,
        duration: float = 0.0,
        session_end: Optional[datetime] = None,
    ) -> TimeEntry:
        entry = TimeEntry(
            staff_id=staff_id,
            session_start=session_start,
            session_end=session_end,
            duration=float(duration or 0.0),
            action=action,
        )
        self.session.add(entry)
        self.commit()
        return entry

    def time_entries(
        self,
        staff_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[TimeEntry]:
        q = self._entry_query(self.session.query(TimeEntry), staff_id, start, end)
        return q.order_by(TimeEntry.session_start.desc(), TimeEntry.id.desc()).all()

    def sum_duration(
        self,
        staff_id: Optional[int],
        start: datetime,
        end: Optional[datetime] = None,
    ) -> float:
        """Raw SUM(duration) for entries with session_start in [start, end)."""
        q = self.session.query(func.coalesce(func.sum(TimeEntry.duration), 0.0))
        q = self._entry_query(q, staff_id, start, end)
        return float(q.scalar() or 0.0)

    def last_session_start(self, staff_id: int) -> Optional[datetime]:
        return (
            self.session.query(func.max(TimeEntry.session_start))
            .filter(TimeEntry.staff_id == staff_id)
            .scalar()
        )

    @staticmethod
    def _entry_query(q, staff_id, start, end):
        if staff_id is not None:
            q = q.filter(TimeEntry.staff_id == staff_id)
        if start is not None:
            q = q.filter(TimeEntry.session_start >= start)
        if end is not None:
            q = q.filter(TimeEntry.session_start < end)
        return q

    # ---------------- quota settings ----------------
    def get_quota_settings(self) -> QuotaSettings:
        settings = self.session.query(QuotaSettings).order_by(QuotaSettings.id.asc()).first()
        if settings is None:
            settings = QuotaSettings(
                weekly_requirement=self.default_requirement,
                week_start=self.default_week_start,
            )
            self.session.add(settings)
            self.commit()
        return settings

    def replace_quota_settings(self, weekly_requirement: float, week_start: int) -> QuotaSettings:
        settings = self.get_quota_settings()
        settings.weekly_requirement = float(weekly_requirement)
        settings.week_start = int(week_start)
        settings.updated_at = utcnow()
        self.commit()
        return settings

    # ---------------- quota snapshots ----------------
    def get_quota_status(self, staff_id: int, week_start: datetime) -> Optional[QuotaStatus]:
        return (
            self.session.query(QuotaStatus)
            .filter_by(staff_id=staff_id, week_start=week_start)
            .first()
        )

    def put_quota_status(
        self,
        staff_id: int,
        week_start: datetime,
        week_end: datetime,
        total_hours: float,
        quota_met: bool,
    ) -> QuotaStatus:
        row = self.get_quota_status(staff_id, week_start)
        if row is None:
            row = QuotaStatus(staff_id=staff_id, week_start=week_start)
            self.session.add(row)
        row.week_end = week_end
        row.total_hours = float(total_hours)
        row.quota_met = bool(quota_met)
        return row

    # ---------------- strikes ----------------
    def create_strike(
        self,
        staff_id: int,
        week_start: datetime,
        week_end: datetime,
        reason: str,
        given_by: Optional[str],
    ) -> QuotaStrike:
        strike = QuotaStrike(
            staff_id=staff_id,
            week_start=week_start,
            week_end=week_end,
            reason=reason,
            given_by=given_by,
            given_at=utcnow(),
            active=True,
        )
        self.session.add(strike)
        self.commit()
        return strike

    def get_strike(self, strike_id: int) -> Optional[QuotaStrike]:
        return self.session.get(QuotaStrike, strike_id)

    def list_strikes(self, staff_id: int, active: Optional[bool] = True) -> List[QuotaStrike]:
        q = self.session.query(QuotaStrike).filter(QuotaStrike.staff_id == staff_id)
        if active is not None:
            q = q.filter(QuotaStrike.active.is_(active))
        return q.order_by(QuotaStrike.given_at.desc(), QuotaStrike.id.desc()).all()

    def count_active_strikes(self, staff_id: int) -> int:
        return (
            self.session.query(func.count(QuotaStrike.id))
            .filter(QuotaStrike.staff_id == staff_id, QuotaStrike.active.is_(True))
            .scalar()
        ) or 0

    def active_strike_counts(self, staff_ids: Iterable[int]) -> dict[int, int]:
        ids = list(staff_ids)
        if not ids:
            return {}
        rows = (
            self.session.query(QuotaStrike.staff_id, func.count(QuotaStrike.id))
            .filter(QuotaStrike.staff_id.in_(ids), QuotaStrike.active.is_(True))
            .group_by(QuotaStrike.staff_id)
            .all()
        )
        return {sid: int(n) for sid, n in rows}


def detail_of(e: Exception) -> str:
    return str(getattr(e, "orig", None) or e)


def get_repository() -> TrackerRepository:
    """Request-scoped repository bound to the Flask-SQLAlchemy session."""
    repo = g.get("tracker_repo")
    if repo is None:
        cfg = current_app.config
        repo = TrackerRepository(
            db.session,
            default_requirement=cfg.get("DEFAULT_WEEKLY_REQUIREMENT", 1.0),
            default_week_start=cfg.get("DEFAULT_WEEK_START", 1),
        )
        g.tracker_repo = repo
    return repo

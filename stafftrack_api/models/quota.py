from datetime import datetime
from stafftrack_api.common.timeutil import utcnow
from stafftrack_api.extensions import db


class QuotaSettings(db.Model):
    """Process-wide singleton: weekly hour requirement + week-start weekday."""
    __tablename__ = "quota_settings"

    id = db.Column(db.Integer, primary_key=True)
    weekly_requirement = db.Column(db.Float, nullable=False, default=1.0)  # hours
    week_start = db.Column(db.SmallInteger, nullable=False, default=1)     # 0=Sun .. 6=Sat
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "weekly_requirement": float(self.weekly_requirement),
            "week_start": int(self.week_start),
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class QuotaStatus(db.Model):
    __tablename__ = "quota_status"

    id = db.Column(db.Integer, primary_key=True)
    staff_id = db.Column(db.Integer, db.ForeignKey("staff_members.id", ondelete="CASCADE"), nullable=False, index=True)
    week_start = db.Column(db.DateTime, nullable=False)
    week_end = db.Column(db.DateTime, nullable=False)
    total_hours = db.Column(db.Float, nullable=False, default=0.0)
    quota_met = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        db.UniqueConstraint("staff_id", "week_start", name="uq_quota_status_staff_week"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "staff_id": self.staff_id,
            "week_start": self.week_start.isoformat(),
            "week_end": self.week_end.isoformat(),
            "total_hours": float(self.total_hours),
            "quota_met": bool(self.quota_met),
        }


class QuotaStrike(db.Model):
    """
    Disciplinary mark for a missed week. Rows are never deleted; removal is
    the one-way transition active=True -> active=False.
    """
    __tablename__ = "quota_strikes"

    id = db.Column(db.Integer, primary_key=True)
    staff_id = db.Column(db.Integer, db.ForeignKey("staff_members.id", ondelete="CASCADE"), nullable=False, index=True)
    week_start = db.Column(db.DateTime, nullable=False)
    week_end = db.Column(db.DateTime, nullable=False)
    reason = db.Column(db.Text, nullable=False, default="Failed to meet weekly quota")
    given_by = db.Column(db.String(120), nullable=True)
    given_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    active = db.Column(db.Boolean, nullable=False, default=True)
    deactivated_at = db.Column(db.DateTime, nullable=True)

    __table_args__ = (
        db.Index("ix_quota_strike_staff_active", "staff_id", "active"),
    )

    def deactivate(self, when: datetime) -> bool:
        """Returns False when the strike was already inactive (nothing changes)."""
        if not self.active:
            return False
        self.active = False
        self.deactivated_at = when
        return True

    def to_dict(self):
        return {
            "id": self.id,
            "staff_id": self.staff_id,
            "week_start": self.week_start.isoformat(),
            "week_end": self.week_end.isoformat(),
            "reason": self.reason,
            "given_by": self.given_by,
            "given_at": self.given_at.isoformat() if self.given_at else None,
            "active": bool(self.active),
        }

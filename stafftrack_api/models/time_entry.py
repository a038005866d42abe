# stafftrack_api/models/time_entry.py
from __future__ import annotations

from datetime import datetime
from typing import Optional, Dict, Any

from sqlalchemy import Index, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from stafftrack_api.common.timeutil import utcnow
from stafftrack_api.extensions import db

ACTION_JOIN = "join"
ACTION_LEAVE = "leave"
ACTION_UPDATE = "update"
ACTION_MANUAL_PREFIX = "manual_adjustment"

WEBHOOK_ACTIONS = (ACTION_JOIN, ACTION_LEAVE, ACTION_UPDATE)


class TimeEntry(db.Model):
    """
    One tracked interval for a staff member. Rows are append-only:

      join               -> duration 0, session_end null
      leave / update     -> duration reported by the game server (hours)
      manual_adjustment  -> admin correction, zero-length window,
                            action = "manual_adjustment: <reason>"

    `duration` is what aggregation sums; it is never recomputed from
    session_start/session_end.
    """

    __tablename__ = "time_entries"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    staff_id: Mapped[int] = mapped_column(
        ForeignKey("staff_members.id", ondelete="CASCADE"), index=True, nullable=False
    )

    session_start: Mapped[datetime] = mapped_column(nullable=False)
    session_end: Mapped[Optional[datetime]] = mapped_column(nullable=True)
    duration: Mapped[float] = mapped_column(db.Float, nullable=False, default=0.0)  # hours
    action: Mapped[str] = mapped_column(db.String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)

    __table_args__ = (
        Index("ix_time_entry_staff_start", "staff_id", "session_start"),
        Index("ix_time_entry_start", "session_start"),
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "staff_id": self.staff_id,
            "session_start": self.session_start.isoformat() if self.session_start else None,
            "session_end": self.session_end.isoformat() if self.session_end else None,
            "duration": float(self.duration or 0),
            "action": self.action,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    @staticmethod
    def manual_action(reason: str | None) -> str:
        reason = (reason or "").strip() or "No reason provided"
        return f"{ACTION_MANUAL_PREFIX}: {reason}"

# stafftrack_api/services/roster.py
from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Optional, Dict, Any

from stafftrack_api.common.errors import InvalidInput, NotFound
from stafftrack_api.common.timeutil import utcnow
from stafftrack_api.models.time_entry import TimeEntry, ACTION_LEAVE, WEBHOOK_ACTIONS

log = logging.getLogger(__name__)

DEFAULT_RANK = 3
RANK_NAMES = {
    3: "Helper",
    4: "Trial Moderator",
    5: "Moderator",
    6: "Senior Moderator",
    7: "Head Moderator",
    8: "Administrator",
    9: "Senior Administrator",
    10: "Owner",
}


def rank_name(rank: int) -> str:
    return RANK_NAMES.get(rank, f"Rank {rank}")


def _is_number(v) -> bool:
    # the JSON parser lets NaN and Infinity through
    return isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)


class RosterService:
    """Staff records and the two ways hours enter the log (webhook + manual)."""

    def __init__(self, repo, min_rank: int = 3, excluded_rank: int = 254,
                 demote_rank: int = 3, demote_rank_name: str = "Helper"):
        self.repo = repo
        self.min_rank = min_rank
        self.excluded_rank = excluded_rank
        self.demote_rank = demote_rank
        self.demote_rank_name = demote_rank_name

    def _require(self, staff_id: int):
        member = self.repo.get_staff(staff_id)
        if member is None:
            raise NotFound("Staff member not found", payload={"staff_id": staff_id})
        return member

    # ---------------- reads ----------------
    def detail(self, staff_id: int) -> Dict[str, Any]:
        member = self._require(staff_id)
        row = member.to_dict()
        row["time_entries"] = [e.to_dict() for e in self.repo.time_entries(member.id)]
        return row

    # ---------------- ingestion ----------------
    def record_session(
        self,
        user_id,
        username,
        action,
        rank=None,
        session_time=None,
        now: Optional[datetime] = None,
    ) -> TimeEntry:
        """
        Webhook event from the game server. `session_time` is in seconds and
        becomes the entry's duration in hours. Unknown users are enrolled on
        their first event.
        """
        if user_id in (None, "") or not username or not action:
            raise InvalidInput("Missing required fields", payload={"required": ["user_id", "username", "action"]})
        if action not in WEBHOOK_ACTIONS:
            raise InvalidInput(f"Unknown action '{action}'", payload={"allowed": list(WEBHOOK_ACTIONS)})
        if session_time is not None and not _is_number(session_time):
            raise InvalidInput("session_time must be a number of seconds")
        if session_time is not None and session_time < 0:
            raise InvalidInput("session_time must be >= 0")
        if rank is not None and (not isinstance(rank, int) or isinstance(rank, bool)):
            raise InvalidInput("rank must be an integer")

        now = now or utcnow()
        member = self.repo.get_staff_by_user_id(str(user_id))
        if member is None:
            r = rank or DEFAULT_RANK
            member = self.repo.create_staff(str(user_id), username, r, rank_name(r))
            log.info("enrolled staff %s (%s) from first tracked session", member.username, member.user_id)

        hours = session_time / 3600 if session_time else 0.0
        entry = self.repo.add_time_entry(
            member.id,
            session_start=now,
            session_end=now if action == ACTION_LEAVE else None,
            duration=hours,
            action=action,
        )
        log.info("session %s for %s: %.4fh", action, member.username, hours)
        return entry

    def adjust_hours(self, staff_id: int, hours, reason: Optional[str] = None,
                     now: Optional[datetime] = None) -> TimeEntry:
        if not _is_number(hours):
            raise InvalidInput("Hours must be a number")
        member = self._require(staff_id)
        now = now or utcnow()
        entry = self.repo.add_time_entry(
            member.id,
            session_start=now,
            session_end=now,
            duration=float(hours),
            action=TimeEntry.manual_action(reason),
        )
        log.info("manual adjustment for %s: %+.2fh (%s)", member.username, float(hours), entry.action)
        return entry

    # ---------------- edits ----------------
    def update(self, staff_id: int, username=None, rank=None, rank_name=None):
        self._require(staff_id)
        if rank is not None and (not isinstance(rank, int) or isinstance(rank, bool)):
            raise InvalidInput("rank must be an integer")
        return self.repo.update_staff(staff_id, username=username, rank=rank, rank_name=rank_name)

    def demote(self, staff_id: int):
        self._require(staff_id)
        member = self.repo.update_staff(staff_id, rank=self.demote_rank, rank_name=self.demote_rank_name)
        log.info("staff %s demoted to %s", member.username, member.rank_name)
        return member

    # ---------------- group sync ----------------
    def sync(self, client, group_id: int) -> Dict[str, Any]:
        members = client.group_members(group_id)
        staff = [m for m in members if m["rank"] >= self.min_rank and m["rank"] != self.excluded_rank]

        synced = []
        for m in staff:
            existing = self.repo.get_staff_by_user_id(m["user_id"])
            if existing is None:
                synced.append(self.repo.create_staff(m["user_id"], m["username"], m["rank"], m["rank_name"]))
            else:
                synced.append(self.repo.update_staff(
                    existing.id, username=m["username"], rank=m["rank"], rank_name=m["rank_name"],
                ))
        log.info("staff sync: %d of %d group members are staff", len(synced), len(members))
        return {"synced_count": len(synced), "staff": [s.to_dict() for s in synced]}

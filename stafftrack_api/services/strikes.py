# stafftrack_api/services/strikes.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Iterable, Dict, Any, List, Tuple

from sqlalchemy.exc import SQLAlchemyError

from stafftrack_api.common.errors import APIError, NotFound, InvalidInput
from stafftrack_api.common.timeutil import end_of_week, start_of_week, utcnow
from stafftrack_api.models.quota import QuotaStrike

log = logging.getLogger(__name__)


def _staff_id(raw) -> Optional[int]:
    """Plain ints or digit-only strings; bools and floats are rejected."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and raw.isascii() and raw.isdigit():
        return int(raw)
    return None


class StrikeLedger:
    """
    Lifecycle of quota strikes:

        created (active=True) --deactivate--> deactivated (active=False)

    One-way. Deactivating an inactive strike finds the row and reports
    success without touching it. Only active strikes are listed or counted.
    """

    def __init__(self, repo, demotion_threshold: int = 2):
        self.repo = repo
        self.demotion_threshold = demotion_threshold

    def current_week(self, now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
        now = now or utcnow()
        start = start_of_week(now, self.repo.get_quota_settings().week_start)
        return start, end_of_week(start)

    def create(
        self,
        staff_id: int,
        reason: str,
        given_by: Optional[str] = None,
        week: Optional[Tuple[datetime, datetime]] = None,
        now: Optional[datetime] = None,
    ) -> QuotaStrike:
        if not isinstance(reason, str) or not reason.strip():
            raise InvalidInput("Strike reason is required")
        if self.repo.get_staff(staff_id) is None:
            raise NotFound("Staff member not found", payload={"staff_id": staff_id})

        week_start, week_end = week or self.current_week(now)
        strike = self.repo.create_strike(staff_id, week_start, week_end, reason, given_by)
        log.info("strike %s issued to staff %s by %s: %s", strike.id, staff_id, given_by, reason)
        return strike

    def deactivate(self, strike_id: int, now: Optional[datetime] = None) -> QuotaStrike:
        strike = self.repo.get_strike(strike_id)
        if strike is None:
            raise NotFound("Strike not found", payload={"strike_id": strike_id})
        if strike.deactivate(now or utcnow()):
            self.repo.commit()
            log.info("strike %s deactivated (staff %s)", strike.id, strike.staff_id)
        else:
            log.info("strike %s already inactive; nothing to do", strike.id)
        return strike

    def list_active(self, staff_id: int) -> List[QuotaStrike]:
        return self.repo.list_strikes(staff_id, active=True)

    def active_count(self, staff_id: int) -> int:
        return self.repo.count_active_strikes(staff_id)

    def demotion_eligible(self, staff_id: int) -> bool:
        return self.active_count(staff_id) >= self.demotion_threshold

    def mass_strike(
        self,
        staff_ids: Iterable[int],
        reason: str,
        given_by: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        One strike per id, each committed on its own. A failing id is logged
        and counted; the remaining ids are still processed.
        """
        ids = list(staff_ids)
        if not isinstance(reason, str) or not reason.strip():
            raise InvalidInput("Strike reason is required")

        week = self.current_week(now)
        success = 0
        failed: List[Any] = []
        for raw in ids:
            sid = _staff_id(raw)
            if sid is None:
                log.warning("mass strike: skipping non-integer staff id %r", raw)
                failed.append(raw)
                continue
            try:
                self.create(sid, reason, given_by=given_by, week=week)
                success += 1
            except APIError as e:
                log.exception("mass strike: could not strike staff %s: %s", sid, e.message)
                failed.append(sid)
            except SQLAlchemyError:
                self.repo.session.rollback()
                log.exception("mass strike: storage error striking staff %s", sid)
                failed.append(sid)

        log.info("mass strike: %d/%d strikes issued", success, len(ids))
        return {"success_count": success, "total_count": len(ids), "failed_ids": failed}

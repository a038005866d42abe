# stafftrack_api/blueprints/strikes.py
from flask import Blueprint

from stafftrack_api.common.auth import current_issuer
from stafftrack_api.common.errors import InvalidInput
from stafftrack_api.common.http import ok
from stafftrack_api.common.parsing import json_body, pick
from stafftrack_api.services import strike_ledger

bp = Blueprint("strikes", __name__, url_prefix="/api")


@bp.get("/staff/<int:sid>/strikes")
def list_strikes(sid: int):
    """Active strikes, most recent first."""
    ledger = strike_ledger()
    items = ledger.list_active(sid)
    return ok([s.to_dict() for s in items], active_count=len(items),
              demotion_eligible=len(items) >= ledger.demotion_threshold)


@bp.post("/staff/<int:sid>/strikes")
def add_strike(sid: int):
    d = json_body()
    strike = strike_ledger().create(sid, d.get("reason"), given_by=current_issuer())
    return ok(strike.to_dict(), status=201)


@bp.delete("/strikes/<int:strike_id>")
def remove_strike(strike_id: int):
    strike = strike_ledger().deactivate(strike_id)
    return ok(strike.to_dict(), message="Strike removed successfully")


@bp.post("/mass-strike")
def mass_strike():
    """
    POST /api/mass-strike
    {"staff_ids": [1, 2, 3], "reason": "Missed weekly quota"}

    Best effort: each id is struck independently.
    -> {"success_count": 2, "total_count": 3, "failed_ids": [3]}
    """
    d = json_body()
    ids = pick(d, "staff_ids", "staffIds")
    if not isinstance(ids, list):
        raise InvalidInput("staff_ids must be a list")
    result = strike_ledger().mass_strike(ids, d.get("reason"), given_by=current_issuer())
    return ok(result, message="Mass strike completed")

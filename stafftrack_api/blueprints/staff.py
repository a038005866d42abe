# stafftrack_api/blueprints/staff.py
from flask import Blueprint, current_app

from stafftrack_api.common.http import ok
from stafftrack_api.common.parsing import json_body, pick
from stafftrack_api.services import quota_evaluator, roster
from stafftrack_api.services.roblox import client_from_config

bp = Blueprint("staff", __name__, url_prefix="/api")


@bp.get("/staff")
def list_staff():
    """Roster with daily/weekly/all-time hours, quota flag, last activity and strike count."""
    rows = quota_evaluator().staff_with_stats()
    return ok(rows, total=len(rows))


@bp.get("/staff/<int:sid>")
def get_staff(sid: int):
    return ok(roster().detail(sid))


@bp.patch("/staff/<int:sid>")
def update_staff(sid: int):
    d = json_body()
    member = roster().update(
        sid,
        username=pick(d, "username"),
        rank=pick(d, "rank"),
        rank_name=pick(d, "rank_name", "rankName"),
    )
    return ok(member.to_dict())


@bp.post("/staff/<int:sid>/demote")
def demote_staff(sid: int):
    member = roster().demote(sid)
    return ok(member.to_dict(), message="Staff member demoted successfully")


@bp.post("/staff/<int:sid>/adjust-time")
def adjust_time(sid: int):
    """
    POST /api/staff/<id>/adjust-time
    {"hours": 0.5, "reason": "missed webhook"}   hours may be negative
    """
    d = json_body()
    entry = roster().adjust_hours(sid, d.get("hours"), d.get("reason"))
    return ok(entry.to_dict(), status=201, message="Time adjusted successfully")


@bp.post("/track-time")
def track_time():
    """
    Webhook from the game server.
    {"userId": 123, "username": "bob", "rank": 5, "sessionTime": 1800, "action": "leave"}
    sessionTime is in seconds.
    """
    d = json_body()
    entry = roster().record_session(
        user_id=pick(d, "user_id", "userId"),
        username=pick(d, "username"),
        action=pick(d, "action"),
        rank=pick(d, "rank"),
        session_time=pick(d, "session_time", "sessionTime"),
    )
    return ok(entry.to_dict(), status=201, message="Time tracked successfully")


@bp.post("/sync-staff")
def sync_staff():
    cfg = current_app.config
    result = roster().sync(client_from_config(cfg), cfg["ROBLOX_GROUP_ID"])
    return ok(result, message="Staff synced successfully")


@bp.get("/avatar/<user_id>")
def avatar(user_id: str):
    url = client_from_config(current_app.config).avatar_url(user_id)
    return ok({"image_url": url})

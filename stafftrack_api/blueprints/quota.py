# stafftrack_api/blueprints/quota.py
from flask import Blueprint

from stafftrack_api.common.http import ok
from stafftrack_api.common.parsing import json_body, pick
from stafftrack_api.services import quota_evaluator

bp = Blueprint("quota", __name__, url_prefix="/api")


@bp.get("/quota-settings")
def get_settings():
    return ok(quota_evaluator().settings().to_dict())


@bp.put("/quota-settings")
def update_settings():
    """
    PUT /api/quota-settings
    {"weekly_requirement": 2.5, "week_start": 1}   (camelCase accepted too)
    """
    d = json_body()
    settings = quota_evaluator().update_settings(
        weekly_requirement=pick(d, "weekly_requirement", "weeklyRequirement"),
        week_start=pick(d, "week_start", "weekStart"),
    )
    return ok(settings.to_dict())


@bp.get("/quota-status")
def quota_status():
    """Current-week partition: {"completed": [...], "incomplete": [...]}."""
    qe = quota_evaluator()
    data = qe.completion()
    return ok(data, weekly_requirement=float(qe.settings().weekly_requirement))


@bp.post("/quota-status/snapshot")
def snapshot():
    rows = quota_evaluator().snapshot_week()
    return ok([r.to_dict() for r in rows], count=len(rows), status=201)

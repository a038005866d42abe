# stafftrack_api/blueprints/dashboard.py
from flask import Blueprint

from stafftrack_api.common.http import ok
from stafftrack_api.services import aggregator, quota_evaluator, ranker
from stafftrack_api.services.leaderboard import PERIODS

bp = Blueprint("dashboard", __name__, url_prefix="/api")


@bp.get("/dashboard/stats")
def dashboard_stats():
    """
    GET /api/dashboard/stats
    {"total_staff": 12, "quota_met": 7, "avg_weekly_hours": 3.25, "active_today": 4}
    """
    return ok(quota_evaluator().dashboard_stats())


@bp.get("/weekly-activity")
def weekly_activity():
    """Seven {date, day, total_hours} buckets for the current week."""
    return ok(aggregator().weekly_activity())


@bp.get("/leaderboard/<period>")
def leaderboard(period: str):
    """
    GET /api/leaderboard/<daily|weekly|monthly|alltime>

    Every staff member with total_hours for the period, weekly_change
    against the previous equivalent period, and a 1-based position.
    Unknown period -> 400.
    """
    rows = ranker().leaderboard(period)
    return ok(rows, period=period, periods=list(PERIODS))

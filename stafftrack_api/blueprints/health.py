from flask import Blueprint

from stafftrack_api.common.http import ok
from stafftrack_api.common.timeutil import utcnow

bp = Blueprint("health", __name__, url_prefix="/api")


@bp.get("/health")
def health():
    return ok({"status": "ok", "time": utcnow().isoformat()})

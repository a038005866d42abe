# stafftrack_api/common/auth.py
from __future__ import annotations

from flask import current_app
from flask_jwt_extended import verify_jwt_in_request, get_jwt_identity


def current_issuer() -> str:
    """
    Identity recorded as a strike's `given_by`.
    Routes are open; a bearer token only attributes the action. Without one
    the configured placeholder is used.
    """
    verify_jwt_in_request(optional=True)
    ident = get_jwt_identity()
    return str(ident) if ident else current_app.config["DEFAULT_STRIKE_ISSUER"]

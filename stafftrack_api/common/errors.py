# stafftrack_api/common/errors.py
import logging

from flask import Blueprint
from werkzeug.exceptions import HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from stafftrack_api.common.http import fail

log = logging.getLogger(__name__)

bp_errors = Blueprint("errors", __name__)


class APIError(Exception):
    """Custom API Error class."""
    code = "API_ERROR"
    status_code = 400

    def __init__(self, message, code=None, status_code=None, payload=None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.payload = payload


class NotFound(APIError):
    """A staff member or strike id did not resolve."""
    code = "NOT_FOUND"
    status_code = 404


class InvalidInput(APIError):
    """Missing required field or wrong type."""
    code = "INVALID_INPUT"
    status_code = 400


class UpstreamFailure(APIError):
    """The group / thumbnails API could not be reached or answered garbage."""
    code = "UPSTREAM_FAILURE"
    status_code = 502


class StorageFailure(APIError):
    code = "STORAGE_ERROR"
    status_code = 500


@bp_errors.app_errorhandler(APIError)
def _api_error(e: APIError):
    return fail(message=e.message, status=e.status_code, code=e.code, detail=e.payload)


@bp_errors.app_errorhandler(HTTPException)
def _http(e: HTTPException):
    return fail(message=e.description or "HTTP error", status=e.code or 400)


@bp_errors.app_errorhandler(IntegrityError)
def _integrity(e: IntegrityError):
    # 409 for unique/FK violations
    return fail(message="Conflict / integrity error", status=409, code="CONSTRAINT_ERROR",
                detail=str(e.orig) if getattr(e, "orig", None) else str(e))


@bp_errors.app_errorhandler(SQLAlchemyError)
def _storage(e: SQLAlchemyError):
    log.exception("storage error")
    return fail(message="Storage error", status=500, code=StorageFailure.code)


@bp_errors.app_errorhandler(Exception)
def _unhandled(e: Exception):
    log.exception(e)
    return fail(message="Internal Server Error", status=500)

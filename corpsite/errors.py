"""Error taxonomy shared by stores, guards and routes.

Stores raise these; ``register_error_handlers`` turns them into the JSON
envelope so route functions never build error responses by hand.
"""

import logging
import traceback

from flask import current_app
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from .extensions import db
from .responses import error_response

logger = logging.getLogger(__name__)


class APIError(Exception):
    status_code = 500

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.message = message
        self.errors = errors


class ValidationError(APIError):
    """One or more fields failed validation; ``errors`` maps field -> message."""

    status_code = 400

    def __init__(self, errors, message="Validation failed"):
        super().__init__(message, errors=dict(errors))


class NotFoundError(APIError):
    status_code = 404


class ConflictError(APIError):
    status_code = 409


class AuthError(APIError):
    status_code = 401


class ForbiddenError(APIError):
    status_code = 403


def register_error_handlers(app):
    @app.errorhandler(APIError)
    def handle_api_error(error):
        if error.status_code >= 500:
            logger.error("API error: %s", error.message)
        return error_response(error.message, error.status_code, errors=error.errors)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(error):
        db.session.rollback()
        logger.warning("Integrity error: %s", error.orig)
        return error_response("Duplicate value violates a unique constraint", 409)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return error_response(error.description, error.code)

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        db.session.rollback()
        logger.exception("Unhandled error")
        stack = None
        if current_app.debug or current_app.config.get("APP_ENV") == "development":
            stack = traceback.format_exc()
        return error_response("Internal Server Error", 500, error=str(error), stack=stack)

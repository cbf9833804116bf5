"""Access Guard: bearer token -> principal on ``g.current_user``, plus role checks."""

from functools import wraps
import logging

from flask import g
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request

from .errors import AuthError, ForbiddenError
from .extensions import db, jwt
from .models import User
from .responses import error_response

logger = logging.getLogger(__name__)

NO_TOKEN_MESSAGE = "Access denied. No token provided."
EXPIRED_MESSAGE = "Token expired"
INVALID_MESSAGE = "Invalid token"
ADMIN_REQUIRED_MESSAGE = "Access denied. Admin role required."


@jwt.unauthorized_loader
def missing_token(reason):
    return error_response(NO_TOKEN_MESSAGE, 401)


@jwt.expired_token_loader
def expired_token(jwt_header, jwt_payload):
    return error_response(EXPIRED_MESSAGE, 401)


@jwt.invalid_token_loader
def invalid_token(reason):
    logger.info("Rejected token: %s", reason)
    return error_response(INVALID_MESSAGE, 401)


def load_principal():
    """Verify the bearer token and attach the active user it names."""
    verify_jwt_in_request()
    user = db.session.get(User, get_jwt_identity())
    if user is None:
        raise AuthError("User not found")
    if not user.is_active:
        raise AuthError("User account is deactivated")
    g.current_user = user
    return user


def optional_principal():
    """Attach the principal when a valid token is present, otherwise ``None``."""
    if verify_jwt_in_request(optional=True) is None:
        return None
    user = db.session.get(User, get_jwt_identity())
    if user is None or not user.is_active:
        return None
    g.current_user = user
    return user


def auth_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        load_principal()
        return fn(*args, **kwargs)
    return wrapper


def admin_required(fn):
    """``auth_required`` plus the admin role check."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        user = load_principal()
        if user.role != "admin":
            raise ForbiddenError(ADMIN_REQUIRED_MESSAGE)
        return fn(*args, **kwargs)
    return wrapper

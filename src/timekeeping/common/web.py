from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    InvalidStateTransition,
    NoActiveSession,
    ProjectNotFound,
    SessionAlreadyRunning,
    StoreError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (ProjectNotFound, 404),
    (SessionAlreadyRunning, 409),
    (NoActiveSession, 409),
    (InvalidStateTransition, 409),
)


def error_response(exc: Exception):
    if isinstance(exc, StoreError):
        logger.warning("Store unavailable: %s", exc)
        return jsonify({"success": False, "error": "StoreError", "message": "Storage unavailable, please retry"}), 503

    status = 400
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            status = code
            break
    return jsonify({"success": False, "error": type(exc).__name__, "message": str(exc)}), status


def json_errors(view):
    """Turn domain and store errors raised by a view into JSON responses."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except (DomainError, StoreError) as exc:
            return error_response(exc)

    return wrapper


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if session.get("role") != Role.EMPLOYEE.value or "actor_id" not in session:
            return jsonify({"success": False, "error": "AuthenticationError", "message": "Please log in"}), 401
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "role" not in session:
            return jsonify({"success": False, "error": "AuthenticationError", "message": "Please log in"}), 401
        if session.get("role") != Role.ADMIN.value:
            return jsonify({"success": False, "error": "AuthorizationError", "message": "Admin only"}), 403
        return view(*args, **kwargs)

    return wrapper

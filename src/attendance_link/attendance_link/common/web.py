from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, redirect, render_template, request, session, url_for

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    LinkInactiveError,
    NotFoundError,
    OutOfRangeError,
    TokenExpiredError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (NotFoundError, 404),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (LinkInactiveError, 409),
    (TokenExpiredError, 410),
    (OutOfRangeError, 403),
    (ValidationError, 400),
)


def _wants_json() -> bool:
    return request.path.startswith("/api/") or request.is_json or request.accept_mimetypes.best == "application/json"


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            if _wants_json():
                return error_response("Please log in to continue", 401)
            return redirect(url_for("login"))

        if session.get("role") != Role.ADMIN.value:
            if _wants_json():
                return error_response("You do not have permission", 403)
            current_user = {"full_name": session.get("name"), "role": session.get("role")}
            return render_template("403.html", current_user=current_user), 403

        return view(*args, **kwargs)

    return wrapper


def error_response(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def domain_error_response(e: DomainError):
    for exc_type, status in _STATUS_BY_ERROR:
        if isinstance(e, exc_type):
            return error_response(str(e), status)
    return error_response(str(e), 400)

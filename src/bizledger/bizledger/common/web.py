"""Shared pieces of the JSON HTTP layer: session guards, body parsing and
domain-error to status-code mapping."""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    RemoteStoreError,
    ValidationError,
)
from ..sync.serialization import to_storage
from ..users.model import SessionUser

logger = logging.getLogger(__name__)

SESSION_KEY = "user"

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (RemoteStoreError, 502),
)


def ok(data: Any = None, *, message: str = "OK", status: int = 200):
    body = {"success": True, "message": message}
    if data is not None:
        body["data"] = to_storage(data)
    return jsonify(body), status


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def current_user() -> Optional[SessionUser]:
    data = session.get(SESSION_KEY)
    return SessionUser.from_session(data) if data else None


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_user() is None:
            return fail("Please sign in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        user = current_user()
        if user is None:
            return fail("Please sign in to continue", 401)
        if not user.is_admin:
            return fail("You do not have permission for this action", 403)
        return view(*args, **kwargs)

    return wrapper


def permission_required(permission: str):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = current_user()
            if user is None:
                return fail("Please sign in to continue", 401)
            if not user.can(permission):
                return fail("You do not have permission for this action", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        for error_cls, status in _STATUS_BY_ERROR:
            if isinstance(e, error_cls):
                if status >= 500:
                    logger.error("Remote call failed: %s", e, extra={"path": request.path, "method": request.method})
                return fail(str(e), status)
        logger.exception("Unhandled domain error", extra={"path": request.path, "method": request.method})
        return fail("Internal server error", 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return fail(e.description or e.name, e.code or 500)
        logger.exception("Unexpected error", extra={"path": request.path, "method": request.method})
        return fail("Internal server error", 500)

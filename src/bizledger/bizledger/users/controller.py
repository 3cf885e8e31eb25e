from __future__ import annotations

import logging

from flask import Flask, session

from ..common.web import SESSION_KEY, admin_required, current_user, json_body, login_required, ok
from ..container import Container
from ..core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


def _profile_view(profile) -> dict:
    return {
        "uid": profile.uid,
        "name": profile.name,
        "email": profile.email,
        "isAdmin": profile.is_admin,
        "permissions": list(profile.permissions),
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        email = str(data.get("email") or "")
        try:
            user = container.auth_service.authenticate(email, str(data.get("password") or ""))
        except AuthenticationError:
            logger.warning("Sign-in failed", extra={"path": "/api/login"})
            raise
        session.clear()
        session.permanent = bool(data.get("remember"))
        session[SESSION_KEY] = user.to_session()
        logger.info("Signed in", extra={"uid": user.uid})
        return ok(user.to_session(), message="Signed in")

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok(message="Signed out")

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return ok(current_user().to_session())

    @app.route("/api/users", methods=["GET"], endpoint="users_list")
    @admin_required
    def users_list():
        users = container.user_service.list_users(current=current_user())
        return ok([_profile_view(p) for p in users])

    @app.route("/api/users", methods=["POST"], endpoint="users_create")
    @admin_required
    def users_create():
        data = json_body()
        profile = container.user_service.create_user(
            current=current_user(),
            name=str(data.get("name") or ""),
            email=str(data.get("email") or ""),
            password=str(data.get("password") or ""),
            is_admin=bool(data.get("isAdmin")),
            permissions=list(data.get("permissions") or []),
        )
        return ok(_profile_view(profile), message="User created", status=201)

    @app.route("/api/users/<uid>", methods=["PUT"], endpoint="users_update")
    @admin_required
    def users_update(uid: str):
        data = json_body()
        container.user_service.update_user(
            current=current_user(),
            uid=uid,
            name=str(data.get("name") or ""),
            is_admin=bool(data.get("isAdmin")),
            permissions=list(data.get("permissions") or []),
        )
        return ok(message="User updated")

from __future__ import annotations

import logging

from flask import Flask, jsonify, session

from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..web.guards import current_user, json_body, make_guards
from ..web.responses import json_message
from .session import SessionManager

logger = logging.getLogger(__name__)


def register(app: Flask, container) -> None:
    login_required, _ = make_guards(container)
    auth = container.auth_service

    def _session_payload(user) -> dict:
        return {"uid": user.uid, "email": user.email, "name": user.name, "role": user.role.value}

    @app.route("/api/auth/signup", methods=["POST"], endpoint="api_signup")
    def signup():
        data = json_body()
        # self sign-up never grants admin
        role = Role.EMPLOYEE
        user = auth.sign_up(
            email=data.get("email", ""),
            password=data.get("password", ""),
            name=data.get("name", ""),
            role=role,
            department=data.get("department"),
            phone=data.get("phone"),
        )
        SessionManager(session).start(user)
        return jsonify({"user": _session_payload(user), "token": auth.issue_token(user), "message": "Account created"}), 201

    @app.route("/api/auth/login", methods=["POST"], endpoint="api_login")
    def login():
        data = json_body()
        email = (data.get("email") or "").strip()
        password = data.get("password") or ""
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = auth.sign_in(email, password)
        SessionManager(session).start(user, permanent=bool(data.get("remember")))
        logger.info("User %s signed in", user.uid)
        return jsonify({"user": _session_payload(user), "token": auth.issue_token(user), "message": "Signed in"})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="api_logout")
    def logout():
        SessionManager(session).end()
        return json_message("Signed out")

    @app.route("/api/auth/me", methods=["GET"], endpoint="api_me")
    @login_required
    def me():
        return jsonify({"user": _session_payload(current_user())})

from __future__ import annotations

from flask import Flask, jsonify, request

from ..web.guards import current_user, json_body, make_guards
from ..web.responses import json_error, json_message


def register(app: Flask, container) -> None:
    _, admin_required = make_guards(container)
    users = container.user_service

    @app.route("/api/users", methods=["GET"], endpoint="api_users_list")
    @admin_required
    def list_users():
        user_id = request.args.get("userId")
        if user_id:
            return jsonify(users.get_user(user_id).to_dict())
        role = request.args.get("role")
        items = users.list_by_role(role) if role else users.list_users()
        return jsonify([u.to_dict() for u in items])

    @app.route("/api/users", methods=["POST"], endpoint="api_users_create")
    @admin_required
    def create_user():
        data = json_body()
        uid = users.create_user(
            email=data.get("email", ""),
            name=data.get("name", ""),
            role=data.get("role"),
            department=data.get("department"),
            phone=data.get("phone"),
            password=data.get("password"),
            actor_id=current_user().uid,
        )
        return json_message("User created", 201, id=uid)

    @app.route("/api/users", methods=["PUT"], endpoint="api_users_update")
    @admin_required
    def update_user():
        user_id = request.args.get("userId")
        if not user_id:
            return json_error("User ID required", 400)
        users.update_profile(user_id, json_body(), actor_id=current_user().uid)
        return json_message("User updated", id=user_id)

    @app.route("/api/users", methods=["DELETE"], endpoint="api_users_delete")
    @admin_required
    def delete_user():
        user_id = request.args.get("userId")
        if not user_id:
            return json_error("User ID required", 400)
        result = users.delete_user_cascade(uid=user_id, actor_id=current_user().uid)
        return json_message("User deleted", id=user_id, **result.to_dict())

    @app.route("/api/admin/deleteUser", methods=["POST"], endpoint="api_admin_delete_user")
    @admin_required
    def admin_delete_user():
        data = json_body()
        result = users.delete_user_cascade(uid=data.get("uid"), email=data.get("email"), actor_id=current_user().uid)
        return jsonify(result.to_dict())

from __future__ import annotations

from flask import Flask, jsonify

from ..web.guards import current_user, make_guards


def register(app: Flask, container) -> None:
    login_required, _ = make_guards(container)
    notifications = container.notification_service

    @app.route("/api/notifications", methods=["GET"], endpoint="api_notifications")
    @login_required
    def my_notifications():
        me = current_user()
        items = notifications.list_for_recipient(uid=me.uid, email=me.email)
        return jsonify({"notifications": [n.to_dict() for n in items]})

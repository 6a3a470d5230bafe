from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..web.guards import current_user, json_body, make_guards
from ..web.responses import json_message
from .service import parse_months, parse_view


def register(app: Flask, container) -> None:
    login_required, admin_required = make_guards(container)

    @app.route("/api/admin/dashboard", methods=["GET"], endpoint="api_admin_dashboard")
    @admin_required
    def admin_dashboard():
        data = container.admin_dashboard_service.build(
            now_local(),
            view=parse_view(request.args.get("view")),
            delayed_since_months=parse_months(request.args.get("months")),
        )
        return jsonify(data)

    @app.route("/api/admin/reminders", methods=["POST"], endpoint="api_admin_reminders")
    @admin_required
    def send_reminders():
        data = json_body()
        reminders = container.admin_dashboard_service.reminders(
            now_local(),
            view=parse_view(data.get("view")),
            delayed_since_months=parse_months(data.get("months")),
        )
        ids = container.notification_service.send_task_reminders(
            reminders,
            data.get("taskIds") or [],
            sent_by=current_user().uid,
        )
        return json_message("Portal reminders created.", 201, ids=ids, count=len(ids))

    @app.route("/api/employee/dashboard", methods=["GET"], endpoint="api_employee_dashboard")
    @login_required
    def employee_dashboard():
        return jsonify(container.employee_dashboard_service.build(current_user(), now_local()))

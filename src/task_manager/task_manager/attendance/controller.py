from __future__ import annotations

from flask import Flask, jsonify, request

from ..core.exceptions import ValidationError
from ..web.guards import current_user, json_body, make_guards
from ..web.responses import json_message


def register(app: Flask, container) -> None:
    login_required, admin_required = make_guards(container)
    attendance = container.attendance_service
    users = container.user_service

    @app.route("/api/admin/attendance", methods=["GET"], endpoint="api_admin_attendance")
    @admin_required
    def list_entries():
        return jsonify({"entries": [e.to_dict() for e in attendance.list_entries()]})

    @app.route("/api/admin/attendance", methods=["POST"], endpoint="api_admin_attendance_mark")
    @admin_required
    def mark():
        data = json_body()
        user_ids = data.get("userIds")
        if user_ids:
            if not isinstance(user_ids, list):
                raise ValidationError("userIds must be a list")
            targets = [users.get_user(uid) for uid in user_ids]
            ids = attendance.bulk_mark(targets, data.get("date"), data.get("status"))
            return json_message("Attendance saved", ids=ids, count=len(ids))

        if not data.get("userId"):
            raise ValidationError("userId is required")
        entry = attendance.mark(users.get_user(data["userId"]), data.get("date"), data.get("status"))
        return json_message("Attendance saved", entry=entry.to_dict())

    @app.route("/api/employee/attendance", methods=["GET"], endpoint="api_employee_attendance")
    @login_required
    def my_attendance():
        year = request.args.get("year", type=int)
        month = request.args.get("month", type=int)
        summary = attendance.summary_for_user(current_user().uid, year=year, month=month)
        return jsonify({"summary": summary.to_dict()})

from __future__ import annotations

from flask import Flask, jsonify, request

from ..core.exceptions import AuthorizationError
from ..web.guards import current_user, json_body, make_guards
from ..web.responses import json_error, json_message


def register(app: Flask, container) -> None:
    login_required, admin_required = make_guards(container)
    assignments = container.assignment_service

    @app.route("/api/assignments", methods=["GET"], endpoint="api_assignments_list")
    @login_required
    def list_assignments():
        me = current_user()
        employee_id = request.args.get("employeeId") or me.uid
        if employee_id != me.uid and not me.is_admin:
            raise AuthorizationError("Cannot read another employee's assignments")
        return jsonify([a.to_dict() for a in assignments.list_for_employee(employee_id)])

    @app.route("/api/assignments", methods=["POST"], endpoint="api_assignments_create")
    @admin_required
    def create_assignment():
        data = json_body()
        assignment_id = assignments.create_assignment(
            employee_id=data.get("employeeId", ""),
            task_id=data.get("taskId", ""),
            progress=data.get("progress", 0),
            note=data.get("note", ""),
        )
        return json_message("Assignment created", 201, id=assignment_id)

    @app.route("/api/assignments", methods=["PUT"], endpoint="api_assignments_update")
    @login_required
    def update_assignment():
        assignment_id = request.args.get("assignmentId")
        if not assignment_id:
            return json_error("Assignment ID required", 400)
        me = current_user()
        if not me.is_admin and assignments.get_assignment(assignment_id).employee_id != me.uid:
            raise AuthorizationError("Cannot update another employee's assignment")
        data = json_body()
        updated = assignments.update_progress(assignment_id, progress=data.get("progress"), note=data.get("note"))
        return json_message("Assignment updated", id=assignment_id, assignment=updated.to_dict())

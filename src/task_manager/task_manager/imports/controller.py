from __future__ import annotations

from flask import Flask, jsonify, request

from ..core.exceptions import ValidationError
from ..web.guards import current_user, json_body, make_guards
from ..web.responses import json_error
from .rows import read_rows


def register(app: Flask, container) -> None:
    _, admin_required = make_guards(container)

    @app.route("/api/admin/bulkTasks", methods=["POST"], endpoint="api_admin_bulk_tasks")
    @admin_required
    def bulk_tasks():
        rows = json_body().get("tasks")
        if not isinstance(rows, list) or not rows:
            return json_error("No tasks provided", 400)
        result = container.task_service.bulk_create(rows, created_by=current_user().uid)
        return jsonify(result.to_dict())

    @app.route("/api/admin/bulkUpload", methods=["POST"], endpoint="api_admin_bulk_upload")
    @admin_required
    def bulk_upload():
        upload = request.files.get("file")
        if upload is None or not upload.filename:
            return json_error("Please choose a file to upload.", 400)

        kind = (request.form.get("kind") or "tasks").strip().lower()
        rows = read_rows(upload.filename, upload.stream)
        if not rows:
            return json_error("No rows found in file.", 400)

        importer = container.import_service
        if kind == "tasks":
            report = importer.import_tasks(
                rows,
                assigned_to=request.form.get("assignedTo"),
                assigned_email=request.form.get("assignedEmail"),
                created_by=current_user().uid,
            )
        elif kind == "users":
            report = importer.import_users(rows, actor_id=current_user().uid)
        else:
            raise ValidationError("kind must be tasks or users")
        return jsonify(report.to_dict())

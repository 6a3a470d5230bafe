from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..web.guards import current_user, json_body, make_guards
from ..web.responses import json_error, json_message


def register(app: Flask, container) -> None:
    login_required, admin_required = make_guards(container)
    tasks = container.task_service

    def _editable(task_id: str) -> None:
        user = current_user()
        if not user.is_admin:
            tasks.require_assignee(task_id, uid=user.uid, email=user.email)

    @app.route("/api/tasks", methods=["GET"], endpoint="api_tasks_list")
    @login_required
    def list_tasks():
        user = current_user()
        task_id = request.args.get("taskId")
        if task_id:
            _editable(task_id)
            return jsonify(tasks.get_task(task_id).to_dict())

        status = request.args.get("status")
        if user.is_admin:
            items = tasks.list_by_status(status) if status else tasks.list_tasks()
        else:
            items = tasks.list_by_assignee(uid=user.uid, email=user.email)
        return jsonify([t.to_dict() for t in items])

    @app.route("/api/tasks", methods=["POST"], endpoint="api_tasks_create")
    @admin_required
    def create_task():
        task_id = tasks.create_task(json_body(), created_by=current_user().uid)
        return json_message("Task created", 201, id=task_id)

    @app.route("/api/tasks", methods=["PUT"], endpoint="api_tasks_update")
    @admin_required
    def update_task():
        task_id = request.args.get("taskId")
        if not task_id:
            return json_error("Task ID required", 400)
        tasks.update_task(task_id, json_body(), actor_id=current_user().uid)
        return json_message("Task updated", id=task_id)

    @app.route("/api/tasks", methods=["DELETE"], endpoint="api_tasks_delete")
    @admin_required
    def delete_task():
        task_id = request.args.get("taskId")
        if not task_id:
            return json_error("Task ID required", 400)
        tasks.delete_task(task_id, actor_id=current_user().uid)
        return json_message("Task deleted", id=task_id)

    @app.route("/api/tasks/<task_id>/status", methods=["PUT"], endpoint="api_tasks_status")
    @login_required
    def update_status(task_id: str):
        _editable(task_id)
        task = tasks.update_status(task_id, json_body().get("status", ""), actor_id=current_user().uid)
        return json_message("Status updated", id=task_id, task=task.to_dict())

    @app.route("/api/tasks/<task_id>/mark", methods=["PUT"], endpoint="api_tasks_mark")
    @admin_required
    def set_mark(task_id: str):
        task = tasks.set_closing_mark(task_id, json_body().get("mark"), actor_id=current_user().uid, now=now_local())
        return json_message("Closing mark saved", id=task_id, task=task.to_dict())

    @app.route("/api/tasks/<task_id>/actual-status", methods=["PUT"], endpoint="api_tasks_actual_status")
    @login_required
    def set_actual_status(task_id: str):
        _editable(task_id)
        task = tasks.set_actual_status(task_id, json_body().get("actualStatus", ""), actor_id=current_user().uid)
        return json_message("Actual status saved", id=task_id, task=task.to_dict())

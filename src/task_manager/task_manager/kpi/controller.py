from __future__ import annotations

from flask import Flask, jsonify

from ..web.guards import current_user, json_body, make_guards
from ..web.responses import json_message
from .service import average_score


def register(app: Flask, container) -> None:
    login_required, admin_required = make_guards(container)
    kpi = container.kpi_service
    users = container.user_service

    @app.route("/api/admin/kpi", methods=["GET"], endpoint="api_admin_kpi_list")
    @admin_required
    def list_scores():
        return jsonify({"entries": [s.to_dict() for s in kpi.all_scores()], "averages": kpi.averages_by_user()})

    @app.route("/api/admin/kpi", methods=["POST"], endpoint="api_admin_kpi_create")
    @admin_required
    def record_score():
        data = json_body()
        user_id = data.get("userId", "")
        profile = users.get_user(user_id) if user_id else None
        score_id = kpi.record_monthly_score(
            user_id=user_id,
            user_name=data.get("userName") or (profile.display_name if profile else ""),
            user_email=profile.email if profile else data.get("userEmail"),
            month=data.get("month", ""),
            year=data.get("year"),
            score=data.get("score"),
            added_by=current_user().uid,
        )
        return json_message("Score saved", 201, id=score_id)

    @app.route("/api/employee/kpi", methods=["GET"], endpoint="api_employee_kpi")
    @login_required
    def my_scores():
        me = current_user()
        entries = kpi.scores_for_owner(uid=me.uid, email=me.email)
        return jsonify({"entries": [s.to_dict() for s in entries], "average": average_score(entries)})

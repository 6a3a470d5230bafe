from __future__ import annotations

from flask import Flask, jsonify, request

from ..core.constants import DEFAULT_ACTIVITY_LIMIT
from ..web.guards import make_guards


def register(app: Flask, container) -> None:
    _, admin_required = make_guards(container)

    @app.route("/api/admin/activity", methods=["GET"], endpoint="api_admin_activity")
    @admin_required
    def recent_activity():
        limit = request.args.get("limit", default=DEFAULT_ACTIVITY_LIMIT, type=int)
        return jsonify({"logs": [log.to_dict() for log in container.activity_service.recent(limit)]})

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .activity.controller import register as register_activity
from .assignments.controller import register as register_assignments
from .attendance.controller import register as register_attendance
from .common.logging_utils import configure_logging
from .container import Container, build_container
from .dashboard.controller import register as register_dashboard
from .database.bootstrap import apply_schema, ensure_demo_users, list_tables
from .identity.controller import register as register_identity
from .imports.controller import register as register_imports
from .kpi.controller import register as register_kpi
from .notifications.controller import register as register_notifications
from .tasks.controller import register as register_tasks
from .users.controller import register as register_users
from .web.responses import register_error_handlers

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    db_config = getattr(settings, "DB_CONFIG")

    if container is None:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_users(db_config)

        container = build_container(
            db_config=db_config,
            secret_key=app.secret_key,
            token_max_age_seconds=int(getattr(settings, "TOKEN_MAX_AGE_SECONDS", 3600)),
            default_employee_password=getattr(settings, "DEFAULT_EMPLOYEE_PASSWORD", "12345678"),
            reminder_signature=getattr(settings, "REMINDER_SIGNATURE", ""),
        )

    app.extensions["task_manager"] = container
    register_error_handlers(app)

    register_identity(app, container)
    register_users(app, container)
    register_tasks(app, container)
    register_imports(app, container)
    register_kpi(app, container)
    register_attendance(app, container)
    register_assignments(app, container)
    register_notifications(app, container)
    register_activity(app, container)
    register_dashboard(app, container)

    return app

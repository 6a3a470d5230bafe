"""Example: use the service layer directly (no Flask).

Controllers are thin; the rules live in the services, so the same calls work
from a script.
"""

import importlib

from config import get_settings_module

from task_manager.common.datetime_utils import now_local
from task_manager.container import build_container
from task_manager.core.enums import ReminderView


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, secret_key=settings.SECRET_KEY)
    for reminder in container.admin_dashboard_service.reminders(now_local(), view=ReminderView.DUE):
        print(reminder.to_dict())


if __name__ == "__main__":
    main()

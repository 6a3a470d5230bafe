from __future__ import annotations

import argparse
import importlib

from config import get_settings_module

from task_manager.database.bootstrap import ensure_demo_users


def main() -> None:
    parser = argparse.ArgumentParser(description="Create or reset the demo admin and employee accounts.")
    parser.add_argument("--admin-password", default="admin123")
    parser.add_argument("--employee-password", default="12345678")
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    ensure_demo_users(db_config, admin_password=args.admin_password, employee_password=args.employee_password)

    print(
        "OK: Demo accounts ready -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()

import os

from .config import Config

SECRET_KEY = Config.SECRET_KEY
DB_CONFIG = Config.db_config()

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also create the demo admin / employee accounts on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

TOKEN_MAX_AGE_SECONDS = Config.TOKEN_MAX_AGE_SECONDS
DEFAULT_EMPLOYEE_PASSWORD = Config.DEFAULT_EMPLOYEE_PASSWORD
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
REMINDER_SIGNATURE = Config.REMINDER_SIGNATURE

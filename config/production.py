import os

from .config import Config

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")
DB_CONFIG = Config.db_config()

DEBUG = False

AUTO_INIT_DB = Config.AUTO_INIT_DB
AUTO_SEED_DB = Config.AUTO_SEED_DB

TOKEN_MAX_AGE_SECONDS = Config.TOKEN_MAX_AGE_SECONDS
DEFAULT_EMPLOYEE_PASSWORD = Config.DEFAULT_EMPLOYEE_PASSWORD
LOG_LEVEL = Config.LOG_LEVEL
REMINDER_SIGNATURE = Config.REMINDER_SIGNATURE

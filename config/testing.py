from .config import Config

SECRET_KEY = "test-secret"
DB_CONFIG = Config.db_config()

DEBUG = False
TESTING = True

# Tests never touch a real database
AUTO_INIT_DB = False
AUTO_SEED_DB = False

TOKEN_MAX_AGE_SECONDS = 3600
DEFAULT_EMPLOYEE_PASSWORD = "12345678"
LOG_LEVEL = "WARNING"
REMINDER_SIGNATURE = "Regard\nQuality Manager"

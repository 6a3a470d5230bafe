import os


def _flag(name: str, default: str) -> bool:
    return bool(int(os.environ.get(name, default)))


class Config:
    """Values shared by every environment; the env modules override what differs."""

    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key")

    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "task_manager")

    AUTO_INIT_DB = _flag("AUTO_INIT_DB", "0")
    AUTO_SEED_DB = _flag("AUTO_SEED_DB", "0")

    # Bearer tokens
    TOKEN_MAX_AGE_SECONDS = int(os.environ.get("TOKEN_MAX_AGE_SECONDS", "3600"))

    # Password given to accounts created by an admin or by a user import
    DEFAULT_EMPLOYEE_PASSWORD = os.environ.get("DEFAULT_EMPLOYEE_PASSWORD", "12345678")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Appended to portal reminder messages
    REMINDER_SIGNATURE = os.environ.get("REMINDER_SIGNATURE", "Regard\nQuality Manager")

    @classmethod
    def db_config(cls) -> dict:
        return {
            "host": cls.DB_HOST,
            "port": cls.DB_PORT,
            "user": cls.DB_USER,
            "password": cls.DB_PASSWORD,
            "database": cls.DB_NAME,
        }

import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "cleantrack_test"),
}

DEBUG = False
TESTING = True

STORE_BACKEND = os.getenv("STORE_BACKEND", "memory")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

TOP_ADMIN_PASSWORD = "test-admin"

LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")
LOG_JSON = False

SESSION_IDLE_MINUTES = 60
REPORT_TIMEZONE = os.getenv("REPORT_TIMEZONE", "")

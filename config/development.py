import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "cleantrack"),
}

DEBUG = True

# mysql | memory
STORE_BACKEND = os.getenv("STORE_BACKEND", "mysql")

# If enabled, the documents table is created on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed the demo department on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

TOP_ADMIN_PASSWORD = os.getenv("TOP_ADMIN_PASSWORD", "admin")

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_JSON = bool(int(os.getenv("LOG_JSON", "0")))

SESSION_IDLE_MINUTES = int(os.getenv("SESSION_IDLE_MINUTES", "720"))
# Empty means server-local day boundaries.
REPORT_TIMEZONE = os.getenv("REPORT_TIMEZONE", "")

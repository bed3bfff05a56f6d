import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timekeeping_db"),
}

ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "chef123")

# Running-session snapshots survive restarts here (one JSON file per employee)
SNAPSHOT_DIR = os.getenv("SNAPSHOT_DIR", ".timekeeping/sessions")

LUNCH_START = os.getenv("LUNCH_START", "12:00")
LUNCH_END = os.getenv("LUNCH_END", "13:00")
CUTOFF_TIME = os.getenv("CUTOFF_TIME", "17:00")
# 'cutoff' books the cutoff time as end, 'actual' the moment the check ran
CUTOFF_POLICY = os.getenv("CUTOFF_POLICY", "cutoff")
CUTOFF_CHECK_SECONDS = int(os.getenv("CUTOFF_CHECK_SECONDS", "30"))
START_CUTOFF_MONITOR = bool(int(os.getenv("START_CUTOFF_MONITOR", "1")))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

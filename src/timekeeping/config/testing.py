import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timekeeping_test"),
}

ADMIN_PASSWORD = "admin-test"

SNAPSHOT_DIR = os.getenv("SNAPSHOT_DIR", ".timekeeping/test-sessions")

LUNCH_START = "12:00"
LUNCH_END = "13:00"
CUTOFF_TIME = "17:00"
CUTOFF_POLICY = "cutoff"
CUTOFF_CHECK_SECONDS = 30
START_CUTOFF_MONITOR = False

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False

import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "kajian_attendance_test"),
}

SETTINGS_FILE = os.getenv("SETTINGS_FILE", "instance/settings-test.json")
LATE_THRESHOLD_DEFAULT = 15
PROVISIONING_TIMEOUT_SECONDS = 30.0

# Later admin sign-ups must present this code; the first admin needs none
ADMIN_SIGNUP_CODE = "test-admin-code"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
LOG_DIR = None

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

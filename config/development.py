import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "kajian_attendance"),
}

# Operator-editable settings (late threshold); stands in for browser local storage
SETTINGS_FILE = os.getenv("SETTINGS_FILE", "instance/settings.json")
LATE_THRESHOLD_DEFAULT = int(os.getenv("LATE_THRESHOLD_DEFAULT", "15"))
PROVISIONING_TIMEOUT_SECONDS = float(os.getenv("PROVISIONING_TIMEOUT_SECONDS", "30"))

# Later admin sign-ups must present this code; the first admin needs none
ADMIN_SIGNUP_CODE = os.getenv("ADMIN_SIGNUP_CODE", "ADMIN2024")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_DIR = os.getenv("LOG_DIR", "logs")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

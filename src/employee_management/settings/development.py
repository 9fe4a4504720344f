import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "employee_management"),
}

DEBUG = True

# If enabled, the app applies schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
AI_TIMEOUT_SECONDS = float(os.getenv("AI_TIMEOUT_SECONDS", "20"))

INVITATION_CODE_MAX_ATTEMPTS = int(os.getenv("INVITATION_CODE_MAX_ATTEMPTS", "5"))
DELETION_GRACE_DAYS = int(os.getenv("DELETION_GRACE_DAYS", "10"))

# "upload": frame posted by the browser; "opencv": camera attached to this host (kiosk)
FRAME_SOURCE = os.getenv("FRAME_SOURCE", "upload")
CAMERA_DEVICE_INDEX = int(os.getenv("CAMERA_DEVICE_INDEX", "0"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

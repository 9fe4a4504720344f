import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "employee_management_test"),
}

DEBUG = False
TESTING = True

AUTO_INIT_DB = False

GEMINI_API_KEY = ""
GEMINI_MODEL = "gemini-2.5-flash"
AI_TIMEOUT_SECONDS = 5.0

INVITATION_CODE_MAX_ATTEMPTS = 5
DELETION_GRACE_DAYS = 10

FRAME_SOURCE = "upload"
CAMERA_DEVICE_INDEX = 0

LOG_LEVEL = "WARNING"

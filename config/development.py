import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///attendance.db")

# Hard ceiling for one uploaded file
MAX_UPLOAD_MB = int(os.getenv("MAX_UPLOAD_MB", "10"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

DEBUG = True

# Create missing tables on startup (idempotent)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

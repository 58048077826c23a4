import os

SECRET_KEY = "test-secret"

# In-memory store, one per app instance
DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite://")

MAX_UPLOAD_MB = 1

LOG_LEVEL = "WARNING"

DEBUG = False
TESTING = True

AUTO_INIT_DB = True

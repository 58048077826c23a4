import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")


def _database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    if not os.getenv("DB_HOST"):
        return "sqlite:///attendance.db"
    return "mysql+mysqlconnector://{user}:{password}@{host}:{port}/{name}".format(
        user=os.getenv("DB_USER", "root"),
        password=os.getenv("DB_PASSWORD", ""),
        host=os.getenv("DB_HOST"),
        port=int(os.getenv("DB_PORT", "3306")),
        name=os.getenv("DB_NAME", "attendance_db"),
    )


DATABASE_URL = _database_url()

MAX_UPLOAD_MB = int(os.getenv("MAX_UPLOAD_MB", "10"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

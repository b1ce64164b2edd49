import os
from pathlib import Path
BASE_DIR = Path(__file__).resolve().parent

class Config:
    SECRET_KEY = os.environ.get("NESTTASK_SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "NESTTASK_DATABASE_URL", f"sqlite:///{(BASE_DIR / 'nesttask.db').as_posix()}")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CREATE_TABLES = True
    LOG_LEVEL = os.environ.get("NESTTASK_LOG_LEVEL", "INFO")
    TEACHER_PHONE_PLACEHOLDER = "N/A"  # teachers.phone is NOT NULL
    DEFAULT_PASSWORD = "123456"

class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    LOG_LEVEL = "DEBUG"

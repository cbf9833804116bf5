import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()  # Load variables from the .env file


def _env_flag(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'corpsite-default-secret-change-me')
    APP_ENV = os.getenv('APP_ENV', 'production')
    DEBUG = APP_ENV == 'development'
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    DB_HOST = os.getenv('DB_HOST')
    DB_USER = os.getenv('DB_USER')
    DB_PASSWORD = os.getenv('DB_PASSWORD')
    DB_NAME = os.getenv('DB_NAME')

    # DATABASE_URL wins, otherwise build a MySQL connection string (PyMySQL driver)
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL') or (
        f"mysql+pymysql://{DB_USER}@{DB_HOST}/{DB_NAME}"
        if not DB_PASSWORD else
        f"mysql+pymysql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}/{DB_NAME}"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False  # disables overhead warning
    AUTO_CREATE_TABLES = _env_flag('AUTO_CREATE_TABLES', True)

    JWT_SECRET_KEY = os.getenv('JWT_SECRET', SECRET_KEY)
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=int(os.getenv('JWT_EXPIRES_HOURS', '168')))

    CLIENT_URL = os.getenv('CLIENT_URL', 'http://localhost:3000')
    PORT = int(os.getenv('PORT', '4041'))

    UPLOAD_FOLDER = os.getenv('UPLOAD_FOLDER', 'uploads')
    MAX_RESUME_SIZE = 5 * 1024 * 1024
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024

    DASHBOARD_WORKERS = int(os.getenv('DASHBOARD_WORKERS', '8'))

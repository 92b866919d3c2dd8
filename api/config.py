"""
Environment-aware configuration.
Every value can be overridden from the environment (or a .env file).
"""
import os
from dotenv import load_dotenv

load_dotenv()  # Read .env if present


def _bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")  # Set a strong key in production
    DEBUG = False
    TESTING = False
    APP_NAME = os.getenv("APP_NAME", "Blog API")
    APP_ENV = os.getenv("APP_ENV", "dev")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    # CORS: in dev we usually allow '*', in prod supply a comma-separated list in env
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///blog.db")
    SQL_ECHO = _bool("SQL_ECHO", "false")

    # tokens: two independent signing secrets and lifetimes (seconds)
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    TOKENS_ACCESS_SECRET = os.getenv("TOKENS_ACCESS_SECRET", "dev-access-secret-change-me-0123456789")
    TOKENS_ACCESS_EXPIRATION = int(os.getenv("TOKENS_ACCESS_EXPIRATION", "86400"))  # 1 day
    TOKENS_REFRESH_SECRET = os.getenv("TOKENS_REFRESH_SECRET", "dev-refresh-secret-change-me-0123456789")
    TOKENS_REFRESH_EXPIRATION = int(os.getenv("TOKENS_REFRESH_EXPIRATION", "604800"))  # 1 week

    MAX_FAILED_LOGIN_ATTEMPTS = int(os.getenv("MAX_FAILED_LOGIN_ATTEMPTS", "5"))
    # links in recovery / verification mails point here
    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

    MAIL_SERVICE_HOST = os.getenv("MAIL_SERVICE_HOST")
    MAIL_SERVICE_PORT = int(os.getenv("MAIL_SERVICE_PORT", "587"))
    MAIL_SERVICE_EMAIL = os.getenv("MAIL_SERVICE_EMAIL")
    MAIL_SERVICE_PASSWORD = os.getenv("MAIL_SERVICE_PASSWORD")
    MAIL_SERVICE_USE_TLS = _bool("MAIL_SERVICE_USE_TLS", "true")
    # internal errors are mailed here when set
    OPERATOR_EMAIL = os.getenv("OPERATOR_EMAIL")

    # default user created by `flask --app api seed-user`
    USER_EMAIL = os.getenv("USER_EMAIL")
    USER_PASSWORD = os.getenv("USER_PASSWORD")
    USER_FIRSTNAME = os.getenv("USER_FIRSTNAME", "Admin")
    USER_LASTNAME = os.getenv("USER_LASTNAME", "User")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")


class TestingConfig(BaseConfig):
    TESTING = True
    APP_ENV = "test"
    DATABASE_URL = "sqlite://"
    LOG_LEVEL = "WARNING"
    TOKENS_ACCESS_SECRET = "test-access-secret-0123456789abcdef0123"
    TOKENS_REFRESH_SECRET = "test-refresh-secret-0123456789abcdef012"
    TOKENS_ACCESS_EXPIRATION = 86400
    TOKENS_REFRESH_EXPIRATION = 604800
    MAX_FAILED_LOGIN_ATTEMPTS = 5
    FRONTEND_URL = "http://frontend.test"
    MAIL_SERVICE_HOST = None
    OPERATOR_EMAIL = None


class ProductionConfig(BaseConfig):
    DEBUG = False


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/test/prod).
    """
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig

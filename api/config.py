"""
Environment-aware configuration.
Secrets and token lifetimes come from the environment (.env is read if
present). Access and refresh tokens are signed with two independent secrets;
production refuses to start without both.
"""
import os
from dotenv import load_dotenv
from datetime import timedelta

load_dotenv()  # Read .env if present


def _seconds(name: str, default: int) -> timedelta:
    return timedelta(seconds=int(os.getenv(name, str(default))))


class BaseConfig:
    DEBUG = False
    TESTING = False
    # CORS: in dev we usually allow '*', in prod supply a comma-separated list in env
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    APP_ENV = os.getenv("APP_ENV", "dev")
    # jwt configurations
    ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET")
    REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET")
    JWT_ALGORITHM = "HS256"
    JWT_ISSUER = os.getenv("JWT_ISSUER") or None
    ACCESS_TOKEN_EXPIRES = _seconds("ACCESS_TOKEN_EXPIRES_SECONDS", 15 * 60)
    REFRESH_TOKEN_EXPIRES = _seconds("REFRESH_TOKEN_EXPIRES_SECONDS", 7 * 24 * 3600)
    # users loaded into the identity store at startup
    SEED_USERS = []


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    # In dev, propagate exceptions so our error handler has full context
    PROPAGATE_EXCEPTIONS = True
    ACCESS_TOKEN_SECRET = BaseConfig.ACCESS_TOKEN_SECRET or "dev-access-secret-change-me-0123456789"
    REFRESH_TOKEN_SECRET = BaseConfig.REFRESH_TOKEN_SECRET or "dev-refresh-secret-change-me-0123456789"
    SEED_USERS = [{"id": "1", "username": "alice", "role": "user"}]


class TestingConfig(BaseConfig):
    TESTING = True
    ACCESS_TOKEN_SECRET = "test-access-secret-for-automation-only-42"
    REFRESH_TOKEN_SECRET = "test-refresh-secret-for-automation-only-42"
    ACCESS_TOKEN_EXPIRES = timedelta(minutes=15)
    REFRESH_TOKEN_EXPIRES = timedelta(days=7)
    SEED_USERS = [
        {"id": "1", "username": "alice", "role": "user"},
        {"id": "2", "username": "root", "role": "admin"},
        {"id": "3", "username": "mallory", "role": "user", "active": False},
    ]


class ProductionConfig(BaseConfig):
    DEBUG = False


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/test/prod).
    """
    if name:
        name = name.lower()
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig

"""Environment-driven configuration classes for channelhub."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from dotenv import load_dotenv

# Selects the config class: development | testing | production
ENV_VAR: Final[str] = "APP_ENV"

_TRUTHY = frozenset({"1", "true", "yes", "y", "on"})

load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Read a flag such as ``AUTH_COOKIE_SECURE=yes``.

    Parameters
    ----------
    name: str
        Variable name.
    default: bool, optional
        Returned when the variable is absent.

    Returns
    -------
    bool
        Whether the value is one of ``1/true/yes/y/on`` (case-insensitive).
    """
    raw = os.getenv(name)
    return default if raw is None else raw.strip().lower() in _TRUTHY


def env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    return int(raw) if raw else default


class BaseConfig:
    """Settings shared by every environment.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Mount point of the versioned blueprints.
    ACCESS_TOKEN_SECRET / REFRESH_TOKEN_SECRET: str
        Separate HMAC keys, so a token of one kind never verifies as the other.
    ACCESS_TOKEN_EXPIRY / REFRESH_TOKEN_EXPIRY: int
        Lifetimes in seconds (15 minutes and 10 days by default).
    JWT_ALGORITHM: str
        Signature algorithm used for both token kinds.
    PASSWORD_HASH_METHOD / PASSWORD_SALT_LENGTH:
        Arguments to :func:`werkzeug.security.generate_password_hash`.
    MEDIA_ROOT / MEDIA_BASE_URL: str
        Where avatars and covers are written and the URL prefix they are
        served from.
    UPLOAD_TEMP_DIR: str
        Multipart uploads land here before being handed to the media store.
    AUTH_COOKIE_SECURE / AUTH_COOKIE_SAMESITE:
        Attributes of the ``accessToken`` and ``refreshToken`` cookies.
    CORS_ORIGINS: str
        Comma-separated origin allow list; blank or ``*`` allows any.
    """

    API_BASE_PREFIX = "/api"
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")

    # Tokens and passwords
    ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET", "CHANGE_ME_ACCESS")
    ACCESS_TOKEN_EXPIRY = env_int("ACCESS_TOKEN_EXPIRY", 15 * 60)
    REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET", "CHANGE_ME_REFRESH")
    REFRESH_TOKEN_EXPIRY = env_int("REFRESH_TOKEN_EXPIRY", 10 * 24 * 60 * 60)
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "pbkdf2:sha256:600000")
    PASSWORD_SALT_LENGTH = env_int("PASSWORD_SALT_LENGTH", 16)

    AUTH_COOKIE_SECURE = env_bool("AUTH_COOKIE_SECURE", True)
    AUTH_COOKIE_SAMESITE = os.getenv("AUTH_COOKIE_SAMESITE", "Lax")

    # Uploads
    MEDIA_ROOT = os.getenv("MEDIA_ROOT", "./public/media")
    MEDIA_BASE_URL = os.getenv("MEDIA_BASE_URL", "http://localhost:8000/media")
    UPLOAD_TEMP_DIR = os.getenv("UPLOAD_TEMP_DIR", "./public/temp")
    MAX_CONTENT_LENGTH = env_int("MAX_CONTENT_LENGTH", 16 * 1024 * 1024)

    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")

    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Local runs: debug on, cookies allowed over plain HTTP."""

    DEBUG = env_bool("FLASK_DEBUG", True)
    AUTH_COOKIE_SECURE = env_bool("AUTH_COOKIE_SECURE", False)
    CORS_MAX_AGE = 600


class TestingConfig(BaseConfig):
    """Test suite settings.

    In-memory SQLite unless ``TEST_DATABASE_URL`` points elsewhere, fixed
    token secrets and a low-cost hash so password checks stay fast.
    """

    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
    ACCESS_TOKEN_SECRET = "test-access-secret"
    REFRESH_TOKEN_SECRET = "test-refresh-secret"
    AUTH_COOKIE_SECURE = False


class ProductionConfig(BaseConfig):
    SQLALCHEMY_ECHO = False


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the class named by ``APP_ENV``, :class:`DevelopmentConfig` if unknown."""
    return CONFIG_MAP.get(os.getenv(ENV_VAR, "development").strip().lower(), DevelopmentConfig)

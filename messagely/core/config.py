"""
Configuration helpers for the Messagely backend.

Routers, services and the database layer read their settings through
get_settings() instead of fetching os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os

_DEV_SECRET_KEY = "messagely-dev-secret-key-do-not-use-in-production"


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    database_url: str
    secret_key: str
    password_work_factor: int
    session_ttl_seconds: int
    log_level: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    app_env = (os.getenv("APP_ENV") or "dev").lower()
    secret_key = os.getenv("SECRET_KEY", "")
    if not secret_key:
        if app_env == "prod":
            raise RuntimeError("SECRET_KEY must be configured when APP_ENV=prod.")
        secret_key = _DEV_SECRET_KEY

    return Settings(
        app_env=app_env,
        database_url=os.getenv("DATABASE_URL", "sqlite:///./messagely.db"),
        secret_key=secret_key,
        password_work_factor=max(1, _int(os.getenv("PASSWORD_WORK_FACTOR", "3"), 3)),
        session_ttl_seconds=max(0, _int(os.getenv("SESSION_TTL_SECONDS", "86400"), 86400)),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )

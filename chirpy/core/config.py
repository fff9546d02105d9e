"""
Configuration helpers for the Chirpy backend.

Routers/services read a Settings object instead of fetching os.environ
directly, so tests can swap values with monkeypatch + cache_clear().
"""

from dataclasses import dataclass
from functools import lru_cache
import os

_DEV_JWT_SECRET = "insecure-dev-secret-do-not-use-in-prod"


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    database_path: str
    jwt_secret: str
    access_token_ttl_seconds: int
    refresh_token_ttl_days: int
    polka_api_key: str
    static_dir: str
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
    jwt_secret = os.getenv("JWT_SECRET", "")
    if not jwt_secret:
        if app_env == "prod":
            raise RuntimeError("JWT_SECRET must be set in production.")
        jwt_secret = _DEV_JWT_SECRET

    return Settings(
        app_env=app_env,
        database_path=os.getenv("DATABASE_PATH", "database.json"),
        jwt_secret=jwt_secret,
        access_token_ttl_seconds=_int(os.getenv("ACCESS_TOKEN_TTL_SECONDS", "3600"), 3600),
        refresh_token_ttl_days=_int(os.getenv("REFRESH_TOKEN_TTL_DAYS", "60"), 60),
        polka_api_key=os.getenv("POLKA_API_KEY", ""),
        static_dir=os.getenv("STATIC_DIR", "static"),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )

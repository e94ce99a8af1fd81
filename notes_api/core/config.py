"""
Configuration helpers for the notes backend.

Routers/services read settings through ``get_settings()`` instead of fetching
os.environ directly, so tests can point the app at a temporary data directory
and call ``get_settings.cache_clear()``.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os
import secrets

DATA_DIR = Path(__file__).resolve().parents[2] / "data"


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    db_path: Path
    uploads_dir: Path
    jwt_secret: str
    token_ttl_days: int
    max_upload_bytes: int
    recover_corrupt_db: bool
    public_base_url: str
    log_level: str
    auth_rate_limit: int
    auth_rate_window_seconds: int
    trust_proxy_headers: bool


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    app_env = (os.getenv("APP_ENV") or "dev").lower()
    jwt_secret = os.getenv("JWT_SECRET", "")
    if not jwt_secret:
        if app_env == "prod":
            raise RuntimeError("JWT_SECRET must be configured in production.")
        # tokens issued with this key do not survive a restart
        jwt_secret = secrets.token_urlsafe(32)

    return Settings(
        app_env=app_env,
        db_path=Path(os.getenv("NOTES_DB_PATH") or DATA_DIR / "database.json"),
        uploads_dir=Path(os.getenv("NOTES_UPLOADS_DIR") or DATA_DIR / "uploads"),
        jwt_secret=jwt_secret,
        token_ttl_days=_int(os.getenv("TOKEN_TTL_DAYS", "30"), 30),
        max_upload_bytes=_int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)), 5 * 1024 * 1024),
        recover_corrupt_db=_bool(os.getenv("NOTES_RECOVER_CORRUPT_DB"), False),
        public_base_url=os.getenv("PUBLIC_BASE_URL", "http://localhost:8000").rstrip("/"),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        auth_rate_limit=_int(os.getenv("AUTH_RATE_LIMIT", "10"), 10),
        auth_rate_window_seconds=_int(os.getenv("AUTH_RATE_WINDOW_SECONDS", "60"), 60),
        trust_proxy_headers=_bool(os.getenv("TRUST_PROXY_HEADERS"), False),
    )

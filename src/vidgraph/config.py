import os
from typing import List


def _split_env_list(value: str) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item and item.strip()]


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default) in {"1", "true", "True"}


class Settings:
    """Centralized application settings loaded from environment variables.

    Database, identity, pagination and visibility knobs all live here so the
    routers and the core read one source of truth.
    """

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")
    DB_AUTO_CREATE: bool = _env_flag("DB_AUTO_CREATE")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # JWT / Auth
    SECRET_KEY: str = os.getenv("SECRET_KEY", "")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
    JWT_ISSUER: str | None = os.getenv("JWT_ISSUER") or None
    JWT_AUDIENCE: str | None = os.getenv("JWT_AUDIENCE") or None

    # CORS
    # Comma-separated list, e.g. "http://localhost:3000,http://localhost:5173"
    _cors_origins_env: str = os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://localhost:5173,http://localhost:8000",
    )
    CORS_ORIGINS: List[str] = _split_env_list(_cors_origins_env)

    # Rate limiting (slowapi limit string)
    RATE_LIMIT: str = os.getenv("RATE_LIMIT", "100/minute")
    RATE_LIMIT_ENABLED: bool = _env_flag("RATE_LIMIT_ENABLED", "1")

    # Pagination
    DEFAULT_PAGE_LIMIT: int = int(os.getenv("DEFAULT_PAGE_LIMIT", "10"))
    MAX_PAGE_LIMIT: int = int(os.getenv("MAX_PAGE_LIMIT", "100"))

    # Playlist totals count unpublished videos even when they are hidden
    # from the viewer. Set to 0 to compute totals over visible videos only.
    PLAYLIST_TOTALS_INCLUDE_HIDDEN: bool = _env_flag("PLAYLIST_TOTALS_INCLUDE_HIDDEN", "1")


settings = Settings()

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.engine import URL


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - DATABASE_URL: full SQLAlchemy URL; overrides the DB_* parts when set
    - DB_HOST, DB_PORT, DB_USER, DB_PASSWORD, DB_NAME: MySQL connection parts
    - DB_POOL_SIZE: fixed capacity of the connection pool (default 10)
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - LOG_LEVEL: root log level name (default INFO)
    - HOST, PORT: bind address for the HTTP server
    """

    db_host: str
    db_port: int
    db_user: str
    db_password: str
    db_name: str
    db_pool_size: int
    database_url_override: Optional[str]
    cors_allow_origins: List[str]
    log_level: str
    host: str
    port: int

    @property
    def database_url(self) -> str:
        """SQLAlchemy URL for the configured database."""
        if self.database_url_override:
            return self.database_url_override
        url = URL.create(
            "mysql+pymysql",
            username=self.db_user,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )
        return url.render_as_string(hide_password=False)


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_int(value: str, default: int, minimum: int = 0) -> int:
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return max(parsed, minimum)


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    url_override = os.getenv("DATABASE_URL")
    return Settings(
        db_host=_get_env("DB_HOST", "localhost").strip(),
        db_port=_parse_int(_get_env("DB_PORT", "3306"), 3306, minimum=1),
        db_user=_get_env("DB_USER", "root").strip(),
        db_password=os.getenv("DB_PASSWORD", ""),
        db_name=_get_env("DB_NAME", "task_tracker").strip(),
        db_pool_size=_parse_int(_get_env("DB_POOL_SIZE", "10"), 10, minimum=1),
        database_url_override=url_override.strip() if url_override and url_override.strip() else None,
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
        host=_get_env("HOST", "0.0.0.0").strip(),
        port=_parse_int(_get_env("PORT", "3000"), 3000, minimum=1),
    )

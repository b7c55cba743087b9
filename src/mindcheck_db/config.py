"""Database configuration — reads connection parameters from environment.

Supports two modes:
1. A single ``DATABASE_URL`` env var (takes precedence).
2. Individual ``PG_HOST``, ``PG_PORT``, ``PG_USER``, ``PG_PASSWORD``,
   ``PG_DATABASE`` env vars (convenient for docker-compose).

Every URL is normalised to the asyncpg driver; the application engine and
the Alembic migrations both connect through it.
"""

import os
from dataclasses import dataclass

ASYNC_SCHEME = "postgresql+asyncpg://"


def _build_url_from_parts() -> str:
    host = os.getenv("PG_HOST", "localhost")
    port = os.getenv("PG_PORT", "5432")
    user = os.getenv("PG_USER", "mindcheck")
    password = os.getenv("PG_PASSWORD", "mindcheck")
    database = os.getenv("PG_DATABASE", "mindcheck")
    return f"{ASYNC_SCHEME}{user}:{password}@{host}:{port}/{database}"


def get_async_url() -> str:
    """Return an asyncpg connection URL for the async SQLAlchemy engine."""
    url = os.getenv("DATABASE_URL")
    if not url:
        return _build_url_from_parts()
    for scheme in ("postgresql://", "postgres://"):
        if url.startswith(scheme):
            return ASYNC_SCHEME + url[len(scheme):]
    return url


@dataclass(frozen=True)
class DatabaseSettings:
    """Connection URL and pool tuning for one :class:`~mindcheck_db.engine.Database`."""

    url: str
    pool_size: int = 5
    max_overflow: int = 10
    echo: bool = False


def load_database_settings() -> DatabaseSettings:
    """Build settings from ``DATABASE_URL`` / ``PG_*`` env vars."""
    return DatabaseSettings(
        url=get_async_url(),
        pool_size=int(os.getenv("PG_POOL_SIZE", "5")),
        max_overflow=int(os.getenv("PG_MAX_OVERFLOW", "10")),
        echo=os.getenv("PG_ECHO", "").lower() in ("1", "true", "yes"),
    )

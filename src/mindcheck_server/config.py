"""Server configuration — reads settings from environment variables.

All settings have sensible defaults for local development.  In production
the values are typically overridden via env vars or a ``.env`` file.
"""

import os
from dataclasses import dataclass, field

from mindcheck_assessment.constants import DEFAULT_PROGRESS_CACHE_USERS

# --- Pagination & cleanup defaults ---
# Read at import time so FastAPI Query() defaults can reference them.
DEFAULT_PAGE_LIMIT = int(os.getenv("DEFAULT_PAGE_LIMIT", "20"))
MAX_PAGE_LIMIT = int(os.getenv("MAX_PAGE_LIMIT", "100"))
STALE_SESSION_DAYS = int(os.getenv("STALE_SESSION_DAYS", "30"))


@dataclass(frozen=True)
class ServerSettings:
    """Immutable server configuration read from environment at startup."""

    # Network
    host: str = "0.0.0.0"
    port: int = 8080

    # CORS — comma-separated origins, or "*" for wide-open dev mode
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    # Question bank YAML (None → packaged data/question_bank.yaml)
    question_bank_path: str | None = None

    # Logging
    log_level: str = "INFO"

    # Trusted proxy secret — when set, every request that carries
    # X-User-ID must also carry X-Proxy-Secret matching this value.
    trusted_proxy_secret: str | None = None

    # Remote schedule-session function (empty → booking disabled)
    scheduler_url: str = ""
    scheduler_api_key: str = ""
    scheduler_timeout: float = 30.0

    # Users whose progress stays cached in the ProgressFeed
    progress_cache_users: int = DEFAULT_PROGRESS_CACHE_USERS


def load_settings() -> ServerSettings:
    """Build settings from ``SERVER_*`` and related environment variables."""
    raw_origins = os.getenv("SERVER_CORS_ORIGINS", "*")
    origins = [o.strip() for o in raw_origins.split(",") if o.strip()]

    return ServerSettings(
        host=os.getenv("SERVER_HOST", "0.0.0.0"),
        port=int(os.getenv("SERVER_PORT", "8080")),
        cors_origins=origins,
        question_bank_path=os.getenv("QUESTION_BANK_PATH") or None,
        log_level=os.getenv("SERVER_LOG_LEVEL", "INFO").upper(),
        trusted_proxy_secret=os.getenv("TRUSTED_PROXY_SECRET") or None,
        scheduler_url=os.getenv("SCHEDULER_URL", ""),
        scheduler_api_key=os.getenv("SCHEDULER_API_KEY", ""),
        scheduler_timeout=float(os.getenv("SCHEDULER_TIMEOUT", "30")),
        progress_cache_users=int(
            os.getenv("PROGRESS_CACHE_USERS", str(DEFAULT_PROGRESS_CACHE_USERS))
        ),
    )

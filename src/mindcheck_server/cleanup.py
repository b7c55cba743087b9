"""Stale-session CLI — ``mindcheck-cleanup``.

Connects to the database and deletes assessment sessions that have not been
touched for a number of days.  Intended for cron jobs or one-off
maintenance.  Stored assessments and progress entries are never touched.

Examples::

    # Delete unfinished sessions idle for 30 days ($STALE_SESSION_DAYS)
    mindcheck-cleanup

    # Delete every session, finished or not, idle for 7 days
    mindcheck-cleanup --days 7 --include-complete
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime, timedelta, timezone

from mindcheck_server.config import STALE_SESSION_DAYS

logger = logging.getLogger(__name__)


async def run_cleanup(
    *,
    days: int = STALE_SESSION_DAYS,
    include_complete: bool = False,
    now: datetime | None = None,
) -> int:
    """Delete stale sessions and return the number of rows removed.

    Creates its own database session, runs the repository bulk delete and
    commits.
    """
    # Lazy imports to avoid loading DB machinery at module import time
    from mindcheck_db.engine import Database
    from mindcheck_db.repository import SessionRepository

    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(days=days)
    database = Database()
    repo = SessionRepository()

    try:
        async with database.session() as db:
            affected = await repo.delete_stale(
                db, older_than=cutoff, include_complete=include_complete,
            )
            await db.commit()

        logger.info(
            "Cleanup complete: affected_rows=%d, days=%d, include_complete=%s",
            affected, days, include_complete,
        )
        return affected
    finally:
        await database.dispose()


def cli() -> None:
    """Console-script entry point: ``mindcheck-cleanup``."""
    parser = argparse.ArgumentParser(
        prog="mindcheck-cleanup",
        description="Delete stale assessment sessions from the database.",
    )
    parser.add_argument(
        "--days",
        type=int,
        default=STALE_SESSION_DAYS,
        help="Idle threshold in days (default: $STALE_SESSION_DAYS, or 30)",
    )
    parser.add_argument(
        "--include-complete",
        action="store_true",
        default=False,
        help="Also delete completed sessions",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO)",
    )

    args = parser.parse_args()
    if args.days < 0:
        parser.error("--days must be >= 0")

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    affected = asyncio.run(
        run_cleanup(days=args.days, include_complete=args.include_complete)
    )

    print(f"Deleted sessions: {affected}")
    sys.exit(0)

"""Async SQLAlchemy engine and session factory.

A :class:`Database` is constructed explicitly by the application at
startup, passed to whatever needs a session, and disposed at shutdown.
There is no module-level engine.
"""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from mindcheck_db.config import DatabaseSettings, load_database_settings

logger = logging.getLogger(__name__)


class Database:
    """Owns one connection pool and its session factory.

    Args:
        settings: connection URL and pool tuning; read from env when omitted
    """

    def __init__(self, settings: DatabaseSettings | None = None) -> None:
        self.settings = settings or load_database_settings()
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        """Return (and lazily create) the async engine."""
        if self._engine is None:
            self._engine = create_async_engine(
                self.settings.url,
                echo=self.settings.echo,
                pool_size=self.settings.pool_size,
                max_overflow=self.settings.max_overflow,
            )
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return self._session_factory

    def session(self) -> AsyncSession:
        """Open a new ``AsyncSession`` (use as an async context manager)."""
        return self.session_factory()

    async def dispose(self) -> None:
        """Dispose the connection pool (call on app shutdown)."""
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("Database engine disposed")
        self._engine = None
        self._session_factory = None

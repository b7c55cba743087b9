"""Alembic environment for the mindcheck schema.

Migrations run over the same asyncpg driver as the application: the URL
comes from :func:`load_database_settings`, and the online runner opens an
async connection and hands Alembic a synchronous facade via ``run_sync``.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from mindcheck_db.config import load_database_settings
from mindcheck_db.models import Base

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# ORM metadata, populated by importing mindcheck_db.models
target_metadata = Base.metadata
database_url = load_database_settings().url


def run_migrations_offline() -> None:
    """Emit the migration SQL to stdout instead of executing it."""
    context.configure(
        url=database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _apply(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    engine = create_async_engine(database_url, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_apply)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())

"""
Alembic Migration Environment
==============================

What:  Runs the blog schema migrations through the async engine.

Database URL, first match wins:
    1. `alembic -x database_url=...`  (the same per-run override run_server() takes)
    2. blog_api.config.settings.database_url  (DATABASE_URL / .env)
The sqlalchemy.url in alembic.ini is never used.

SQLite runs in batch mode, since it cannot ALTER constraints in place.
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine
from alembic import context

from blog_api.config import settings
from blog_api.database import Base

# Registers authors, posts and comments on Base.metadata for --autogenerate
import blog_api.models  # noqa: F401

config = context.config

if config.config_file_name is not None:
    # Keep the app's loggers (blog_api.*) alive when migrating in-process
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata


def migration_url() -> str:
    return context.get_x_argument(as_dictionary=True).get("database_url") or settings.database_url


def run_migrations_offline() -> None:
    """Emit the migration SQL to stdout without connecting."""
    url = migration_url()
    context.configure(
        url=url,
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=url.startswith("sqlite"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=connection.dialect.name == "sqlite",
    )
    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """Migrate over a single pool-less connection."""
    engine = create_async_engine(migration_url(), poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(do_run_migrations)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_async_migrations())

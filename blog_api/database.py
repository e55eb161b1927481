"""
Blog API — Database Session Management
=======================================

What:  Async SQLAlchemy engine construction, session factory, and FastAPI dependency.
Why:   Centralizes all database connection logic in one place.
How:   The app factory builds one engine per application instance and keeps it
       (plus its session factory) on `app.state`. Each request gets its own
       session; services commit their writes, the dependency rolls back on error.
Who:   Used by route handlers via FastAPI's dependency injection system.
When:  Engine is created by create_app(); sessions are created per-request.

Why the engine lives on app.state (not at module level):
    run_server() accepts its own database URL, and tests point each app at a
    throwaway SQLite file. A module-level engine would tie every app to the
    URL that happened to be configured at import time.

Connection Pooling Strategy (PostgreSQL):
    pool_size=20:      Persistent connections for normal load
    max_overflow=10:   Temporary connections for traffic spikes (total max = 30)
    pool_pre_ping:     Validates connections before use (catches stale connections)
    pool_recycle=3600: Recycles connections every hour
"""

from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from blog_api.config import settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, which Alembic reads for autogenerate
    and init_models() uses to create tables directly.
    """
    pass


# ── Engine Construction ───────────────────────────────────────────────────
def create_engine_for_url(database_url: Optional[str] = None) -> AsyncEngine:
    """
    Build an async engine for the given URL (defaults to settings.database_url).

    SQLite engines use SQLAlchemy's default pool for the dialect; the sizing
    arguments are only valid for queue-based pools, so they are applied to
    server databases only.
    """
    url = database_url or settings.database_url
    kwargs = {"echo": settings.log_level == "DEBUG"}
    if not url.startswith("sqlite"):
        kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(url, **kwargs)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory bound to `engine`.

    expire_on_commit=False: serialized responses read attributes after the
    service commits, which must not trigger a lazy reload.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the app's factory
        2. Yields it to the route handler
        3. On error: rolls back the transaction
        4. Always: closes the session (returns connection to pool)

    Writes are committed by the service method that made them, before the
    route returns. Nothing may commit here: the teardown of a yield
    dependency runs after the response has been sent.

    The author cascade delete relies on the rollback: the comment, post and
    author deletions share one transaction, so a failure in any of them (or
    in the COMMIT) leaves all three untouched.
    """
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def init_models(engine: AsyncEngine) -> None:
    """Create any missing tables. Production schemas are managed by Alembic."""
    # Imported for its side effect of registering the tables on Base.metadata
    from blog_api import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine(engine: AsyncEngine) -> None:
    """Gracefully closes all connections in the pool."""
    await engine.dispose()

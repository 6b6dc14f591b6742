"""
SubsAPI: Database Session Management
======================================

What:  Async SQLAlchemy engine ownership, session factory, and the FastAPI
       session dependency.
How:   A `Database` handle is constructed explicitly (by the app lifespan, or
       by tests) and stored on `app.state.database`. Each request borrows a
       session from it that auto-commits on success and rolls back on error.
When:  The handle lives from startup to shutdown; sessions live per request.

Connection Pooling (PostgreSQL):
    pool_size=20:      Persistent connections for normal load
    max_overflow=10:   Temporary connections for traffic spikes (total max = 30)
    pool_pre_ping:     Validates connections before use
    pool_recycle=3600: Recycles connections every hour

    SQLite URLs (used by the test-suite) skip the pool sizing arguments.
"""

from typing import Any, AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from subsapi.config import Settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares one metadata object, which Alembic reads for --autogenerate.
    """
    pass


class Database:
    """
    Owns one async engine and its session factory.

    Lifecycle:
        db = Database.from_settings(settings)   # startup
        async with db.session_factory() as s:   # per request
            ...
        await db.dispose()                      # shutdown
    """

    def __init__(self, url: str, **engine_kwargs: Any):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        # expire_on_commit=False: response models read attributes after commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build the engine with pool sizing taken from configuration."""
        engine_kwargs: dict = {"echo": settings.log_level == "DEBUG"}
        if not settings.is_sqlite:
            engine_kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=3600,
            )
        return cls(settings.database_url, **engine_kwargs)

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Opens a session from the app's Database handle
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back and re-raises for the global error handlers
        5. Always: closes the session (returns the connection to the pool)

    Example usage in a route:
        @router.get("/subscriptions")
        async def list_subscriptions(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

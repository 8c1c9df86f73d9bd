"""
Inkwell Backend: Database Engine and Session Management
========================================================

What:  Async SQLAlchemy engine wrapper, declarative base and the per-request
       session dependency.
How:   `Database` owns one engine and one session factory. The application
       lifespan constructs it, stores it on `app.state.database`, and disposes
       it at shutdown. `get_db_session` pulls it from the request, so nothing
       here is a process-wide global.
Who:   Route handlers via FastAPI's Depends(); tests build their own Database
       against a throwaway SQLite file.

Connection Pooling:
    Server databases (PostgreSQL via asyncpg) get a bounded pool sized from
    settings. SQLite is left on SQLAlchemy's default pool for the dialect,
    which does not accept pool sizing arguments.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from inkwell.config import Settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, which Alembic and the test fixtures use
    to create the schema.
    """
    pass


class Database:
    """
    Explicitly constructed handle on the post store.

    Lifecycle:
        database = Database.from_settings(settings)   # startup
        async with database.session() as session: ... # per request
        await database.dispose()                      # shutdown
    """

    def __init__(self, url: str, echo: bool = False, **engine_kwargs):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, echo=echo, **engine_kwargs)
        # expire_on_commit=False: response models read attributes after commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build a Database with pool options appropriate for the URL's backend."""
        engine_kwargs = {}
        if make_url(settings.database_url).get_backend_name() != "sqlite":
            engine_kwargs = {
                "pool_size": settings.db_pool_size,
                "max_overflow": settings.db_max_overflow,
                "pool_pre_ping": settings.db_pool_pre_ping,
                "pool_recycle": 3600,
            }
        return cls(
            settings.database_url,
            echo=settings.log_level == "DEBUG",
            **engine_kwargs,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Unit-of-work scope: commit on success, roll back on any exception.

        Why catch broad Exception: a failure anywhere in the handler (not only
        in SQL) must discard the partial write before the error propagates.
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_all(self) -> None:
        """Create every table registered on Base. Used by tests and local dev."""
        # Models register themselves on import
        from inkwell.models import post, user  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> None:
        """Run SELECT 1; raises if the store cannot be reached."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        """Close every pooled connection. Called from the lifespan shutdown."""
        await self.engine.dispose()


# ── Dependencies ──────────────────────────────────────────────────────────
def get_database(request: Request) -> Database:
    """FastAPI dependency returning the Database owned by the running app."""
    database: Optional[Database] = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database is not initialised; was the lifespan skipped?")
    return database


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides one database session per request.

    Example usage in a route:
        @router.get("/posts/all")
        async def list_posts(db: AsyncSession = Depends(get_db_session)):
            ...

    Raises:
        Any database exception propagates to the global error handlers after
        the transaction has been rolled back.
    """
    async with get_database(request).session() as session:
        yield session

"""SQLAlchemy 2.x async database setup.

This module defines the async engine and session factory but does not
hard-code any connection credentials. Handlers never touch the engine
directly; they receive an ``AsyncSession`` from their caller.
"""

from __future__ import annotations

from typing import AsyncIterator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from .config import DatabaseSettings, settings


def build_engine(db: DatabaseSettings) -> AsyncEngine:
    """Create an async engine for the configured URL.

    SQLite connections get foreign key enforcement switched on so that
    ``ON DELETE CASCADE`` behaves the same as on PostgreSQL.
    """
    kwargs: dict = {"echo": db.echo, "future": True}
    if not db.is_sqlite:
        kwargs.update(pool_size=db.pool_size, max_overflow=db.max_overflow)

    async_engine = create_async_engine(db.url, **kwargs)

    if db.is_sqlite:
        @event.listens_for(async_engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return async_engine


def build_sessionmaker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=bind, expire_on_commit=False, class_=AsyncSession)


engine: AsyncEngine = build_engine(settings.db)

AsyncSessionMaker = build_sessionmaker(engine)


async def get_session() -> AsyncIterator[AsyncSession]:
    """FastAPI-friendly async session dependency.

    Usage:
        async def endpoint(session: AsyncSession = Depends(get_session)):
            ...
    """

    async with AsyncSessionMaker() as session:
        yield session

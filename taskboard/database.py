"""Database configuration and session management."""

from collections.abc import AsyncGenerator
from typing import Any

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from taskboard.config import Settings
from taskboard.logger import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""

    pass


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """Build the async engine for the configured store.

    SQLite runs on a single shared connection so an in-memory database is
    visible to every session; server databases get a sized pool.
    """
    options: dict[str, Any]
    if settings.is_sqlite:
        options = {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }
    else:
        options = {
            "pool_pre_ping": True,
            "pool_size": 10,  # Max persistent connections
            "max_overflow": 20,  # Additional transient connections under load
            "pool_recycle": 3600,  # Recycle connections after 1 hour
        }
    return create_async_engine(settings.database_url, echo=settings.debug, **options)


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency for database session."""
    maker: async_sessionmaker[AsyncSession] = request.app.state.session_maker
    async with maker() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db(engine: AsyncEngine) -> None:
    """Create any missing tables for the registered models."""
    # Import models so they register on Base.metadata
    from taskboard import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database initialized", tables=sorted(Base.metadata.tables))


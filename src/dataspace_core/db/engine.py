"""Async SQLAlchemy engine and session factories."""

import logging

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from dataspace_core.db.tables import Base
from dataspace_core.settings import DatabaseSettings

logger = logging.getLogger(__name__)


def create_async_engine_factory(settings: DatabaseSettings | None = None) -> AsyncEngine:
    """Create an async SQLAlchemy engine with connection pooling.

    Args:
        settings: Database settings (uses defaults if None)

    Returns:
        Configured AsyncEngine instance
    """
    if settings is None:
        settings = DatabaseSettings()

    if settings.url.startswith("sqlite"):
        # SQLite uses a static pool; pool sizing arguments are rejected.
        return create_async_engine(settings.url, echo=settings.echo)

    return create_async_engine(
        settings.url,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        echo=settings.echo,
    )


def get_async_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory bound to the given engine."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def create_schema(engine: AsyncEngine) -> None:
    """Create missing tables. Migrations are managed outside this package."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Exchange schema ensured")

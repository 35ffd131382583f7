"""Database configuration and session management.

Provides the declarative base and the ``Database`` context object that owns
the async engine and session factory. One ``Database`` is built at startup
and handed to every component that needs storage.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from storefront.infrastructure.config import Settings

# Base class for models
Base = declarative_base()


class Database:
    """Async engine plus session factory for one database.

    Example usage:
        database = Database.from_settings(settings)
        async with database.session() as session:
            repo = ProductRepository(session)
            ...
        await database.dispose()
    """

    def __init__(self, engine: AsyncEngine) -> None:
        """Initialize with an existing engine.

        Args:
            engine: Async SQLAlchemy engine.
        """
        self.engine = engine
        self.session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Create engine from application settings."""
        engine = create_async_engine(
            settings.database_url,
            echo=settings.debug,
            pool_pre_ping=True,
            pool_size=settings.db_pool_size,
        )
        return cls(engine)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Open a session, commit on success and roll back on error.

        Yields:
            AsyncSession for database operations.
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def ping(self) -> bool:
        """Check database connectivity."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True

    async def create_all(self) -> None:
        """Create database tables if they don't exist."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()

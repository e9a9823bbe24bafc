"""Database connection and session management for saved searches."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from .config import settings
from .models.base import Base


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine for ``database_url``."""
    return create_async_engine(
        database_url,
        echo=echo,
        future=True,
        poolclass=NullPool,  # SQLite doesn't support connection pooling well
    )


def build_sessionmaker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session factory used across the app."""
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


engine: AsyncEngine = build_engine(settings.database_url, echo=settings.debug)
AsyncSessionLocal = build_sessionmaker(engine)


def configure_database(database_url: Optional[str] = None) -> AsyncEngine:
    """Rebind the module-level engine and session factory.

    Used by the test-suite to point the app at a throwaway database.
    """
    global engine, AsyncSessionLocal

    engine = build_engine(database_url or settings.database_url, echo=settings.debug)
    AsyncSessionLocal = build_sessionmaker(engine)
    return engine


async def init_db() -> None:
    """Create the saved-search tables if they are missing."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@asynccontextmanager
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session that commits on success and rolls back on error."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise

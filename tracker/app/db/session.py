"""
Database session configuration.

This module builds async SQLAlchemy engines and session factories.
Nothing here is a process-wide singleton: callers build the engine, own the
sessions they open from it, and dispose it when done.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool
from tracker.app.core.config import settings

# Create declarative base for models
Base = declarative_base()


def build_engine(database_url: Optional[str] = None, echo: Optional[bool] = None) -> AsyncEngine:
    """
    Create an async engine for the given URL (defaults to settings).

    In-memory SQLite databases share one connection so every session sees
    the same tables.
    """
    url = database_url or settings.database_url
    kwargs = {
        "echo": settings.db_echo if echo is None else echo,
        "future": True,
    }

    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url:
            kwargs["poolclass"] = StaticPool

    return create_async_engine(url, **kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Create an async session factory bound to ``engine``."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


async def create_schema(engine: AsyncEngine) -> None:
    """Create all tables registered on ``Base``."""
    # Import models to ensure they are registered with Base
    from tracker.app.models.parcel import ParcelRecord  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_schema(engine: AsyncEngine) -> None:
    """Drop all tables registered on ``Base``."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

"""Database session utilities for Dramatiq background tasks."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from labinventory.config import settings


@asynccontextmanager
async def task_db_session() -> AsyncGenerator[AsyncSession]:
    """Context manager that provides a database session for background tasks.

    Creates a fresh engine bound to the current event loop, yields a session,
    and disposes the engine afterwards. Each asyncio.run() call in an actor
    creates a new event loop, and pooled connections cannot cross loops.

    Usage:
        async with task_db_session() as session:
            ...
    """
    engine = create_async_engine(
        settings.database_url,
        echo=False,  # SQL logging controlled via structlog configuration
        future=True,
        pool_pre_ping=True,
    )
    session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    try:
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except BaseException:
                await session.rollback()
                raise
    finally:
        # Release all connections back to the database
        await engine.dispose()

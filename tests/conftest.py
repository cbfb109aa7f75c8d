"""Shared fixtures: in-memory SQLite database and an ASGI test client."""

import os
from collections.abc import AsyncGenerator, Callable
from datetime import datetime

# Point the application engine at SQLite before any labinventory import
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

import labinventory.models  # noqa: F401
from labinventory.db import get_session
from labinventory.main import app
from labinventory.models.inventory import Location
from labinventory.models.user import User
from tests.helpers import FIXED_NOW


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_maker: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession]:
    async with session_maker() as session:
        yield session


@pytest.fixture
async def client(session_maker: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncClient]:
    async def override_get_session() -> AsyncGenerator[AsyncSession]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture
async def location(session: AsyncSession) -> Location:
    location = Location(name="Lab shared shelf")
    session.add(location)
    await session.commit()
    return location


@pytest.fixture
async def other_location(session: AsyncSession) -> Location:
    location = Location(name="Cold room")
    session.add(location)
    await session.commit()
    return location


@pytest.fixture
async def user(session: AsyncSession) -> User:
    user = User(name="Alice", email="alice@local")
    session.add(user)
    await session.commit()
    return user

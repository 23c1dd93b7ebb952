"""Todo API pytest configuration."""

from __future__ import annotations

import os
from datetime import UTC, datetime, timedelta

# Use a private in-memory database BEFORE any todoapp imports
# Note: env_prefix is "TODOAPP_"
os.environ["TODOAPP_DATABASE_URL"] = "sqlite://"
os.environ["TODOAPP_ENVIRONMENT"] = "production"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from todoapp.database.connection import Base
from todoapp.database.models import TodoItemDB  # noqa: F401
from todoapp.main import create_app


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 2, 23, 15, 23, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def app():
    """Create the application."""
    return create_app()


@pytest.fixture
def client(app):
    """Test client with the application lifespan running."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
async def session():
    """Session bound to a fresh in-memory database."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session

    await engine.dispose()

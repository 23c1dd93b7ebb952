"""
Database Connection Management

SQLAlchemy async engine and session factory for the SQLite item store.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from todoapp.config import settings

logger = structlog.get_logger()

# SQLAlchemy declarative base
Base = declarative_base()

# Global engine instance
engine: AsyncEngine | None = None
SessionLocal: async_sessionmaker[AsyncSession] | None = None


def get_database_url() -> str:
    """Construct the async SQLite database URL."""
    if settings.DATABASE_URL:
        return settings.DATABASE_URL.replace("sqlite://", "sqlite+aiosqlite://", 1)

    database_file = settings.data_directory() / settings.DATABASE_FILE
    return f"sqlite+aiosqlite:///{database_file}"


async def init_db(database_url: str | None = None) -> None:
    """Initialize the database engine, session factory and schema."""
    global engine, SessionLocal

    if engine is not None:
        logger.warning("Database already initialized")
        return

    database_url = database_url or get_database_url()
    logger.info("Initializing database connection", url=database_url)

    options: dict = {"echo": settings.DEBUG}
    if database_url.rstrip("/").endswith(":memory:") or database_url.endswith("://"):
        # In-memory databases only live as long as their single connection
        options["poolclass"] = StaticPool
        options["connect_args"] = {"check_same_thread": False}

    engine = create_async_engine(database_url, **options)

    SessionLocal = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    # Importing the models registers their tables on Base.metadata
    from todoapp.database import models  # noqa: F401

    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)

    logger.info("Database initialized successfully")


async def close_db() -> None:
    """Close database engine and cleanup connections."""
    global engine, SessionLocal

    if engine is None:
        return

    logger.info("Closing database connections")
    await engine.dispose()
    engine = None
    SessionLocal = None
    logger.info("Database connections closed")


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Get async database session.

    Usage:
        async with get_session() as session:
            result = await session.execute(query)

    Raises:
        RuntimeError: If database not initialized
    """
    if SessionLocal is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")

    async with SessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise

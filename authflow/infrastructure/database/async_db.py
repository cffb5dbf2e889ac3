"""
Asynchronous Database Utilities Module

This module owns the async SQLAlchemy engine and session factory used by the
repositories. The engine is built from `settings.DATABASE_URL`, which is
assembled from the POSTGRES_* settings unless given explicitly.

Key Components:
    - engine: The asynchronous SQLAlchemy engine.
    - AsyncSessionFactory: A factory for creating asynchronous database sessions.
    - get_async_db: A context manager yielding a session that rolls back on error.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from structlog import get_logger

from authflow.core.config.settings import settings

logger = get_logger(__name__)

engine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,
    future=True,
    pool_size=settings.POSTGRES_POOL_SIZE,
    max_overflow=settings.POSTGRES_MAX_OVERFLOW,
    pool_timeout=settings.POSTGRES_POOL_TIMEOUT,
    pool_pre_ping=True,
)

AsyncSessionFactory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an AsyncSession, rolling back if the body raises.

    Example:
        async with get_async_db() as session:
            auth = build_auth_usecase(session)
    """
    async with AsyncSessionFactory() as session:
        logger.debug("Async database session created")
        try:
            yield session
        except Exception:
            await session.rollback()
            logger.error("Async database session rollback due to error")
            raise
        finally:
            await session.close()
            logger.debug("Async database session closed")


import os

# Settings are read once at import time, so the test environment must be in
# place before anything from authflow is imported.
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("BCRYPT_WORK_FACTOR", "4")

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from authflow.domain.entities import Token, User  # noqa: F401
from authflow.domain.services.auth import AuthUseCase
from authflow.domain.value_objects import RequestContext
from tests.utils.in_memory_stores import (
    InMemoryTokenRepository,
    InMemoryUserRepository,
    RecordingNotifier,
)

SQLITE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def ctx():
    """Context of an anonymous request."""
    return RequestContext(request_id="test-request")


@pytest.fixture
def user_repository():
    return InMemoryUserRepository()


@pytest.fixture
def token_repository():
    return InMemoryTokenRepository()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def auth_usecase(user_repository, token_repository, notifier):
    return AuthUseCase(
        user_repository,
        token_repository,
        notifier,
        limit_of_activation_tokens=5,
        limit_of_reset_password_tokens=5,
        activation_url_base="https://app.test/activate",
        password_reset_url_base="https://app.test/reset-password",
        generated_password_length=16,
    )


@pytest_asyncio.fixture
async def async_session():
    """Session on a fresh in-memory SQLite database with all tables created."""
    engine = create_async_engine(SQLITE_URL, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()

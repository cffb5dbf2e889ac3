import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from authflow.core.config.settings import settings
from authflow.infrastructure.database import AsyncSessionFactory, engine, get_async_db


def test_engine_uses_configured_url():
    assert engine.url.render_as_string(hide_password=False) == settings.DATABASE_URL


def test_sessions_keep_attributes_after_commit():
    assert AsyncSessionFactory.kw["expire_on_commit"] is False


@pytest.mark.asyncio
async def test_get_async_db_yields_session():
    async with get_async_db() as session:
        assert isinstance(session, AsyncSession)


@pytest.mark.asyncio
async def test_get_async_db_rolls_back_and_reraises(mocker):
    rollback = mocker.patch.object(AsyncSession, "rollback", new_callable=mocker.AsyncMock)

    with pytest.raises(RuntimeError, match="boom"):
        async with get_async_db():
            raise RuntimeError("boom")

    rollback.assert_awaited_once()

import pytest

from authflow.domain.services.auth import AuthUseCase
from authflow.infrastructure.dependency_injection import (
    build_auth_usecase,
    get_token_repository,
    get_user_repository,
)
from authflow.infrastructure.repositories import TokenRepository, UserRepository
from authflow.infrastructure.services.email import EmailNotifier
from tests.utils.in_memory_stores import RecordingNotifier


@pytest.mark.asyncio
async def test_repositories_share_the_given_session(async_session):
    user_repository = get_user_repository(async_session)
    token_repository = get_token_repository(async_session)

    assert isinstance(user_repository, UserRepository)
    assert isinstance(token_repository, TokenRepository)
    assert user_repository.db_session is token_repository.db_session is async_session


@pytest.mark.asyncio
async def test_build_auth_usecase_uses_given_notifier(async_session):
    notifier = RecordingNotifier()

    service = build_auth_usecase(async_session, notifier=notifier)

    assert isinstance(service, AuthUseCase)
    assert service._notifier is notifier


@pytest.mark.asyncio
async def test_build_auth_usecase_defaults_to_email_notifier(async_session):
    service = build_auth_usecase(async_session)

    assert isinstance(service._notifier, EmailNotifier)
    assert service._notifier.is_test_mode() is True

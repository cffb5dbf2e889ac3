"""Account flows over the SQL repositories when a commit fails.

A failed commit rolls the shared session back and expires every loaded
entity, so these flows must surface their domain errors without touching
expired attributes.
"""

from urllib.parse import parse_qs, urlparse

import pytest
import pytest_asyncio
from sqlalchemy.exc import OperationalError

from authflow.core.exceptions import (
    AccountCannotBeActivatedError,
    ActivationTokenCannotBeCreatedError,
    DatabaseError,
    ResetPasswordTokenCannotBeCreatedError,
    UserCannotBeUpdatedError,
)
from authflow.domain.entities.token import TokenFilter, TokenKind
from authflow.infrastructure.dependency_injection import build_auth_usecase
from tests.factories import create_fake_user_input
from tests.utils.in_memory_stores import RecordingNotifier

PASSWORD = "Initial-Pass1"


def fail_commits(mocker, session, after=0):
    """Let `after` commits through, then make every commit fail."""
    real_commit = session.commit
    calls = {"count": 0}

    async def commit():
        calls["count"] += 1
        if calls["count"] > after:
            raise OperationalError("COMMIT", None, Exception("disk I/O error"))
        await real_commit()

    mocker.patch.object(session, "commit", new=commit)


def link_params(url):
    return {key: values[0] for key, values in parse_qs(urlparse(url).query).items()}


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def service(async_session, notifier):
    return build_auth_usecase(async_session, notifier=notifier)


@pytest_asyncio.fixture
async def signed_up(ctx, service):
    """Identifiers of a freshly signed-up account, read before any failure."""
    user = await service.signup(ctx, create_fake_user_input(password=PASSWORD))
    return {"id": user.id, "login": user.login, "email": user.email}


class TestTokenCreationFailures:
    @pytest.mark.asyncio
    async def test_signup_keeps_account_when_token_commit_fails(
        self, ctx, service, notifier, async_session, mocker
    ):
        user_input = create_fake_user_input(password=PASSWORD)
        fail_commits(mocker, async_session, after=1)

        with pytest.raises(ActivationTokenCannotBeCreatedError) as exc_info:
            await service.signup(ctx, user_input)

        assert isinstance(exc_info.value.__cause__, DatabaseError)
        assert notifier.messages == []
        stored = await service._user_repository.get_by_email(user_input.email)
        assert stored.activated is False
        assert await service._token_repository.fetch(TokenFilter(user_id=stored.id)) == []

    @pytest.mark.asyncio
    async def test_new_activation_token_commit_fails(
        self, ctx, service, notifier, async_session, mocker, signed_up
    ):
        fail_commits(mocker, async_session)

        with pytest.raises(ActivationTokenCannotBeCreatedError) as exc_info:
            await service.generate_new_activation_token(ctx, signed_up["id"])

        assert isinstance(exc_info.value.__cause__, DatabaseError)
        assert len(notifier.messages) == 1
        tokens = await service._token_repository.fetch(
            TokenFilter(user_id=signed_up["id"], kind=TokenKind.ACTIVATION)
        )
        assert len(tokens) == 1

    @pytest.mark.asyncio
    async def test_new_reset_password_token_commit_fails(
        self, ctx, service, notifier, async_session, mocker, signed_up
    ):
        fail_commits(mocker, async_session)

        with pytest.raises(ResetPasswordTokenCannotBeCreatedError) as exc_info:
            await service.generate_new_reset_password_token(ctx, signed_up["email"])

        assert isinstance(exc_info.value.__cause__, DatabaseError)
        assert len(notifier.messages) == 1
        tokens = await service._token_repository.fetch(
            TokenFilter(user_id=signed_up["id"], kind=TokenKind.RESET_PASSWORD)
        )
        assert tokens == []


class TestUserUpdateFailures:
    @pytest.mark.asyncio
    async def test_activate_commit_fails(
        self, ctx, service, notifier, async_session, mocker, signed_up
    ):
        params = link_params(notifier.messages[0].context["activation_url"])
        fail_commits(mocker, async_session)

        with pytest.raises(AccountCannotBeActivatedError) as exc_info:
            await service.activate(ctx, signed_up["id"], params["token"])

        assert isinstance(exc_info.value.__cause__, DatabaseError)
        user = await service._user_repository.get_by_id(signed_up["id"])
        assert user.activated is False
        tokens = await service._token_repository.fetch(
            TokenFilter(user_id=signed_up["id"], kind=TokenKind.ACTIVATION)
        )
        assert len(tokens) == 1

    @pytest.mark.asyncio
    async def test_reset_password_commit_fails(
        self, ctx, service, notifier, async_session, mocker, signed_up
    ):
        await service.generate_new_reset_password_token(ctx, signed_up["email"])
        params = link_params(notifier.messages[-1].context["reset_url"])
        fail_commits(mocker, async_session)

        with pytest.raises(UserCannotBeUpdatedError) as exc_info:
            await service.reset_password(ctx, signed_up["id"], params["token"])

        assert exc_info.value.login == signed_up["login"]
        assert signed_up["login"] in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, DatabaseError)
        assert len(notifier.messages) == 2
        user = await service.login(ctx, signed_up["login"], PASSWORD)
        assert user.id == signed_up["id"]

    @pytest.mark.asyncio
    async def test_reset_password_emails_new_password_when_token_delete_fails(
        self, ctx, service, notifier, async_session, mocker, signed_up
    ):
        await service.generate_new_reset_password_token(ctx, signed_up["email"])
        params = link_params(notifier.messages[-1].context["reset_url"])
        fail_commits(mocker, async_session, after=1)

        await service.reset_password(ctx, signed_up["id"], params["token"])

        message = notifier.messages[-1]
        assert message.recipient == signed_up["email"]
        assert message.context["login"] == signed_up["login"]
        user = await service.login(ctx, signed_up["login"], message.context["password"])
        assert user.id == signed_up["id"]
        tokens = await service._token_repository.fetch(
            TokenFilter(user_id=signed_up["id"], kind=TokenKind.RESET_PASSWORD)
        )
        assert len(tokens) == 1

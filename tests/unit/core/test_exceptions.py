import pytest

from authflow.core.exceptions import (
    AccountCannotBeActivatedError,
    ActivationTokenCannotBeCreatedError,
    AuthenticationError,
    AuthflowError,
    CannotCreateAccountWhileLoggedInError,
    EmailServiceError,
    ErrorCode,
    InvalidActivationTokenError,
    InvalidCredentialsError,
    LoginIsOccupiedError,
    ReachedLimitOfResetPasswordTokensError,
    TemplateRenderError,
    TokenError,
    UserCannotBeUpdatedError,
)


def test_error_defaults():
    # Act
    error = InvalidActivationTokenError()

    # Assert
    assert error.message == "Invalid activation token"
    assert error.code == ErrorCode.INVALID_ACTIVATION_TOKEN
    assert str(error) == "Invalid activation token"


def test_error_message_and_code_override():
    # Act
    error = AuthenticationError("Session expired", ErrorCode.NOT_LOGGED_IN)

    # Assert
    assert error.message == "Session expired"
    assert error.code == ErrorCode.NOT_LOGGED_IN
    assert str(error) == "Session expired"


def test_error_repr_shows_code_and_message():
    error = LoginIsOccupiedError()

    assert repr(error) == "LoginIsOccupiedError(code='login_is_occupied', message='Login is occupied')"


@pytest.mark.parametrize(
    "error_cls, base_cls",
    [
        (CannotCreateAccountWhileLoggedInError, AuthenticationError),
        (InvalidCredentialsError, AuthenticationError),
        (InvalidActivationTokenError, TokenError),
        (ReachedLimitOfResetPasswordTokensError, TokenError),
        (ActivationTokenCannotBeCreatedError, TokenError),
        (TemplateRenderError, EmailServiceError),
        (AccountCannotBeActivatedError, AuthflowError),
    ],
)
def test_error_hierarchy(error_cls, base_cls):
    assert issubclass(error_cls, base_cls)
    assert issubclass(error_cls, AuthflowError)


def test_every_error_kind_has_a_distinct_code():
    codes = [code.value for code in ErrorCode]

    assert len(codes) == len(set(codes))


def test_user_cannot_be_updated_embeds_login():
    # Act
    error = UserCannotBeUpdatedError("erin")

    # Assert
    assert error.message == "User (login: erin) cannot be updated"
    assert error.login == "erin"
    assert error.code == ErrorCode.USER_CANNOT_BE_UPDATED


def test_user_cannot_be_updated_is_matched_by_code_not_message():
    first = UserCannotBeUpdatedError("erin")
    second = UserCannotBeUpdatedError("frank")

    assert first.message != second.message
    assert first.code == second.code

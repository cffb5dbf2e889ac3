from __future__ import annotations

"""Centralized, structured exception hierarchy for authflow.

Every error raised by the account use cases, the stores and the notifier
derives from `AuthflowError`. Each carries a machine-readable `code`, taken
from the closed `ErrorCode` enumeration, and a human-readable `message`.
Callers match either on the class or on `code`; the messages are for logs
and user feedback only.

Most errors have a fixed message. `UserCannotBeUpdatedError` is the
exception: its message is formatted with the affected user's login, which is
also kept on the instance as `login`.
"""

from enum import Enum
from typing import Final

__all__: Final = [
    "ErrorCode",
    "AuthflowError",
    "AuthenticationError",
    "CannotCreateAccountWhileLoggedInError",
    "CannotLoginWhileLoggedInError",
    "NotLoggedInError",
    "InvalidCredentialsError",
    "LoginIsOccupiedError",
    "EmailIsOccupiedError",
    "UserNotFoundError",
    "UserCannotBeUpdatedError",
    "TokenError",
    "InvalidActivationTokenError",
    "InvalidResetPasswordTokenError",
    "ReachedLimitOfActivationTokensError",
    "ReachedLimitOfResetPasswordTokensError",
    "ActivationTokenCannotBeCreatedError",
    "ResetPasswordTokenCannotBeCreatedError",
    "AccountHasBeenActivatedError",
    "AccountCannotBeActivatedError",
    "DatabaseError",
    "EmailServiceError",
    "TemplateRenderError",
]


class ErrorCode(str, Enum):
    """Machine-readable kinds of every error the package raises."""

    GENERIC = "generic_error"
    AUTHENTICATION = "authentication_error"
    CANNOT_CREATE_ACCOUNT_WHILE_LOGGED_IN = "cannot_create_account_while_logged_in"
    CANNOT_LOGIN_WHILE_LOGGED_IN = "cannot_login_while_logged_in"
    NOT_LOGGED_IN = "not_logged_in"
    INVALID_CREDENTIALS = "invalid_credentials"
    LOGIN_IS_OCCUPIED = "login_is_occupied"
    EMAIL_IS_OCCUPIED = "email_is_occupied"
    USER_NOT_FOUND = "user_not_found"
    USER_CANNOT_BE_UPDATED = "user_cannot_be_updated"
    INVALID_ACTIVATION_TOKEN = "invalid_activation_token"
    INVALID_RESET_PASSWORD_TOKEN = "invalid_reset_password_token"
    REACHED_LIMIT_OF_ACTIVATION_TOKENS = "reached_limit_of_activation_tokens"
    REACHED_LIMIT_OF_RESET_PASSWORD_TOKENS = "reached_limit_of_reset_password_tokens"
    ACTIVATION_TOKEN_CANNOT_BE_CREATED = "activation_token_cannot_be_created"
    RESET_PASSWORD_TOKEN_CANNOT_BE_CREATED = "reset_password_token_cannot_be_created"
    ACCOUNT_HAS_BEEN_ACTIVATED = "account_has_been_activated"
    ACCOUNT_CANNOT_BE_ACTIVATED = "account_cannot_be_activated"
    DATABASE = "database_error"
    EMAIL_SERVICE = "email_service_error"
    TEMPLATE_RENDER = "template_render_error"


class AuthflowError(Exception):
    """Base exception class for all custom errors in authflow.

    Attributes:
        message (str): A human-readable error message, suitable for logging.
        code (ErrorCode): The machine-readable kind of the error.
    """

    default_message: str = "An unexpected error occurred"
    default_code: ErrorCode = ErrorCode.GENERIC

    def __init__(self, message: str | None = None, code: ErrorCode | None = None):
        self.message = message or self.default_message
        self.code = code or self.default_code
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code.value!r}, message={self.message!r})"


# ---------------------------------------------------------------------------
# Session state errors
# ---------------------------------------------------------------------------


class AuthenticationError(AuthflowError):
    """Raised for general authentication and session state failures.

    This exception is the base for the session state errors below. It
    typically maps to a `401 Unauthorized` or `403 Forbidden` response.
    """

    default_message = "Authentication failed"
    default_code = ErrorCode.AUTHENTICATION


class CannotCreateAccountWhileLoggedInError(AuthenticationError):
    """Raised when signup is attempted by a request that already has a session principal."""

    default_message = "You cannot create an account while logged in"
    default_code = ErrorCode.CANNOT_CREATE_ACCOUNT_WHILE_LOGGED_IN


class CannotLoginWhileLoggedInError(AuthenticationError):
    """Raised when login is attempted by a request that already has a session principal."""

    default_message = "You are already logged in"
    default_code = ErrorCode.CANNOT_LOGIN_WHILE_LOGGED_IN


class NotLoggedInError(AuthenticationError):
    """Raised when logout is attempted without a session principal."""

    default_message = "You are not logged in"
    default_code = ErrorCode.NOT_LOGGED_IN


class InvalidCredentialsError(AuthenticationError):
    """Raised by the user store when a login/password pair does not match.

    The message is deliberately generic to prevent user enumeration.
    """

    default_message = "Invalid login or password"
    default_code = ErrorCode.INVALID_CREDENTIALS


# ---------------------------------------------------------------------------
# User store errors
# ---------------------------------------------------------------------------


class LoginIsOccupiedError(AuthflowError):
    """Raised by the user store when the login is already taken (`409 Conflict`)."""

    default_message = "Login is occupied"
    default_code = ErrorCode.LOGIN_IS_OCCUPIED


class EmailIsOccupiedError(AuthflowError):
    """Raised by the user store when the email is already taken (`409 Conflict`)."""

    default_message = "Email is occupied"
    default_code = ErrorCode.EMAIL_IS_OCCUPIED


class UserNotFoundError(AuthflowError):
    """Raised when a requested user is not found in the store (`404 Not Found`)."""

    default_message = "User not found"
    default_code = ErrorCode.USER_NOT_FOUND


class UserCannotBeUpdatedError(AuthflowError):
    """Raised when persisting a password change fails.

    Unlike the other errors its message is built from the user's login, so
    callers must match on the class or on `code`, never on the message.
    """

    MESSAGE_FORMAT: Final = "User (login: {login}) cannot be updated"
    default_code = ErrorCode.USER_CANNOT_BE_UPDATED

    def __init__(self, login: str):
        self.login = login
        super().__init__(self.MESSAGE_FORMAT.format(login=login))


# ---------------------------------------------------------------------------
# Token lifecycle errors
# ---------------------------------------------------------------------------


class TokenError(AuthflowError):
    """Base class for activation and reset-password token failures."""


class InvalidActivationTokenError(TokenError):
    default_message = "Invalid activation token"
    default_code = ErrorCode.INVALID_ACTIVATION_TOKEN


class InvalidResetPasswordTokenError(TokenError):
    default_message = "Invalid reset password token"
    default_code = ErrorCode.INVALID_RESET_PASSWORD_TOKEN


class ReachedLimitOfActivationTokensError(TokenError):
    """Raised when a user already holds more activation tokens than allowed (`429`)."""

    default_message = "You have reached the limit of activation tokens"
    default_code = ErrorCode.REACHED_LIMIT_OF_ACTIVATION_TOKENS


class ReachedLimitOfResetPasswordTokensError(TokenError):
    """Raised when a user already holds more reset-password tokens than allowed (`429`)."""

    default_message = "You have reached the limit of reset password tokens"
    default_code = ErrorCode.REACHED_LIMIT_OF_RESET_PASSWORD_TOKENS


class ActivationTokenCannotBeCreatedError(TokenError):
    default_message = "Activation token cannot be created"
    default_code = ErrorCode.ACTIVATION_TOKEN_CANNOT_BE_CREATED


class ResetPasswordTokenCannotBeCreatedError(TokenError):
    default_message = "Reset password token cannot be created"
    default_code = ErrorCode.RESET_PASSWORD_TOKEN_CANNOT_BE_CREATED


# ---------------------------------------------------------------------------
# Activation state errors
# ---------------------------------------------------------------------------


class AccountHasBeenActivatedError(AuthflowError):
    """Raised when activation or a new activation token is requested for an activated account."""

    default_message = "Account has been activated"
    default_code = ErrorCode.ACCOUNT_HAS_BEEN_ACTIVATED


class AccountCannotBeActivatedError(AuthflowError):
    """Raised when the activated flag cannot be persisted.

    The underlying store error is chained as `__cause__` but never exposed
    through the message.
    """

    default_message = "Account cannot be activated"
    default_code = ErrorCode.ACCOUNT_CANNOT_BE_ACTIVATED


# ---------------------------------------------------------------------------
# Infrastructure errors (typically map to 500 or 503)
# ---------------------------------------------------------------------------


class DatabaseError(AuthflowError):
    """Raised for low-level database interaction errors.

    This exception wraps underlying driver errors, abstracting away
    implementation details.
    """

    default_message = "A database error occurred"
    default_code = ErrorCode.DATABASE


class EmailServiceError(AuthflowError):
    """Raised when the email delivery backend fails or is misconfigured."""

    default_message = "Email could not be sent"
    default_code = ErrorCode.EMAIL_SERVICE


class TemplateRenderError(EmailServiceError):
    """Raised when an email template is missing or fails to render."""

    default_message = "Email template could not be rendered"
    default_code = ErrorCode.TEMPLATE_RENDER

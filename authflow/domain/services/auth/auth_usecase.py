"""Account lifecycle use cases.

This domain service orchestrates signup, login, logout, account activation
and password reset on top of three injected collaborators: a user store, a
single-use token store and a notifier.

Failure ordering:
- Preconditions on the request context and on the user's activation state
  are checked before any token is read or written.
- Store errors that the caller needs verbatim (login/email conflicts,
  credential failures, missing users) propagate unchanged.
- Failures whose cause is irrelevant to the caller are translated into a
  fixed domain error, chained to the original with ``raise ... from``.
- Cleanup and notification steps that follow a successful write are
  best-effort: their errors are logged and never mask the primary result.

The service holds no state between calls and takes no locks. Read-then-write
sequences rely on the user store for protection against lost updates.

A failed store write may roll back the shared session and expire every
loaded entity, so identifiers and fields needed after a write are read
before it.
"""

import secrets
import string
from typing import List, Optional, Type
from urllib.parse import urlencode

import structlog

from authflow.core.config.settings import settings
from authflow.core.exceptions import (
    AccountCannotBeActivatedError,
    AccountHasBeenActivatedError,
    ActivationTokenCannotBeCreatedError,
    CannotCreateAccountWhileLoggedInError,
    CannotLoginWhileLoggedInError,
    InvalidActivationTokenError,
    InvalidResetPasswordTokenError,
    NotLoggedInError,
    ReachedLimitOfActivationTokensError,
    ReachedLimitOfResetPasswordTokensError,
    ResetPasswordTokenCannotBeCreatedError,
    TokenError,
    UserCannotBeUpdatedError,
)
from authflow.core.logging import mask_email
from authflow.domain.entities.token import Token, TokenFilter, TokenKind
from authflow.domain.entities.user import User
from authflow.domain.interfaces import INotifier, ITokenRepository, IUserRepository
from authflow.domain.value_objects import EmailMessage, RequestContext, UserInput

logger = structlog.get_logger(__name__)

ACTIVATION_EMAIL_SUBJECT = "Activate your account"
ACTIVATION_EMAIL_TEMPLATE = "activation.html"
RESET_PASSWORD_EMAIL_SUBJECT = "Reset your password"
RESET_PASSWORD_EMAIL_TEMPLATE = "reset_password.html"
NEW_PASSWORD_EMAIL_SUBJECT = "Your new password"
NEW_PASSWORD_EMAIL_TEMPLATE = "new_password.html"

GENERATED_PASSWORD_ALPHABET = string.ascii_letters + string.digits


class AuthUseCase:
    """Use-case engine for the account lifecycle.

    Every operation takes the `RequestContext` of the calling request as its
    first argument and is safe to run concurrently with any other call; all
    shared state lives behind the injected stores.

    Token policy:
        Before a token is issued, the user's existing tokens of the same kind
        are counted. Issuing is refused once that count exceeds the
        configured limit, so a user holding exactly ``limit`` tokens may
        still receive one more.
    """

    def __init__(
        self,
        user_repository: IUserRepository,
        token_repository: ITokenRepository,
        notifier: INotifier,
        *,
        limit_of_activation_tokens: Optional[int] = None,
        limit_of_reset_password_tokens: Optional[int] = None,
        activation_url_base: Optional[str] = None,
        password_reset_url_base: Optional[str] = None,
        generated_password_length: Optional[int] = None,
    ):
        """Initialize the use cases with their collaborators.

        Args:
            user_repository: Store for user accounts
            token_repository: Store for activation and reset-password tokens
            notifier: Outbound email delivery
            limit_of_activation_tokens: Overrides settings.LIMIT_OF_ACTIVATION_TOKENS
            limit_of_reset_password_tokens: Overrides settings.LIMIT_OF_RESET_PASSWORD_TOKENS
            activation_url_base: Overrides settings.ACTIVATION_URL_BASE
            password_reset_url_base: Overrides settings.PASSWORD_RESET_URL_BASE
            generated_password_length: Overrides settings.GENERATED_PASSWORD_LENGTH
        """
        self._user_repository = user_repository
        self._token_repository = token_repository
        self._notifier = notifier

        self._limits = {
            TokenKind.ACTIVATION: _first_set(
                limit_of_activation_tokens, settings.LIMIT_OF_ACTIVATION_TOKENS
            ),
            TokenKind.RESET_PASSWORD: _first_set(
                limit_of_reset_password_tokens, settings.LIMIT_OF_RESET_PASSWORD_TOKENS
            ),
        }
        self._activation_url_base = activation_url_base or settings.ACTIVATION_URL_BASE
        self._password_reset_url_base = (
            password_reset_url_base or settings.PASSWORD_RESET_URL_BASE
        )
        self._generated_password_length = _first_set(
            generated_password_length, settings.GENERATED_PASSWORD_LENGTH
        )

    @property
    def limit_of_activation_tokens(self) -> int:
        return self._limits[TokenKind.ACTIVATION]

    @property
    def limit_of_reset_password_tokens(self) -> int:
        return self._limits[TokenKind.RESET_PASSWORD]

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    async def signup(self, ctx: RequestContext, user_input: UserInput) -> User:
        """Create an unactivated account and email its first activation token.

        The account is kept even when the activation token cannot be created;
        no compensating delete is attempted. A failure to send the activation
        email is logged and the created user is still returned, since the
        user can request a new activation token later.

        Args:
            ctx: Context of the calling request; must carry no session principal
            user_input: Validated signup data

        Returns:
            User: The persisted user, with `activated` False

        Raises:
            CannotCreateAccountWhileLoggedInError: If `ctx` carries a user
            LoginIsOccupiedError: Propagated from the user store
            EmailIsOccupiedError: Propagated from the user store
            ActivationTokenCannotBeCreatedError: If the token store fails
        """
        log = logger.bind(request_id=ctx.request_id, operation="signup")
        if ctx.is_authenticated:
            raise CannotCreateAccountWhileLoggedInError()

        user = User(
            login=user_input.login,
            password=user_input.password,
            email=user_input.email,
            role=user_input.role,
            activated=False,
        )
        await self._user_repository.store(user)
        user_id = user.id
        log.info("Account created", user_id=user_id, email=mask_email(user.email))

        token = await self._issue_token(
            user_id, TokenKind.ACTIVATION, ActivationTokenCannotBeCreatedError
        )

        try:
            await self._notifier.send(ctx, self._activation_message(user, token))
        except Exception as e:
            log.warning(
                "Activation email could not be sent after signup",
                user_id=user_id,
                error=str(e),
                error_type=type(e).__name__,
            )

        return user

    async def login(self, ctx: RequestContext, login: str, password: str) -> User:
        """Return the user matching the credentials.

        Credential verification belongs to the user store; its errors
        propagate unchanged.

        Raises:
            CannotLoginWhileLoggedInError: If `ctx` carries a user
        """
        if ctx.is_authenticated:
            raise CannotLoginWhileLoggedInError()

        user = await self._user_repository.get_by_credentials(login, password)
        logger.info("User logged in", request_id=ctx.request_id, user_id=user.id)
        return user

    async def logout(self, ctx: RequestContext) -> None:
        """Check that the request is authenticated.

        Tearing down the session itself is left to the transport layer.

        Raises:
            NotLoggedInError: If `ctx` carries no user
        """
        if not ctx.is_authenticated:
            raise NotLoggedInError()

        logger.info("User logged out", request_id=ctx.request_id, user_id=ctx.user.id)

    # ------------------------------------------------------------------
    # Activation
    # ------------------------------------------------------------------

    async def activate(self, ctx: RequestContext, user_id: int, token_value: str) -> User:
        """Activate an account with one of its activation tokens.

        On success every outstanding activation token of the user is
        deleted. A request racing this one that still saw the user as
        unactivated then fails with `InvalidActivationTokenError`; later
        calls fail with `AccountHasBeenActivatedError`.

        Returns:
            User: The user, with `activated` True

        Raises:
            UserNotFoundError: Propagated from the user store
            AccountHasBeenActivatedError: If the account is already active
            InvalidActivationTokenError: If no activation token of this user has this value
            AccountCannotBeActivatedError: If the user store fails to persist the change
        """
        log = logger.bind(request_id=ctx.request_id, operation="activate", user_id=user_id)

        user = await self._user_repository.get_by_id(user_id)
        if user.activated:
            raise AccountHasBeenActivatedError()

        tokens = await self._token_repository.fetch(
            TokenFilter(user_id=user.id, value=token_value, kind=TokenKind.ACTIVATION)
        )
        if not tokens:
            log.warning("Activation attempted with unknown token", token_prefix=token_value[:8])
            raise InvalidActivationTokenError()

        user.activated = True
        try:
            await self._user_repository.update(user)
        except Exception as e:
            log.error("Account activation could not be persisted", error=str(e))
            raise AccountCannotBeActivatedError() from e

        await self._discard_tokens(ctx, user_id, TokenKind.ACTIVATION)
        log.info("Account activated")
        return user

    async def generate_new_activation_token(self, ctx: RequestContext, user_id: int) -> None:
        """Issue another activation token and email it to the user.

        Unlike signup, a notifier failure here is the operation's error.

        Raises:
            UserNotFoundError: Propagated from the user store
            AccountHasBeenActivatedError: If the account is already active
            ReachedLimitOfActivationTokensError: If the user holds too many tokens
            ActivationTokenCannotBeCreatedError: If the token store fails
            EmailServiceError: Propagated from the notifier
        """
        user = await self._user_repository.get_by_id(user_id)
        if user.activated:
            raise AccountHasBeenActivatedError()

        await self._ensure_below_limit(
            user, TokenKind.ACTIVATION, ReachedLimitOfActivationTokensError
        )
        token = await self._issue_token(
            user_id, TokenKind.ACTIVATION, ActivationTokenCannotBeCreatedError
        )
        await self._notifier.send(ctx, self._activation_message(user, token))

        logger.info(
            "Activation token sent",
            request_id=ctx.request_id,
            user_id=user_id,
            email=mask_email(user.email),
        )

    # ------------------------------------------------------------------
    # Password reset
    # ------------------------------------------------------------------

    async def generate_new_reset_password_token(self, ctx: RequestContext, email: str) -> None:
        """Issue a reset-password token for the account with `email` and email it.

        Raises:
            UserNotFoundError: Propagated from the user store
            ReachedLimitOfResetPasswordTokensError: If the user holds too many tokens
            ResetPasswordTokenCannotBeCreatedError: If the token store fails
            EmailServiceError: Propagated from the notifier
        """
        user = await self._user_repository.get_by_email(email)
        user_id = user.id

        await self._ensure_below_limit(
            user, TokenKind.RESET_PASSWORD, ReachedLimitOfResetPasswordTokensError
        )
        token = await self._issue_token(
            user_id, TokenKind.RESET_PASSWORD, ResetPasswordTokenCannotBeCreatedError
        )
        await self._notifier.send(
            ctx,
            EmailMessage(
                recipient=user.email,
                subject=RESET_PASSWORD_EMAIL_SUBJECT,
                template=RESET_PASSWORD_EMAIL_TEMPLATE,
                context={
                    "login": user.login,
                    "reset_url": self._build_link(self._password_reset_url_base, user, token),
                },
            ),
        )

        logger.info(
            "Reset password token sent",
            request_id=ctx.request_id,
            user_id=user_id,
            email=mask_email(user.email),
        )

    async def reset_password(self, ctx: RequestContext, user_id: int, token_value: str) -> None:
        """Replace the user's password with a generated one and email it.

        Only the password update is fatal. Deleting the consumed token and
        sending the new password are best-effort.

        Raises:
            UserNotFoundError: Propagated from the user store
            InvalidResetPasswordTokenError: If no reset-password token of this user has this value
            UserCannotBeUpdatedError: If the user store fails; the message names the login
        """
        log = logger.bind(request_id=ctx.request_id, operation="reset_password", user_id=user_id)

        user = await self._user_repository.get_by_id(user_id)

        tokens = await self._token_repository.fetch(
            TokenFilter(user_id=user.id, value=token_value, kind=TokenKind.RESET_PASSWORD)
        )
        if not tokens:
            log.warning("Password reset attempted with unknown token", token_prefix=token_value[:8])
            raise InvalidResetPasswordTokenError()

        login, email = user.login, user.email
        token_ids = [token.id for token in tokens]

        new_password = self._generate_password()
        user.password = new_password
        try:
            await self._user_repository.update(user)
        except Exception as e:
            log.error("New password could not be persisted", error=str(e))
            raise UserCannotBeUpdatedError(login) from e

        try:
            await self._token_repository.delete(token_ids)
        except Exception as e:
            log.warning("Consumed reset password token could not be deleted", error=str(e))

        try:
            await self._notifier.send(
                ctx,
                EmailMessage(
                    recipient=email,
                    subject=NEW_PASSWORD_EMAIL_SUBJECT,
                    template=NEW_PASSWORD_EMAIL_TEMPLATE,
                    context={"login": login, "password": new_password},
                ),
            )
        except Exception as e:
            log.warning("New password email could not be sent", error=str(e))

        log.info("Password reset completed")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _ensure_below_limit(
        self, user: User, kind: TokenKind, error_cls: Type[TokenError]
    ) -> None:
        existing = await self._token_repository.fetch(TokenFilter(user_id=user.id, kind=kind))
        limit = self._limits[kind]
        if len(existing) > limit:
            logger.warning(
                "Token limit reached",
                user_id=user.id,
                kind=kind.value,
                existing=len(existing),
                limit=limit,
            )
            raise error_cls()

    async def _issue_token(
        self, user_id: int, kind: TokenKind, error_cls: Type[TokenError]
    ) -> Token:
        token = Token.issue(user_id, kind)
        try:
            await self._token_repository.store(token)
        except Exception as e:
            logger.error(
                "Token could not be stored", user_id=user_id, kind=kind.value, error=str(e)
            )
            raise error_cls() from e
        return token

    async def _discard_tokens(self, ctx: RequestContext, user_id: int, kind: TokenKind) -> None:
        try:
            tokens: List[Token] = await self._token_repository.fetch(
                TokenFilter(user_id=user_id, kind=kind)
            )
            if tokens:
                await self._token_repository.delete([token.id for token in tokens])
        except Exception as e:
            logger.warning(
                "Outstanding tokens could not be deleted",
                request_id=ctx.request_id,
                user_id=user_id,
                kind=kind.value,
                error=str(e),
            )

    def _activation_message(self, user: User, token: Token) -> EmailMessage:
        return EmailMessage(
            recipient=user.email,
            subject=ACTIVATION_EMAIL_SUBJECT,
            template=ACTIVATION_EMAIL_TEMPLATE,
            context={
                "login": user.login,
                "activation_url": self._build_link(self._activation_url_base, user, token),
            },
        )

    @staticmethod
    def _build_link(base_url: str, user: User, token: Token) -> str:
        return f"{base_url}?{urlencode({'id': user.id, 'token': token.value})}"

    def _generate_password(self) -> str:
        return "".join(
            secrets.choice(GENERATED_PASSWORD_ALPHABET)
            for _ in range(self._generated_password_length)
        )


def _first_set(value: Optional[int], default: int) -> int:
    return default if value is None else value

"""User Repository implementation using SQLAlchemy.

This module provides the SQL-backed user store used by the account use cases.
It enforces login/email uniqueness, owns password hashing and maps database
failures onto the domain exception hierarchy.

Concurrency:
    `get_by_id` reads the row with ``SELECT ... FOR UPDATE``, so a use case that
    looks a user up and then calls `update` holds the row lock until that
    commit. A concurrent activation or password reset of the same user waits
    and then sees the committed state. Dialects without row locks (SQLite)
    ignore the clause.
"""

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from authflow.core.exceptions import (
    DatabaseError,
    EmailIsOccupiedError,
    InvalidCredentialsError,
    LoginIsOccupiedError,
    UserNotFoundError,
)
from authflow.core.logging import mask_email
from authflow.domain.entities.user import User
from authflow.domain.interfaces.repositories import IUserRepository
from authflow.utils.security import hash_password, is_password_hash, verify_password

logger = get_logger(__name__)


class UserRepository(IUserRepository):
    """SQLAlchemy implementation of IUserRepository.

    Responsibilities:
    - User persistence (insert, update, lookups)
    - Login and email uniqueness, checked case-insensitively
    - Hashing plaintext passwords before they reach the database
    - Credential verification for login
    """

    def __init__(self, db_session: AsyncSession):
        """Initialize repository with database session.

        Args:
            db_session: SQLAlchemy async session for database operations
        """
        self.db_session = db_session

    async def store(self, user: User) -> None:
        """Insert a new user after checking that its login and email are free.

        A unique-constraint violation raised by a concurrent insert is
        re-checked so that the caller still receives the specific conflict.

        Raises:
            LoginIsOccupiedError: If another user has this login
            EmailIsOccupiedError: If another user has this email
            DatabaseError: For any other database failure
        """
        await self._ensure_available(user)

        if not is_password_hash(user.password):
            user.password = hash_password(user.password)

        self.db_session.add(user)
        try:
            await self.db_session.commit()
        except IntegrityError as e:
            await self.db_session.rollback()
            logger.warning(
                "Unique constraint violated while storing user",
                login=user.login,
                email=mask_email(user.email),
            )
            await self._ensure_available(user)
            raise DatabaseError("User could not be stored") from e
        except SQLAlchemyError as e:
            await self.db_session.rollback()
            logger.error("Error storing user", error=str(e), error_type=type(e).__name__)
            raise DatabaseError("User could not be stored") from e

        await self.db_session.refresh(user)
        logger.info("User stored", user_id=user.id, email=mask_email(user.email))

    async def update(self, user: User) -> None:
        """Write the changes made to an existing user.

        Raises:
            DatabaseError: If the update cannot be committed
        """
        if user.id is None:
            raise DatabaseError("Cannot update a user that has not been stored")
        user_id = user.id

        if not is_password_hash(user.password):
            user.password = hash_password(user.password)

        try:
            await self.db_session.merge(user)
            await self.db_session.commit()
        except SQLAlchemyError as e:
            await self.db_session.rollback()
            logger.error(
                "Error updating user",
                user_id=user_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise DatabaseError(f"User {user_id} could not be updated") from e

        logger.debug("User updated", user_id=user_id)

    async def get_by_id(self, user_id: int) -> User:
        """Load a user and lock its row until the session commits.

        Raises:
            UserNotFoundError: If no user has this identifier
        """
        statement = (
            select(User)
            .where(User.id == user_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        user = await self._first(statement, "get_by_id")
        if user is None:
            raise UserNotFoundError()
        return user

    async def get_by_email(self, email: str) -> User:
        email_value = (email or "").strip().lower()
        user = await self._first(
            select(User).where(func.lower(User.email) == email_value), "get_by_email"
        )
        if user is None:
            logger.debug("User lookup by email found nothing", email=mask_email(email_value))
            raise UserNotFoundError()
        return user

    async def get_by_credentials(self, login: str, password: str) -> User:
        """Return the user whose login and password match.

        Unknown logins and wrong passwords raise the same error so that the
        response does not reveal which accounts exist.

        Raises:
            InvalidCredentialsError: If the login or the password is wrong
        """
        login_value = (login or "").strip().lower()
        user = await self._first(
            select(User).where(func.lower(User.login) == login_value), "get_by_credentials"
        )
        if user is None or not verify_password(password, user.password):
            logger.info("Credential check failed", login=login_value)
            raise InvalidCredentialsError()
        return user

    async def _ensure_available(self, user: User) -> None:
        login_taken = await self._first(
            select(User.id).where(func.lower(User.login) == user.login.lower()),
            "check_login",
        )
        if login_taken is not None:
            raise LoginIsOccupiedError()

        email_taken = await self._first(
            select(User.id).where(func.lower(User.email) == user.email.lower()),
            "check_email",
        )
        if email_taken is not None:
            raise EmailIsOccupiedError()

    async def _first(self, statement, operation: str):
        try:
            result = await self.db_session.execute(statement)
            return result.scalars().first()
        except SQLAlchemyError as e:
            logger.error(
                "Error querying users",
                error=str(e),
                error_type=type(e).__name__,
                operation=operation,
            )
            raise DatabaseError() from e

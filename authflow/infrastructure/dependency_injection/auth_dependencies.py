"""Composition of the account use cases.

The factories here wire the SQL repositories and the email notifier into an
`AuthUseCase`. The domain layer only sees the interfaces, so tests and other
transports can substitute any of the collaborators.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from authflow.domain.interfaces import INotifier, ITokenRepository, IUserRepository
from authflow.domain.services.auth import AuthUseCase
from authflow.infrastructure.repositories import TokenRepository, UserRepository
from authflow.infrastructure.services.email import EmailNotifier


def get_user_repository(db: AsyncSession) -> IUserRepository:
    """Factory that returns the user repository implementation.

    Args:
        db: Database session shared by every repository of one request

    Returns:
        IUserRepository: SQL-backed user store
    """
    return UserRepository(db)


def get_token_repository(db: AsyncSession) -> ITokenRepository:
    return TokenRepository(db)


def get_notifier() -> INotifier:
    return EmailNotifier()


def build_auth_usecase(db: AsyncSession, notifier: Optional[INotifier] = None) -> AuthUseCase:
    """Build the account use cases for one database session.

    Args:
        db: Database session used by both repositories
        notifier: Outbound notifier; an `EmailNotifier` configured from
            settings is created when omitted

    Returns:
        AuthUseCase: Ready-to-use service with limits and links taken from settings
    """
    return AuthUseCase(
        user_repository=get_user_repository(db),
        token_repository=get_token_repository(db),
        notifier=notifier or get_notifier(),
    )

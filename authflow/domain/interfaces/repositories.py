"""Repository interfaces for abstracting data persistence in the domain layer.

This module defines the abstract base classes (interfaces) for repositories,
which act as a "port" in the context of Hexagonal Architecture. The account
use cases interact with persistence only through these interfaces.

The concrete implementations reside in the `infrastructure` layer.
"""

from abc import ABC, abstractmethod
from typing import List, Sequence

from authflow.domain.entities.token import Token, TokenFilter
from authflow.domain.entities.user import User


class IUserRepository(ABC):
    """An interface defining the contract for user persistence operations.

    Implementations own password hashing: a plaintext `password` on the
    entity passed to `store` or `update` must be hashed before it is written.

    Concurrency:
        The use cases read a user with `get_by_id`, check a flag and write it
        back with `update` without holding a lock of their own. Implementations
        must prevent lost updates between those two calls, using row-level
        locking or an optimistic version check.
    """

    @abstractmethod
    async def store(self, user: User) -> None:
        """Persists a new user and assigns its identifier in place.

        Args:
            user: The `User` entity to insert.

        Raises:
            LoginIsOccupiedError: If the login is already taken.
            EmailIsOccupiedError: If the email is already taken.
        """
        raise NotImplementedError

    @abstractmethod
    async def update(self, user: User) -> None:
        """Persists changes to an existing user.

        Args:
            user: The modified `User` entity.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_by_id(self, user_id: int) -> User:
        """Retrieves a user by their unique identifier.

        Raises:
            UserNotFoundError: If no user has this identifier.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_by_email(self, email: str) -> User:
        """Retrieves a user by their email address (case-insensitively).

        Raises:
            UserNotFoundError: If no user has this email.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_by_credentials(self, login: str, password: str) -> User:
        """Retrieves the user whose login and plaintext password match.

        Raises:
            InvalidCredentialsError: If the login is unknown or the password
                does not verify against the stored hash.
        """
        raise NotImplementedError


class ITokenRepository(ABC):
    """An interface defining the contract for single-use token persistence."""

    @abstractmethod
    async def store(self, token: Token) -> None:
        """Persists a new token and assigns its identifier in place."""
        raise NotImplementedError

    @abstractmethod
    async def fetch(self, token_filter: TokenFilter) -> List[Token]:
        """Returns the tokens matching every field set on `token_filter`, oldest first."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, ids: Sequence[int]) -> List[Token]:
        """Deletes the tokens with the given identifiers.

        Returns:
            The tokens that were deleted. Unknown identifiers are ignored.
        """
        raise NotImplementedError

"""Repository implementations for the infrastructure layer."""

from authflow.infrastructure.repositories.token_repository import TokenRepository
from authflow.infrastructure.repositories.user_repository import UserRepository

__all__ = ["TokenRepository", "UserRepository"]

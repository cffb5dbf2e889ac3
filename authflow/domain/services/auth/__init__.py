"""Account lifecycle domain services."""

from .auth_usecase import AuthUseCase

__all__ = ["AuthUseCase"]

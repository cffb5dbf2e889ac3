"""Domain services for the account lifecycle.

- AuthUseCase: signup, login, logout, activation and password reset
"""

from .auth.auth_usecase import AuthUseCase

__all__ = ["AuthUseCase"]

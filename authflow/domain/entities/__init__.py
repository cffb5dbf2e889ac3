"""Export the account lifecycle entities for use across the application."""

from .token import Token, TokenFilter, TokenKind
from .user import Role, User

__all__ = ["User", "Role", "Token", "TokenKind", "TokenFilter"]

"""Domain interfaces for dependency inversion.

These interfaces define the contracts that the infrastructure layer
implements and that the account use cases depend on.
"""

from .notifier import INotifier
from .repositories import ITokenRepository, IUserRepository

__all__ = ["INotifier", "ITokenRepository", "IUserRepository"]

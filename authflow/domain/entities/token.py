"""Single-use token entity shared by the activation and reset-password flows."""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import uuid4

from sqlalchemy import DateTime
from sqlmodel import Column, Field, SQLModel, String


class TokenKind(str, Enum):
    """Purpose of a token. Each kind forms a separate pool per user."""

    ACTIVATION = "activation"
    RESET_PASSWORD = "reset_password"


class Token(SQLModel, table=True):
    """A single-use bearer credential owned by a user.

    The `value` is the secret sent to the user and is distinct from the
    primary key. Tokens are created, then deleted once consumed or
    superseded; they are never updated in place.

    Attributes:
        id: The unique identifier for the token record.
        user_id: The owning user.
        value: Random UUID4 string used as the bearer secret.
        kind: Whether the token activates an account or resets a password.
        created_at: The timestamp of when the token was issued.
    """

    __tablename__ = "tokens"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(
        foreign_key="users.id",
        index=True,
        nullable=False,
        description="Foreign key linking the token to its User.",
    )
    value: str = Field(
        sa_column=Column(String(36), unique=True, index=True, nullable=False),
        description="Unguessable bearer secret.",
    )
    kind: TokenKind = Field(description="Pool the token belongs to.")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )

    @classmethod
    def issue(cls, user_id: int, kind: TokenKind) -> "Token":
        """Creates a fresh, unsaved token with a random value for the given user."""
        return cls(user_id=user_id, value=str(uuid4()), kind=kind)

    def __repr__(self) -> str:
        return (
            f"Token(id={self.id}, user_id={self.user_id}, kind={self.kind.value}, "
            f"value='{self.value[:8]}...')"
        )


@dataclass(frozen=True)
class TokenFilter:
    """Selects tokens by owner, value and kind. Unset fields match anything."""

    user_id: Optional[int] = None
    value: Optional[str] = None
    kind: Optional[TokenKind] = None

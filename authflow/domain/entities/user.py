from datetime import datetime, timezone  # For timestamp fields
from enum import Enum  # For type-safe role enumeration
from typing import Optional  # For optional fields

from sqlalchemy import DateTime  # For explicit timezone-aware timestamps
from sqlmodel import Column, Field, SQLModel, String  # For ORM and table definition


class Role(str, Enum):
    """Represents the role of a user within the system.

    Attributes:
        ADMIN: Confers administrative privileges for system management.
        USER: Represents a standard user with regular access rights.
    """

    ADMIN = "admin"
    USER = "user"


class User(SQLModel, table=True):
    """Represents a User entity and acts as an Aggregate Root.

    A user is created unactivated by signup, becomes activated once it proves
    control of its email address, and may have its password replaced by the
    reset-password flow. Users are never deleted by the account use cases.

    The `password` attribute holds a bcrypt hash once the user has been
    persisted. Before that, and between a password change and the next
    `update`, it may hold the plaintext; the user store hashes it on write.

    Attributes:
        id: The unique identifier for the user (primary key).
        login: A unique login name.
        email: A unique email address.
        password: The bcrypt-hashed password.
        role: The user's role.
        activated: Whether the account has been activated through email.
        created_at: The timestamp of when the user account was created.
    """

    __tablename__ = "users"

    id: Optional[int] = Field(
        default=None,  # Auto-incremented by database
        primary_key=True,
        description="The unique identifier for the user.",
    )
    login: str = Field(
        sa_column=Column(String(50), unique=True, index=True, nullable=False),
        description="Unique login name.",
    )
    email: str = Field(
        sa_column=Column(String(320), unique=True, index=True, nullable=False),
        description="Unique email address used for activation and password reset.",
    )
    password: str = Field(
        max_length=255,  # Sufficient for bcrypt hashes
        description="Bcrypt-hashed password.",
    )
    role: Role = Field(
        default=Role.USER,
        description="The user's role.",
    )
    activated: bool = Field(
        default=False,
        description="Indicates if the account has been activated through email.",
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="The timestamp of when the user account was created.",
    )

    def __repr__(self) -> str:
        return f"User(id={self.id}, login={self.login!r}, activated={self.activated})"

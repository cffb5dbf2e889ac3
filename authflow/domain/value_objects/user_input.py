"""Signup input value object."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from authflow.domain.entities.user import Role


class UserInput(BaseModel):
    """Validated data needed to create an account.

    The password is plaintext here; it is hashed by the user store when the
    account is persisted.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    login: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=8, max_length=128, repr=False)
    email: EmailStr
    role: Role = Role.USER

    @field_validator("login")
    @classmethod
    def validate_login(cls, value: str) -> str:
        """Allows alphanumeric characters, underscores and hyphens only."""
        if not value.replace("_", "").replace("-", "").isalnum():
            raise ValueError("Login may only contain letters, digits, underscores and hyphens")
        return value

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()

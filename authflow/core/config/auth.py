"""Account lifecycle and credential policy settings.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class AuthSettings(BaseSettings):
    """Defines the token policy and password hashing configuration.

    The token limits cap how many live tokens of one kind a user may hold.
    A new token is refused once the number of existing tokens exceeds the
    limit, so a user holding exactly ``LIMIT_OF_ACTIVATION_TOKENS`` tokens
    may still request one more.

    Security Note:
        - BCRYPT_WORK_FACTOR below 10 is only acceptable in tests.
        - GENERATED_PASSWORD_LENGTH applies to passwords issued by the
          reset-password flow and should stay at 12 characters or more.
    """

    LIMIT_OF_ACTIVATION_TOKENS: int = Field(default=5, ge=0)
    LIMIT_OF_RESET_PASSWORD_TOKENS: int = Field(default=5, ge=0)

    BCRYPT_WORK_FACTOR: int = Field(default=12, ge=4, le=31)
    GENERATED_PASSWORD_LENGTH: int = Field(default=16, ge=8, le=128)

"""Email configuration settings for authflow.

This module defines the parameters used to deliver activation, password reset
and new-password emails, together with the frontend links embedded in them.
"""

from pathlib import Path
from typing import Optional

from pydantic import EmailStr, Field, SecretStr
from pydantic_settings import BaseSettings

DEFAULT_TEMPLATES_DIR = str(Path(__file__).resolve().parents[2] / "templates" / "email")


class EmailSettings(BaseSettings):
    """Email configuration settings with secure defaults and validation.

    Security considerations:
    - SMTP credentials are handled as SecretStr to prevent logging
    - TLS is enforced by default for security
    - Email templates are rendered with autoescaping enabled

    Attributes:
        EMAIL_SMTP_HOST: SMTP server hostname
        EMAIL_SMTP_PORT: SMTP server port (587 for STARTTLS, 465 for SSL)
        EMAIL_SMTP_USERNAME: SMTP authentication username
        EMAIL_SMTP_PASSWORD: SMTP authentication password (SecretStr)
        EMAIL_SMTP_USE_TLS: Enable STARTTLS (recommended)
        EMAIL_SMTP_USE_SSL: Enable implicit SSL (alternative to STARTTLS)
        EMAIL_FROM_EMAIL: Default sender email address
        EMAIL_FROM_NAME: Default sender name
        EMAIL_TEMPLATES_DIR: Directory containing email templates
        ACTIVATION_URL_BASE: Frontend page that consumes activation links
        PASSWORD_RESET_URL_BASE: Frontend page that consumes reset links
        EMAIL_TEST_MODE: Log emails instead of sending them
    """

    EMAIL_SMTP_HOST: str = Field(default="localhost", description="SMTP server hostname")
    EMAIL_SMTP_PORT: int = Field(
        default=587,
        ge=1,
        le=65535,
        description="SMTP server port (587 for STARTTLS, 465 for SSL)",
    )
    EMAIL_SMTP_USERNAME: Optional[str] = Field(
        default=None, description="SMTP authentication username"
    )
    EMAIL_SMTP_PASSWORD: Optional[SecretStr] = Field(
        default=None, description="SMTP authentication password"
    )
    EMAIL_SMTP_USE_TLS: bool = Field(
        default=True, description="Enable STARTTLS (recommended for production)"
    )
    EMAIL_SMTP_USE_SSL: bool = Field(
        default=False, description="Enable implicit SSL (alternative to STARTTLS)"
    )

    EMAIL_FROM_EMAIL: EmailStr = Field(
        default="noreply@example.com", description="Default sender email address"
    )
    EMAIL_FROM_NAME: str = Field(default="authflow", description="Default sender name")

    EMAIL_TEMPLATES_DIR: str = Field(
        default=DEFAULT_TEMPLATES_DIR, description="Directory containing email templates"
    )

    ACTIVATION_URL_BASE: str = Field(
        default="http://localhost:3000/activate",
        description="Base URL for account activation links in frontend",
    )
    PASSWORD_RESET_URL_BASE: str = Field(
        default="http://localhost:3000/reset-password",
        description="Base URL for password reset links in frontend",
    )

    EMAIL_TEST_MODE: bool = Field(
        default=False, description="Enable test mode (emails logged instead of sent)"
    )

    def validate_smtp_config(self) -> None:
        """Validate SMTP configuration for production use.

        Raises:
            ValueError: If SMTP configuration is invalid or insecure
        """
        if self.EMAIL_TEST_MODE or getattr(self, "APP_ENV", "development") not in {
            "production",
            "staging",
        }:
            return

        if not self.EMAIL_SMTP_USERNAME or not self.EMAIL_SMTP_PASSWORD:
            raise ValueError(
                "EMAIL_SMTP_USERNAME and EMAIL_SMTP_PASSWORD are required in production"
            )

        if not (self.EMAIL_SMTP_USE_TLS or self.EMAIL_SMTP_USE_SSL):
            raise ValueError(
                "Either EMAIL_SMTP_USE_TLS or EMAIL_SMTP_USE_SSL must be enabled for security"
            )

        if self.EMAIL_SMTP_USE_TLS and self.EMAIL_SMTP_USE_SSL:
            raise ValueError(
                "Cannot enable both EMAIL_SMTP_USE_TLS and EMAIL_SMTP_USE_SSL simultaneously"
            )

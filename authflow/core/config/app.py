"""
Application-specific settings.
"""
from pydantic import field_validator
from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """
    Defines application-wide settings like project name, environment and logging.

    Security Note:
        - Keep LOG_JSON enabled in production so that log shippers receive
          structured events and sensitive fields stay masked.
    """
    PROJECT_NAME: str = "authflow"
    VERSION: str = "0.1.0"
    APP_ENV: str = "development"
    DEBUG: bool = False

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """
        Upper-cases the configured log level.

        Args:
            v: Log level name as provided by the environment.

        Returns:
            The normalized log level name.
        """
        return str(v).upper()

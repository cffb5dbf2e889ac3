"""
Database connection settings.
"""
import logging

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL

logger = logging.getLogger(__name__)

ASYNC_DRIVERNAME = "postgresql+asyncpg"


class DatabaseSettings(BaseSettings):
    """
    Connection parameters for the PostgreSQL database holding users and tokens.

    DATABASE_URL wins when set, which is how tests and local tools point the
    package at another backend (e.g. ``sqlite+aiosqlite``). Otherwise it is
    assembled from the POSTGRES_* fields for the asyncpg driver.

    Security Note:
        - POSTGRES_PASSWORD is a SecretStr and only leaves it when the URL is
          assembled; never log DATABASE_URL itself.
    Concurrency Note:
        - The user store locks the user row between lookup and update. Keep
          POSTGRES_POOL_TIMEOUT short so that requests waiting on a contended
          row or connection fail fast.
    """
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: SecretStr = SecretStr("postgres")
    POSTGRES_DB: str = "authflow"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = Field(ge=1, le=65535, default=5432)
    POSTGRES_POOL_SIZE: int = Field(ge=1, default=10)
    POSTGRES_MAX_OVERFLOW: int = Field(ge=0, default=20)
    POSTGRES_POOL_TIMEOUT: float = Field(ge=1.0, default=5.0)
    DATABASE_URL: str = ""

    @model_validator(mode="after")
    def assemble_database_url(self) -> "DatabaseSettings":
        """Builds DATABASE_URL from the POSTGRES_* fields when it is empty.

        The password is escaped by SQLAlchemy, so it may contain characters
        such as ``@`` or ``/``.
        """
        if self.DATABASE_URL:
            return self

        url = URL.create(
            drivername=ASYNC_DRIVERNAME,
            username=self.POSTGRES_USER,
            password=self.POSTGRES_PASSWORD.get_secret_value(),
            host=self.POSTGRES_HOST,
            port=self.POSTGRES_PORT,
            database=self.POSTGRES_DB,
        )
        self.DATABASE_URL = url.render_as_string(hide_password=False)
        logger.debug("Assembled DATABASE_URL for %s", url.render_as_string())
        return self

from __future__ import annotations

import re
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Database configuration and general environment.

    Reads from environment variables (or .env via pydantic-settings):
      - DATABASE_URL (any SQLAlchemy async URL, takes precedence)
      - POSTGRES_URL
      - POSTGRES_USER
      - POSTGRES_PASSWORD
      - POSTGRES_DB
      - POSTGRES_HOST
      - POSTGRES_PORT
    """

    DATABASE_URL: Optional[str] = Field(
        default=None,
        description="Full SQLAlchemy URL, e.g. sqlite+aiosqlite:///./tasvideos.db",
    )

    POSTGRES_URL: Optional[str] = Field(
        default=None, description="If provided, full PostgreSQL connection URL."
    )
    POSTGRES_USER: Optional[str] = Field(default=None, description="DB username")
    POSTGRES_PASSWORD: Optional[str] = Field(default=None, description="DB password")
    POSTGRES_DB: Optional[str] = Field(default=None, description="Database name")
    POSTGRES_PORT: Optional[int] = Field(
        default=5432, description="Database port (default 5432)"
    )
    POSTGRES_HOST: Optional[str] = Field(
        default="localhost", description="Database host (default localhost)"
    )

    SQL_ECHO: bool = Field(
        default=False, description="Echo SQL statements for debugging (default False)"
    )

    ENVIRONMENT: Optional[str] = Field(
        default=None, description="Environment label (dev/test/prod)"
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @property
    def database_url(self) -> str:
        """
        Compute the configured database URL. Prefers DATABASE_URL, then
        POSTGRES_URL, otherwise builds one from the individual POSTGRES_* variables.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL
        if self.POSTGRES_URL:
            return self.POSTGRES_URL

        if not all([self.POSTGRES_USER, self.POSTGRES_PASSWORD, self.POSTGRES_DB]):
            raise ValueError(
                "Database configuration missing. Ensure DATABASE_URL, POSTGRES_URL or "
                "POSTGRES_USER, POSTGRES_PASSWORD, and POSTGRES_DB are set in the environment."
            )
        host = self.POSTGRES_HOST or "localhost"
        port = self.POSTGRES_PORT or 5432
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{host}:{port}/{self.POSTGRES_DB}"

    @property
    def async_database_url(self) -> str:
        """
        Convert the URL to an async SQLAlchemy URL. PostgreSQL URLs are
        normalized to asyncpg; anything else is returned unchanged.
        """
        url = self.database_url
        if not url.startswith("postgresql"):
            return url
        if url.startswith("postgresql+asyncpg://"):
            return url
        return re.sub(r"^postgresql(\+\w+)?://", "postgresql+asyncpg://", url)


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return a settings object populated from the environment."""
    return Settings()

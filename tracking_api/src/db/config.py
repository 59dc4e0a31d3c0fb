from __future__ import annotations

import re
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Database settings for the relational store.

    A single connection string configures the store:
      - POSTGRES_DSN

    Plain postgresql:// URLs are upgraded to the asyncpg driver; other
    SQLAlchemy async URLs (e.g. sqlite+aiosqlite://) are used as given.
    """

    POSTGRES_DSN: Optional[str] = Field(
        default=None, description="Full connection URL for the relational store."
    )

    # SQLAlchemy engine options
    SQL_ECHO: bool = Field(
        default=False, description="Echo SQL statements for debugging (default False)"
    )

    # Deadlines
    CONNECT_TIMEOUT_SECONDS: float = Field(
        default=10.0, gt=0, description="Deadline for the initial connection check"
    )
    STATEMENT_TIMEOUT_SECONDS: Optional[float] = Field(
        default=30.0, description="Per-statement deadline; None disables it"
    )

    # General environment
    ENVIRONMENT: Optional[str] = Field(
        default=None, description="Environment label (dev/test/prod)"
    )

    # Automatically load from .env at runtime. The orchestrator will provide these.
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @property
    def database_url(self) -> str:
        """
        Return the configured connection string.

        Raises:
            ValueError: if POSTGRES_DSN is not set.
        """
        if not self.POSTGRES_DSN:
            raise ValueError(
                "Database configuration missing. Ensure POSTGRES_DSN is set in the environment."
            )
        return self.POSTGRES_DSN

    @property
    def async_database_url(self) -> str:
        """
        Convert the base URL to an asyncpg-enabled SQLAlchemy URL when it targets Postgres.
        """
        url = self.database_url
        if url.startswith("postgresql+asyncpg://"):
            return url
        if url.startswith("postgres://"):
            return "postgresql+asyncpg://" + url[len("postgres://"):]
        # Replace any existing driver marker or bare scheme with +asyncpg
        return re.sub(r"^postgresql(\+\w+)?://", "postgresql+asyncpg://", url)


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return database settings read from the environment."""
    return Settings()

from __future__ import annotations

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from .base import Base
from .config import Settings

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """
    Build the AsyncEngine for the configured store.

    Raises:
        ValueError: if the connection string is missing.
    """
    url = settings.async_database_url
    options = {"echo": settings.SQL_ECHO}
    if not url.startswith("sqlite"):
        options["pool_pre_ping"] = True
    return create_async_engine(url, **options)


# PUBLIC_INTERFACE
def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Return the session factory bound to the given engine."""
    return async_sessionmaker(
        bind=engine, expire_on_commit=False, autoflush=False, autocommit=False
    )


# PUBLIC_INTERFACE
async def check_connection(engine: AsyncEngine) -> None:
    """Open a connection and run a trivial statement; raises on failure."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


# PUBLIC_INTERFACE
async def create_schema(engine: AsyncEngine) -> None:
    """
    Create any missing tables registered on Base.metadata.

    Existing tables are left untouched; there is no migration step.
    """
    # Ensure all mapped classes are registered before create_all
    from . import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Schema ensured for tables: %s", ", ".join(sorted(Base.metadata.tables)))

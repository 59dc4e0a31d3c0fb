from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from src.core.errors import FatalStartupError
from src.core.settings import AppSettings
from src.db.config import Settings
from src.db.seed import seed_failure_taxonomy
from src.db.session import (
    check_connection,
    create_engine_from_settings,
    create_schema,
    create_session_maker,
)

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """
    Process-wide resources created once at startup and shared by every request.

    Routes reach it through request.app.state.context (see src.core.deps).
    """

    settings: AppSettings
    db_settings: Settings
    engine: AsyncEngine
    session_maker: async_sessionmaker[AsyncSession]

    @property
    def statement_timeout(self) -> Optional[float]:
        return self.db_settings.STATEMENT_TIMEOUT_SECONDS

    async def close(self) -> None:
        await self.engine.dispose()


# PUBLIC_INTERFACE
async def open_app_context(settings: AppSettings, db_settings: Settings) -> AppContext:
    """
    Connect to the store and prepare the schema.

    Raises:
        FatalStartupError: the DSN is missing or the initial connection fails
        within CONNECT_TIMEOUT_SECONDS.
    """
    try:
        engine = create_engine_from_settings(db_settings)
    except ValueError as exc:
        logger.critical("Invalid database configuration: %s", exc)
        raise FatalStartupError(str(exc)) from exc

    try:
        await asyncio.wait_for(check_connection(engine), timeout=db_settings.CONNECT_TIMEOUT_SECONDS)
    except (asyncio.TimeoutError, SQLAlchemyError, OSError) as exc:
        logger.critical("Unable to connect to the relational store. Shutting down")
        await engine.dispose()
        raise FatalStartupError("Unable to connect to the relational store") from exc
    logger.info("Connected to the relational store")

    ctx = AppContext(
        settings=settings,
        db_settings=db_settings,
        engine=engine,
        session_maker=create_session_maker(engine),
    )

    if settings.CREATE_SCHEMA_ON_STARTUP:
        await create_schema(engine)

    if settings.AUTO_SEED:
        logger.info("Running failure taxonomy seeding...")
        async with ctx.session_maker() as session:
            await seed_failure_taxonomy(session)

    return ctx

from __future__ import annotations

import asyncio
import logging
from typing import Any, Iterable, Optional

from sqlalchemy import Executable
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import StorageError

logger = logging.getLogger(__name__)


class BaseRepository:
    """
    Base class for repositories providing common helpers.

    Every statement runs under the configured per-call deadline. Driver and
    timeout failures roll back the session and surface as StorageError; the
    original exception is chained but its text is not exposed to callers.
    """

    def __init__(self, session: AsyncSession, statement_timeout: Optional[float] = None) -> None:
        self.session = session
        self.statement_timeout = statement_timeout

    async def _rollback_quietly(self) -> None:
        try:
            await self.session.rollback()
        except SQLAlchemyError:
            logger.exception("Rollback after failed statement also failed")

    async def _guard(self, awaitable, action: str):
        try:
            return await asyncio.wait_for(awaitable, timeout=self.statement_timeout)
        except asyncio.TimeoutError as exc:
            logger.error("%s timed out after %ss", action, self.statement_timeout)
            await self._rollback_quietly()
            raise StorageError(f"{action} timed out") from exc
        except SQLAlchemyError as exc:
            logger.error("%s failed: %s", action, exc.__class__.__name__)
            await self._rollback_quietly()
            raise StorageError(f"{action} failed") from exc

    async def execute(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute a SQLAlchemy statement."""
        return await self._guard(self.session.execute(statement, params or {}), "Statement")

    async def scalars(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute and return scalars."""
        result = await self.execute(statement, params)
        return result.scalars()

    async def scalar_one_or_none(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute and return a single scalar or None."""
        result = await self.execute(statement, params)
        return result.scalar_one_or_none()

    async def commit(self) -> None:
        """Commit current transaction."""
        await self._guard(self.session.commit(), "Commit")

    async def add_all(self, entities: Iterable[Any]) -> None:
        """Add multiple entities to session."""
        self.session.add_all(list(entities))

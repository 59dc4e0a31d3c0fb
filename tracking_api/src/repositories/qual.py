from __future__ import annotations

from typing import Iterable, List, Optional, Set

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models.quality import Failure, FailureGroup, Inspection
from .base import BaseRepository


class QualityRepository(BaseRepository):
    """Repository for inspections and the failure taxonomy."""

    def __init__(self, session: AsyncSession, statement_timeout: Optional[float] = None) -> None:
        super().__init__(session, statement_timeout)

    async def add_inspections(self, rows: List[Inspection]) -> List[Inspection]:
        """Persist inspection rows in one transaction; ids are assigned by the store."""
        await self.add_all(rows)
        await self.commit()
        return rows

    async def list_inspections(
        self,
        *,
        production_order_id: str,
        limit: int,
        offset: int,
    ) -> List[Inspection]:
        stmt = (
            select(Inspection)
            .where(Inspection.production_order_id == production_order_id)
            .order_by(Inspection.inspected_at.asc(), Inspection.id.asc())
            .offset(offset)
            .limit(limit)
        )
        res = await self.scalars(stmt)
        return list(res)

    async def list_failure_groups(self) -> List[FailureGroup]:
        res = await self.scalars(select(FailureGroup).order_by(FailureGroup.code))
        return list(res)

    async def list_failures(self, *, group_code: Optional[str] = None) -> List[Failure]:
        stmt = select(Failure)
        if group_code:
            stmt = stmt.where(Failure.failure_group_code == group_code)
        stmt = stmt.order_by(Failure.code)
        res = await self.scalars(stmt)
        return list(res)

    async def unknown_failure_codes(self, codes: Iterable[str]) -> Set[str]:
        """Return the subset of codes that are not in the failure taxonomy."""
        wanted = set(codes)
        if not wanted:
            return set()
        res = await self.scalars(select(Failure.code).where(Failure.code.in_(wanted)))
        return wanted - set(res)

"""Tests for the production order repository against SQLite."""

import asyncio
from datetime import datetime

import pytest
from sqlalchemy import update
from sqlalchemy.exc import OperationalError

from src.core.errors import NotFoundError, OrderClosedError, StorageError
from src.db.models.production import ProductionOrder
from src.repositories.production import SqlProductionOrderRepository
from src.schemas.production import ProductionOrderCreate


def _order(order_id: str, size: int = 10, code: str = "M1") -> ProductionOrderCreate:
    return ProductionOrderCreate(
        id=order_id,
        model_internal_code=code,
        model_internal_name="Model",
        model_trade_name="Trade",
        order_size=size,
    )


class TestSqlProductionOrderRepository:
    """Tests for SqlProductionOrderRepository."""

    @pytest.mark.asyncio
    async def test_save_then_get(self, session):
        """Saved order is open and carries the given fields."""
        repo = SqlProductionOrderRepository(session, statement_timeout=5)
        await repo.save(_order("PO-1", size=25, code="M7"))

        order = await repo.get("PO-1")

        assert order.id == "PO-1"
        assert order.model_internal_code == "M7"
        assert order.order_size == 25
        assert order.start is not None
        assert order.end is None

    @pytest.mark.asyncio
    async def test_duplicate_id_raises_storage_error(self, session):
        repo = SqlProductionOrderRepository(session)
        await repo.save(_order("PO-1"))

        with pytest.raises(StorageError):
            await repo.save(_order("PO-1"))

        # Session stays usable after the failed insert
        assert (await repo.get("PO-1")).order_size == 10

    @pytest.mark.asyncio
    async def test_get_unknown_raises_not_found(self, session):
        repo = SqlProductionOrderRepository(session)

        with pytest.raises(NotFoundError):
            await repo.get("missing")

    @pytest.mark.asyncio
    async def test_not_found_is_storage_error(self, session):
        repo = SqlProductionOrderRepository(session)

        with pytest.raises(StorageError):
            await repo.get("missing")

    @pytest.mark.asyncio
    async def test_close_sets_end(self, session):
        repo = SqlProductionOrderRepository(session)
        await repo.save(_order("PO-1"))

        await repo.close("PO-1")
        session.expire_all()
        order = await repo.get("PO-1")

        assert order.end is not None
        assert order.is_open is False

    @pytest.mark.asyncio
    async def test_close_unknown_raises_not_found(self, session):
        repo = SqlProductionOrderRepository(session)

        with pytest.raises(NotFoundError):
            await repo.close("missing")

    @pytest.mark.asyncio
    async def test_close_twice_raises_order_closed(self, session):
        repo = SqlProductionOrderRepository(session)
        await repo.save(_order("PO-1"))
        await repo.close("PO-1")

        with pytest.raises(OrderClosedError):
            await repo.close("PO-1")

    @pytest.mark.asyncio
    async def test_get_open_excludes_closed(self, session):
        """Open orders after creating A (open) and B (closed) is exactly {A}."""
        repo = SqlProductionOrderRepository(session)
        await repo.save(_order("A"))
        await repo.save(_order("B"))
        await repo.close("B")

        open_orders = await repo.get_open()

        assert {o.id for o in open_orders} == {"A"}

    @pytest.mark.asyncio
    async def test_get_open_empty(self, session):
        repo = SqlProductionOrderRepository(session)

        assert await repo.get_open() == []


class TestOpenOrdering:
    """get_open orders ascending by start, ties broken by id."""

    async def _set_start(self, session, order_id, start):
        await session.execute(
            update(ProductionOrder)
            .where(ProductionOrder.id == order_id)
            .values({ProductionOrder.start: start})
            .execution_options(synchronize_session=False)
        )
        await session.commit()

    @pytest.mark.asyncio
    async def test_ordered_by_start(self, session):
        repo = SqlProductionOrderRepository(session)
        for order_id in ("A", "B", "C"):
            await repo.save(_order(order_id))
        await self._set_start(session, "A", datetime(2024, 1, 3, 8, 0))
        await self._set_start(session, "B", datetime(2024, 1, 1, 8, 0))
        await self._set_start(session, "C", datetime(2024, 1, 2, 8, 0))

        open_orders = await repo.get_open()

        assert [o.id for o in open_orders] == ["B", "C", "A"]

    @pytest.mark.asyncio
    async def test_equal_start_ordered_by_id(self, session):
        repo = SqlProductionOrderRepository(session)
        for order_id in ("PO-3", "PO-1", "PO-2"):
            await repo.save(_order(order_id))
            await self._set_start(session, order_id, datetime(2024, 1, 1, 8, 0))

        open_orders = await repo.get_open()

        assert [o.id for o in open_orders] == ["PO-1", "PO-2", "PO-3"]


class SlowSession:
    """Session stand-in whose statements outlive the deadline."""

    def __init__(self, rollback_fails: bool = False):
        self.rolled_back = False
        self.rollback_fails = rollback_fails

    async def execute(self, statement, params=None):
        await asyncio.sleep(1)

    async def commit(self):
        pass

    async def rollback(self):
        self.rolled_back = True
        if self.rollback_fails:
            raise OperationalError("ROLLBACK", {}, Exception("connection lost"))


class TestStatementDeadline:
    @pytest.mark.asyncio
    async def test_timeout_raises_storage_error_and_rolls_back(self):
        slow = SlowSession()
        repo = SqlProductionOrderRepository(slow, statement_timeout=0.01)

        with pytest.raises(StorageError):
            await repo.save(_order("PO-1"))

        assert slow.rolled_back is True

    @pytest.mark.asyncio
    async def test_failing_rollback_still_raises_storage_error(self):
        slow = SlowSession(rollback_fails=True)
        repo = SqlProductionOrderRepository(slow, statement_timeout=0.01)

        with pytest.raises(StorageError):
            await repo.get_open()

        assert slow.rolled_back is True

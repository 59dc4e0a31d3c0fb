from __future__ import annotations

from typing import List, Optional, Protocol

from sqlalchemy import func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import NotFoundError, OrderClosedError
from src.db.models.production import ProductionOrder
from src.schemas.production import ProductionOrderCreate
from .base import BaseRepository


class ProductionOrderRepository(Protocol):
    """Persistence contract for the production-order lifecycle."""

    async def save(self, order: ProductionOrderCreate) -> None: ...

    async def get(self, order_id: str) -> ProductionOrder: ...

    async def close(self, order_id: str) -> None: ...

    async def get_open(self) -> List[ProductionOrder]: ...


class SqlProductionOrderRepository(BaseRepository):
    """Repository for production orders backed by the production_orders table."""

    def __init__(self, session: AsyncSession, statement_timeout: Optional[float] = None) -> None:
        super().__init__(session, statement_timeout)

    async def save(self, order: ProductionOrderCreate) -> None:
        """
        Insert a new open order; the store stamps start and leaves end null.

        Raises:
            StorageError: on any insert failure, including a duplicate id.
        """
        stmt = insert(ProductionOrder).values(
            {
                ProductionOrder.id: order.id,
                ProductionOrder.model_internal_code: order.model_internal_code,
                ProductionOrder.model_internal_name: order.model_internal_name,
                ProductionOrder.model_trade_name: order.model_trade_name,
                ProductionOrder.order_size: order.order_size,
                ProductionOrder.start: func.now(),
                ProductionOrder.end: None,
            }
        )
        await self.execute(stmt)
        await self.commit()

    async def find(self, order_id: str) -> Optional[ProductionOrder]:
        stmt = select(ProductionOrder).where(ProductionOrder.id == order_id)
        return await self.scalar_one_or_none(stmt)

    async def get(self, order_id: str) -> ProductionOrder:
        order = await self.find(order_id)
        if order is None:
            raise NotFoundError(f"Production order {order_id} not found")
        return order

    async def close(self, order_id: str) -> None:
        """
        Stamp end on an open order.

        Raises:
            NotFoundError: if no order has this id.
            OrderClosedError: if the order is already closed.
        """
        stmt = (
            update(ProductionOrder)
            .where(ProductionOrder.id == order_id, ProductionOrder.end.is_(None))
            .values({ProductionOrder.end: func.now()})
            .execution_options(synchronize_session=False)
        )
        result = await self.execute(stmt)
        if result.rowcount == 0:
            # Distinguish unknown id from an already closed order
            await self.get(order_id)
            raise OrderClosedError(f"Production order {order_id} is already closed")
        await self.commit()

    async def get_open(self) -> List[ProductionOrder]:
        stmt = (
            select(ProductionOrder)
            .where(ProductionOrder.end.is_(None))
            .order_by(ProductionOrder.start.asc(), ProductionOrder.id.asc())
        )
        res = await self.scalars(stmt)
        return list(res)

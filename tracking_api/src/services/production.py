from __future__ import annotations

import logging
from typing import List, Protocol

from src.core.errors import ValidationError
from src.db.models.production import ProductionOrder
from src.repositories.production import ProductionOrderRepository
from src.schemas.production import ProductionOrderCreate

logger = logging.getLogger(__name__)


class ProductionOrderService(Protocol):
    """Business operations on the production-order lifecycle."""

    async def new_order(self, order: ProductionOrderCreate) -> None: ...

    async def get_order_by_id(self, order_id: str) -> ProductionOrder: ...

    async def get_open_orders(self) -> List[ProductionOrder]: ...

    async def close_order(self, order_id: str) -> None: ...


def _require_id(order_id: str) -> None:
    if not order_id or not order_id.strip():
        raise ValidationError("Production order id must not be empty")


class ProductionService:
    """
    Domain service for production orders.

    Validates input and delegates persistence to the repository; errors from
    the repository propagate unchanged.
    """

    def __init__(self, repository: ProductionOrderRepository) -> None:
        self.repository = repository

    # PUBLIC_INTERFACE
    async def new_order(self, order: ProductionOrderCreate) -> None:
        """
        Register a new open production order.

        Raises:
            ValidationError: blank id or non-positive order_size.
            StorageError: the insert failed (including a duplicate id).
        """
        _require_id(order.id)
        if order.order_size <= 0:
            raise ValidationError("order_size must be greater than zero")
        await self.repository.save(order)
        logger.info("Production order %s created (size=%d)", order.id, order.order_size)

    # PUBLIC_INTERFACE
    async def get_order_by_id(self, order_id: str) -> ProductionOrder:
        _require_id(order_id)
        return await self.repository.get(order_id)

    # PUBLIC_INTERFACE
    async def get_open_orders(self) -> List[ProductionOrder]:
        return await self.repository.get_open()

    # PUBLIC_INTERFACE
    async def close_order(self, order_id: str) -> None:
        """Close an open order. Closed orders are terminal."""
        _require_id(order_id)
        await self.repository.close(order_id)
        logger.info("Production order %s closed", order_id)

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from src.core.deps import get_production_service
from src.core.errors import ValidationError
from src.schemas.production import ProductionOrderCreate, ProductionOrderRead
from src.services.production import ProductionOrderService

router = APIRouter(prefix="/production-orders", tags=["Production"])


def _require_order_id(orderid: Optional[str]) -> str:
    if not orderid:
        raise ValidationError("orderid query parameter is required")
    return orderid


# PUBLIC_INTERFACE
@router.post(
    "",
    summary="Create production order",
    description="Register a new open production order. start is stamped by the store.",
    response_class=Response,
)
async def create_production_order(
    payload: ProductionOrderCreate,
    service: ProductionOrderService = Depends(get_production_service),
) -> Response:
    await service.new_order(payload)
    return Response(status_code=status.HTTP_200_OK)


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=ProductionOrderRead,
    summary="Get production order",
    description="Get a production order by the orderid query parameter.",
)
async def get_production_order(
    orderid: Optional[str] = Query(None, description="Production order id"),
    service: ProductionOrderService = Depends(get_production_service),
) -> ProductionOrderRead:
    order_id = _require_order_id(orderid)
    order = await service.get_order_by_id(order_id)
    return ProductionOrderRead.model_validate(order)


# PUBLIC_INTERFACE
@router.get(
    "/open",
    response_model=List[ProductionOrderRead],
    summary="List open production orders",
    description="List orders without an end timestamp, ordered by start.",
)
async def list_open_production_orders(
    service: ProductionOrderService = Depends(get_production_service),
) -> List[ProductionOrderRead]:
    orders = await service.get_open_orders()
    return [ProductionOrderRead.model_validate(x) for x in orders]


# PUBLIC_INTERFACE
@router.api_route(
    "/close",
    methods=["GET", "POST"],
    summary="Close production order",
    description="Stamp the end timestamp on an open order. Closed orders are terminal.",
    response_class=Response,
)
async def close_production_order(
    orderid: Optional[str] = Query(None, description="Production order id"),
    service: ProductionOrderService = Depends(get_production_service),
) -> Response:
    order_id = _require_order_id(orderid)
    await service.close_order(order_id)
    return Response(status_code=status.HTTP_200_OK)

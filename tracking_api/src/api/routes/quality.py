from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from src.core.deps import get_inspection_service
from src.core.errors import ValidationError
from src.schemas.quality import (
    FailureGroupRead,
    FailureRead,
    InspectionRead,
    InspectionSubmission,
)
from src.services.quality import InspectionService

router = APIRouter(tags=["Quality"])


# PUBLIC_INTERFACE
@router.post(
    "/inspections",
    response_model=List[InspectionRead],
    summary="Submit inspection",
    description=(
        "Record an inspection for a part of an open production order. "
        "One failed row is stored per failure code in `errors`."
    ),
)
async def submit_inspection(
    payload: InspectionSubmission,
    service: InspectionService = Depends(get_inspection_service),
) -> List[InspectionRead]:
    rows = await service.submit(payload)
    return [InspectionRead.model_validate(x) for x in rows]


# PUBLIC_INTERFACE
@router.get(
    "/inspections",
    response_model=List[InspectionRead],
    summary="List inspections",
    description="List inspections of a production order ordered by inspection time.",
)
async def list_inspections(
    orderid: Optional[str] = Query(None, description="Production order id"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    service: InspectionService = Depends(get_inspection_service),
) -> List[InspectionRead]:
    if not orderid:
        raise ValidationError("orderid query parameter is required")
    rows = await service.list_for_order(orderid, limit=limit, offset=offset)
    return [InspectionRead.model_validate(x) for x in rows]


# PUBLIC_INTERFACE
@router.get(
    "/failures",
    response_model=List[FailureRead],
    summary="List failure codes",
)
async def list_failures(
    group: Optional[str] = Query(None, description="Filter by failure group code"),
    service: InspectionService = Depends(get_inspection_service),
) -> List[FailureRead]:
    rows = await service.list_failures(group)
    return [FailureRead.model_validate(x) for x in rows]


# PUBLIC_INTERFACE
@router.get(
    "/failures/groups",
    response_model=List[FailureGroupRead],
    summary="List failure groups",
)
async def list_failure_groups(
    service: InspectionService = Depends(get_inspection_service),
) -> List[FailureGroupRead]:
    rows = await service.list_failure_groups()
    return [FailureGroupRead.model_validate(x) for x in rows]

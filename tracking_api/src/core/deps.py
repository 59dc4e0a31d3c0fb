"""
FastAPI dependency providers.

Repositories and services are built per request by constructor injection
from the AppContext stored on app.state at startup.
"""
from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.context import AppContext
from src.repositories.production import ProductionOrderRepository, SqlProductionOrderRepository
from src.repositories.qual import QualityRepository
from src.services.production import ProductionService
from src.services.quality import InspectionService


# PUBLIC_INTERFACE
def get_app_context(request: Request) -> AppContext:
    """Return the AppContext created by the application lifespan."""
    return request.app.state.context


# PUBLIC_INTERFACE
async def get_session(
    ctx: AppContext = Depends(get_app_context),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a request-scoped AsyncSession."""
    async with ctx.session_maker() as session:
        yield session


# PUBLIC_INTERFACE
def get_production_order_repository(
    ctx: AppContext = Depends(get_app_context),
    session: AsyncSession = Depends(get_session),
) -> SqlProductionOrderRepository:
    return SqlProductionOrderRepository(session, ctx.statement_timeout)


# PUBLIC_INTERFACE
def get_quality_repository(
    ctx: AppContext = Depends(get_app_context),
    session: AsyncSession = Depends(get_session),
) -> QualityRepository:
    return QualityRepository(session, ctx.statement_timeout)


# PUBLIC_INTERFACE
def get_production_service(
    repository: ProductionOrderRepository = Depends(get_production_order_repository),
) -> ProductionService:
    return ProductionService(repository)


# PUBLIC_INTERFACE
def get_inspection_service(
    quality: QualityRepository = Depends(get_quality_repository),
    orders: ProductionOrderRepository = Depends(get_production_order_repository),
) -> InspectionService:
    return InspectionService(quality, orders)

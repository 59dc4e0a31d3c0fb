from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ProductionOrderCreate(BaseModel):
    """Create production order payload. start/end are assigned by the store."""
    id: str = Field("", description="Caller-assigned unique order id")
    model_internal_code: Optional[str] = Field(None)
    model_internal_name: Optional[str] = Field(None)
    model_trade_name: Optional[str] = Field(None)
    order_size: int = Field(0, description="Number of units to produce")


class ProductionOrderRead(BaseModel):
    """Production order read model; end is null while the order is open."""
    id: str = Field(..., description="Order id")
    model_internal_code: Optional[str] = Field(None)
    model_internal_name: Optional[str] = Field(None)
    model_trade_name: Optional[str] = Field(None)
    order_size: int = Field(..., description="Number of units to produce")
    start: datetime = Field(..., description="Creation timestamp")
    end: Optional[datetime] = Field(None, description="Close timestamp")

    model_config = ConfigDict(from_attributes=True)

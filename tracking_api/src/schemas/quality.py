from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class InspectionSubmission(BaseModel):
    """Inspection submission as sent by inspection stations; every field is optional."""
    production_order_id: Optional[str] = Field(None)
    part_id: Optional[str] = Field(None)
    inspection_id: Optional[int] = Field(None, description="Client-side id; not stored")
    timestamp: Optional[datetime] = Field(None, description="Defaults to server time")
    inspector_id: Optional[int] = Field(None)
    inspector_name: Optional[str] = Field(None)
    errors: Optional[List[str]] = Field(None, description="Failure codes found")
    comments: Optional[str] = Field(None)
    failed: Optional[bool] = Field(None)


class InspectionRead(BaseModel):
    """Recorded inspection row."""
    id: int = Field(..., description="Inspection id")
    production_order_id: str = Field(...)
    part_id: Optional[str] = Field(None)
    inspector_id: Optional[int] = Field(None)
    inspector_name: Optional[str] = Field(None)
    failure_code: Optional[str] = Field(None)
    passed: bool = Field(...)
    comment: Optional[str] = Field(None)
    inspected_at: datetime = Field(...)

    model_config = ConfigDict(from_attributes=True)


class FailureGroupRead(BaseModel):
    code: str
    name: str
    comment: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class FailureRead(BaseModel):
    code: str
    failure_group_code: str
    name: str
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, Boolean, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.db.base import Base


class Inspection(Base):
    """Pass/fail check of one part within a production order."""
    __tablename__ = "inspections"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Weak references: no FK so inspections survive independent of orders/taxonomy
    production_order_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    part_id: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    inspector_id: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    inspector_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    failure_code: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    passed: Mapped[bool] = mapped_column(Boolean, nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    inspected_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class FailureGroup(Base):
    """Group of related failure codes (e.g. dimensional, surface)."""
    __tablename__ = "failure_groups"

    code: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class Failure(Base):
    """Individual failure code within a group."""
    __tablename__ = "failures"

    code: Mapped[str] = mapped_column(Text, primary_key=True)
    failure_group_code: Mapped[str] = mapped_column(
        Text, ForeignKey("failure_groups.code", ondelete="RESTRICT"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.db.base import Base


class ProductionOrder(Base):
    """A manufacturing run for one product model; open until end is set."""
    __tablename__ = "production_orders"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    model_internal_code: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    model_internal_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    model_trade_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    order_size: Mapped[int] = mapped_column(Integer, nullable=False)
    start: Mapped[datetime] = mapped_column("start_timestamp", DateTime(timezone=True), nullable=False)
    end: Mapped[Optional[datetime]] = mapped_column("end_timestamp", DateTime(timezone=True), nullable=True)

    @property
    def is_open(self) -> bool:
        return self.end is None

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional

from src.core.errors import OrderClosedError, ValidationError
from src.db.models.quality import Failure, FailureGroup, Inspection
from src.repositories.production import ProductionOrderRepository
from src.repositories.qual import QualityRepository
from src.schemas.quality import InspectionSubmission

logger = logging.getLogger(__name__)


class InspectionService:
    """
    Records inspection submissions against open production orders.

    A submission listing failure codes becomes one failed row per code; a
    submission without codes becomes a single row whose passed flag is the
    inverse of `failed`.
    """

    def __init__(self, quality: QualityRepository, orders: ProductionOrderRepository) -> None:
        self.quality = quality
        self.orders = orders

    # PUBLIC_INTERFACE
    async def submit(self, submission: InspectionSubmission) -> List[Inspection]:
        """
        Validate and persist an inspection submission.

        Raises:
            ValidationError: missing order id or unknown failure codes.
            NotFoundError: the production order does not exist.
            OrderClosedError: the production order is closed.
        """
        order_id = (submission.production_order_id or "").strip()
        if not order_id:
            raise ValidationError("production_order_id is required")

        order = await self.orders.get(order_id)
        if order.end is not None:
            raise OrderClosedError(f"Production order {order_id} is closed")

        codes = list(dict.fromkeys(submission.errors or []))
        unknown = await self.quality.unknown_failure_codes(codes)
        if unknown:
            raise ValidationError(f"Unknown failure codes: {', '.join(sorted(unknown))}")

        inspected_at = submission.timestamp or datetime.now(tz=timezone.utc)
        rows = [
            self._build_row(submission, order_id, inspected_at, code, passed=False)
            for code in codes
        ]
        if not rows:
            rows.append(
                self._build_row(submission, order_id, inspected_at, None, passed=not bool(submission.failed))
            )

        recorded = await self.quality.add_inspections(rows)
        logger.info(
            "Recorded %d inspection row(s) for order %s part %s",
            len(recorded), order_id, submission.part_id or "-",
        )
        return recorded

    @staticmethod
    def _build_row(
        submission: InspectionSubmission,
        order_id: str,
        inspected_at: datetime,
        failure_code: Optional[str],
        *,
        passed: bool,
    ) -> Inspection:
        return Inspection(
            production_order_id=order_id,
            part_id=submission.part_id,
            inspector_id=submission.inspector_id,
            inspector_name=submission.inspector_name,
            failure_code=failure_code,
            passed=passed,
            comment=submission.comments,
            inspected_at=inspected_at,
        )

    # PUBLIC_INTERFACE
    async def list_for_order(self, order_id: str, *, limit: int = 100, offset: int = 0) -> List[Inspection]:
        if not order_id or not order_id.strip():
            raise ValidationError("Production order id must not be empty")
        return await self.quality.list_inspections(
            production_order_id=order_id, limit=limit, offset=offset
        )

    # PUBLIC_INTERFACE
    async def list_failure_groups(self) -> List[FailureGroup]:
        return await self.quality.list_failure_groups()

    # PUBLIC_INTERFACE
    async def list_failures(self, group_code: Optional[str] = None) -> List[Failure]:
        return await self.quality.list_failures(group_code=group_code)

"""
Database seeding utilities for the failure taxonomy.

Seeds:
- Failure groups (dimensional, surface, assembly, functional)
- A few failure codes per group

Seeding is idempotent: groups and codes already present are left untouched.
Runs at startup when AUTO_SEED is enabled.
"""

from __future__ import annotations

import logging
from typing import List, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models.quality import Failure, FailureGroup

logger = logging.getLogger(__name__)

# (code, name, comment)
FAILURE_GROUPS: List[Tuple[str, str, str | None]] = [
    ("DIM", "Dimensional", "Out-of-tolerance measurements"),
    ("SUR", "Surface", "Cosmetic and finish defects"),
    ("ASM", "Assembly", "Missing or misassembled components"),
    ("FUN", "Functional", "Failed functional or electrical tests"),
]

# (code, group code, name, description)
FAILURES: List[Tuple[str, str, str, str | None]] = [
    ("DIM-01", "DIM", "Oversize", "Measured dimension above upper tolerance"),
    ("DIM-02", "DIM", "Undersize", "Measured dimension below lower tolerance"),
    ("SUR-01", "SUR", "Scratch", "Visible scratch on finished surface"),
    ("SUR-02", "SUR", "Dent", "Deformation of the surface"),
    ("SUR-03", "SUR", "Paint defect", "Runs, orange peel or missing coating"),
    ("ASM-01", "ASM", "Missing component", None),
    ("ASM-02", "ASM", "Loose fastener", "Fastener below torque specification"),
    ("FUN-01", "FUN", "No power", "Unit does not power on"),
    ("FUN-02", "FUN", "Test out of range", "Functional test reading out of range"),
]


# PUBLIC_INTERFACE
async def seed_failure_taxonomy(session: AsyncSession) -> int:
    """
    Insert missing failure groups and codes, then commit.

    Returns:
      number of rows inserted (groups + codes)
    """
    inserted = 0

    existing_groups = set((await session.execute(select(FailureGroup.code))).scalars())
    for code, name, comment in FAILURE_GROUPS:
        if code in existing_groups:
            continue
        session.add(FailureGroup(code=code, name=name, comment=comment))
        inserted += 1
    # Groups must exist before codes reference them
    await session.flush()

    existing_codes = set((await session.execute(select(Failure.code))).scalars())
    for code, group_code, name, description in FAILURES:
        if code in existing_codes:
            continue
        session.add(
            Failure(code=code, failure_group_code=group_code, name=name, description=description)
        )
        inserted += 1

    await session.commit()
    logger.info("Failure taxonomy seeded (%d new rows)", inserted)
    return inserted

"""
ORM models for production orders, inspections and the failure taxonomy.

Importing this package ensures model classes are registered with the Base
metadata for schema creation and runtime usage.
"""

from .production import ProductionOrder  # noqa: F401
from .quality import (  # noqa: F401
    Failure,
    FailureGroup,
    Inspection,
)

"""
Database package initializer exposing key public interfaces for configuration,
engine/session creation, and schema bootstrap.
"""

from .base import Base
from .config import get_settings, Settings
from .session import (
    check_connection,
    create_engine_from_settings,
    create_schema,
    create_session_maker,
)

# Import models to ensure they are registered with SQLAlchemy metadata
# when the db package is imported.
from . import models as models  # noqa: F401

__all__ = [
    "Base",
    "Settings",
    "get_settings",
    "check_connection",
    "create_engine_from_settings",
    "create_schema",
    "create_session_maker",
    "models",
]

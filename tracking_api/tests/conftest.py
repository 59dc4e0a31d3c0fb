"""Pytest configuration and fixtures."""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from src.api.main import create_app
from src.core.settings import AppSettings
from src.db.config import Settings
from src.db.session import create_engine_from_settings, create_schema, create_session_maker


@pytest.fixture
def db_settings(tmp_path):
    """Database settings pointing at a temporary SQLite file."""
    return Settings(
        POSTGRES_DSN=f"sqlite+aiosqlite:///{tmp_path / 'tracking.db'}",
        STATEMENT_TIMEOUT_SECONDS=10.0,
    )


@pytest.fixture
def app_settings():
    return AppSettings(CREATE_SCHEMA_ON_STARTUP=True, AUTO_SEED=True, LOG_LEVEL="WARNING")


@pytest.fixture
def app(app_settings, db_settings):
    return create_app(app_settings, db_settings)


@pytest.fixture
def client(app):
    """Test client; entering it runs the lifespan (connect, schema, seed)."""
    with TestClient(app) as c:
        yield c


@pytest_asyncio.fixture
async def session(db_settings):
    """AsyncSession on a freshly created schema."""
    engine = create_engine_from_settings(db_settings)
    await create_schema(engine)
    maker = create_session_maker(engine)
    async with maker() as s:
        yield s
    await engine.dispose()


@pytest.fixture
def order_payload():
    return {
        "id": "PO-1",
        "model_internal_code": "M1",
        "model_internal_name": "Model One",
        "model_trade_name": "Widget One",
        "order_size": 10,
    }

"""
Global pytest configuration and fixtures for the subscription tracker tests.

Database-backed tests run against an in-memory SQLite database through
aiosqlite; every test gets fresh tables.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from subtracker.db import Database
from subtracker.main import create_app
from subtracker.settings import DatabaseSettings, ObservabilitySettings, Settings

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def test_settings() -> Settings:
    """Settings for tests, ignoring any local .env file."""
    return Settings(
        _env_file=None,
        environment="test",
        database=DatabaseSettings(url=TEST_DATABASE_URL),
        observability=ObservabilitySettings(log_level="WARNING", log_format="console"),
    )


@pytest_asyncio.fixture
async def database(test_settings):
    """Database with the schema created; dropped after the test."""
    db = Database.from_settings(test_settings)
    await db.create_all()
    try:
        yield db
    finally:
        await db.drop_all()
        await db.dispose()


@pytest_asyncio.fixture
async def async_db_session(database):
    """Async database session."""
    async with database.session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest.fixture
def test_app(test_settings, database):
    """Application wired to the test database."""
    return create_app(test_settings, database=database)


@pytest_asyncio.fixture
async def async_client(test_app):
    """HTTP client talking to the test application in-process."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

"""Pytest configuration and shared fixtures for all tests.

This module provides:
- Test configuration and markers
- Room repository and query restriction doubles
- MongoDB fixtures for integration tests
"""

import os
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
from _pytest.config import Config
from motor.core import AgnosticDatabase
from motor.motor_asyncio import AsyncIOMotorClient

from application.services import LivechatRoomQueries
from application.settings import Settings
from domain.models import RoomDefaults
from domain.repositories import RoomFilter
from tests.fixtures.factories import UNIT_CONDITION
from tests.fixtures.mixins import MockHelperMixin

# ============================================================================
# PYTEST CONFIGURATION
# ============================================================================


def pytest_configure(config: Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (require MongoDB)")
    config.addinivalue_line("markers", "repository: Repository layer tests")
    config.addinivalue_line("markers", "query: Room query tests")
    config.addinivalue_line("markers", "domain: Domain layer tests")


# ============================================================================
# SETTINGS FIXTURES
# ============================================================================


@pytest.fixture
def settings() -> Settings:
    """Create test settings."""
    return Settings(
        database_name="livechat_room_queries_test",
        reporting_read_secondary_preferred=False,
    )


@pytest.fixture
def room_defaults() -> RoomDefaults:
    """Room defaults as shipped."""
    return RoomDefaults()


# ============================================================================
# REPOSITORY FIXTURES
# ============================================================================


@pytest.fixture
def mock_repository() -> MagicMock:
    """Provide a mock room repository.

    Every RoomRepository method is an AsyncMock; updates return an
    UpdateResult stand-in, reads return empty results.
    """
    update_result: MagicMock = MockHelperMixin.create_update_result()
    mock: MagicMock = MagicMock()
    mock.find_async = AsyncMock(return_value=[])
    mock.update_async = AsyncMock(return_value=update_result)
    mock.update_one_async = AsyncMock(return_value=update_result)
    mock.update_many_async = AsyncMock(return_value=update_result)
    mock.count_documents_async = AsyncMock(return_value=0)
    mock.aggregate_async = AsyncMock(return_value=[])
    return mock


# ============================================================================
# QUERY RESTRICTION FIXTURES
# ============================================================================


@pytest.fixture
def unit_restriction() -> AsyncMock:
    """Restriction narrowing every filter to unit-1."""

    async def restrict(filter: RoomFilter) -> RoomFilter:
        return {**filter, **UNIT_CONDITION}

    return AsyncMock(side_effect=restrict)


@pytest.fixture
def room_queries(mock_repository: MagicMock, unit_restriction: AsyncMock, room_defaults: RoomDefaults) -> LivechatRoomQueries:
    """Room queries over the mock repository with the unit-1 restriction."""
    return LivechatRoomQueries(
        mock_repository,
        query_restriction=unit_restriction,
        defaults=room_defaults,
    )


# ============================================================================
# MONGODB FIXTURES
# ============================================================================


@pytest.fixture
async def mongo_client() -> AsyncGenerator[AsyncIOMotorClient, None]:
    """Provide a MongoDB client for integration tests.

    Integration tests are skipped unless MONGO_CONNECTION_STRING is set.
    """
    connection_string: str | None = os.getenv("MONGO_CONNECTION_STRING")
    if not connection_string:
        pytest.skip("MONGO_CONNECTION_STRING is not set")
    client: AsyncIOMotorClient = AsyncIOMotorClient(connection_string)
    yield client
    client.close()


@pytest.fixture
async def mongo_db(mongo_client: AsyncIOMotorClient, settings: Settings) -> AsyncGenerator[AgnosticDatabase, None]:
    """Provide a test database that is cleaned after each test."""
    db: AgnosticDatabase = mongo_client[settings.database_name]
    yield db
    # Cleanup: drop all collections after test
    collection_names: list[str] = await db.list_collection_names()
    for collection_name in collection_names:
        await db[collection_name].drop()

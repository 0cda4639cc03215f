"""Tests for the MongoDB connection helpers."""

from collections.abc import Generator
from unittest.mock import AsyncMock, MagicMock

import pytest

import infrastructure.database as database
from application.settings import Settings


@pytest.fixture
def motor_client(monkeypatch: pytest.MonkeyPatch) -> Generator[MagicMock, None, None]:
    """Replace the Motor client with a mock whose ping succeeds."""
    client: MagicMock = MagicMock()
    client.admin.command = AsyncMock(return_value={"ok": 1})
    client_class: MagicMock = MagicMock(return_value=client)
    monkeypatch.setattr(database, "AsyncIOMotorClient", client_class)
    yield client
    database._client = None
    database._db = None


@pytest.mark.unit
class TestDatabase:
    """Connection lifecycle and index initialization."""

    def test_get_database_before_connect_fails(self) -> None:
        with pytest.raises(RuntimeError, match="not initialized"):
            database.get_database()

    @pytest.mark.asyncio
    async def test_connect_pings_and_selects_database(self, motor_client: MagicMock, settings: Settings) -> None:
        db = await database.connect_db(settings)

        motor_client.admin.command.assert_awaited_once_with("ping")
        motor_client.__getitem__.assert_called_once_with(settings.database_name)
        assert database.get_database() is db

    @pytest.mark.asyncio
    async def test_connect_failure_propagates(self, motor_client: MagicMock, settings: Settings) -> None:
        motor_client.admin.command.side_effect = ConnectionError("unreachable")

        with pytest.raises(ConnectionError):
            await database.connect_db(settings)

    @pytest.mark.asyncio
    async def test_close_resets_connection(self, motor_client: MagicMock, settings: Settings) -> None:
        await database.connect_db(settings)

        await database.close_db()

        motor_client.close.assert_called_once()
        with pytest.raises(RuntimeError):
            database.get_database()

    @pytest.mark.asyncio
    async def test_init_indexes_creates_reporting_indexes(self, motor_client: MagicMock, settings: Settings) -> None:
        db = await database.connect_db(settings)
        rooms: MagicMock = db[settings.rooms_collection_name]
        rooms.create_index = AsyncMock(side_effect=lambda keys, name: name)

        await database.init_indexes(settings)

        assert rooms.create_index.await_count == 4

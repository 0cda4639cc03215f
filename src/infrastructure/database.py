"""
Database configuration for MongoDB persistence.

Uses Motor (async MongoDB driver) for async operations.
"""

import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from application.settings import Settings, app_settings
from integration.repositories import MotorRoomRepository

logger = logging.getLogger(__name__)

# MongoDB connection
_client: AsyncIOMotorClient | None = None
_db: AsyncIOMotorDatabase | None = None


async def connect_db(settings: Settings | None = None) -> AsyncIOMotorDatabase:
    """Initialize MongoDB connection."""
    global _client, _db

    settings = settings or app_settings
    mongo_url = settings.get_mongo_connection_string()

    logger.info(f"Connecting to MongoDB: {mongo_url.split('@')[-1]} / {settings.database_name}")

    _client = AsyncIOMotorClient(mongo_url)
    _db = _client[settings.database_name]

    # Verify connection
    try:
        await _client.admin.command("ping")
        logger.info("✅ MongoDB connection established")
    except Exception as e:
        logger.error(f"❌ Failed to connect to MongoDB: {e}")
        raise

    return _db


async def close_db() -> None:
    """Close MongoDB connection."""
    global _client, _db

    if _client:
        _client.close()
        _client = None
        _db = None
        logger.info("MongoDB connection closed")


def get_database() -> AsyncIOMotorDatabase:
    """Get the database instance."""
    if _db is None:
        raise RuntimeError("Database not initialized. Call connect_db() first.")
    return _db


async def init_indexes(settings: Settings | None = None) -> None:
    """Create the indexes the conversation reports rely on."""
    settings = settings or app_settings
    rooms = MotorRoomRepository(get_database()[settings.rooms_collection_name])
    await rooms.ensure_reporting_indexes_async()

# backend/stockwatch/db/mongo.py
"""MongoDB connection and database management"""

from __future__ import annotations
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from stockwatch.core.config import Settings, settings
from stockwatch.logger import get_logger

log = get_logger(__name__)

# Global client and database instances
_client: Optional[AsyncIOMotorClient] = None
_db: Optional[AsyncIOMotorDatabase] = None


async def connect_to_mongo(config: Optional[Settings] = None) -> AsyncIOMotorDatabase:
    """Initialize MongoDB connection"""
    global _client, _db
    config = config or settings

    _client = AsyncIOMotorClient(
        config.MONGO_URI,
        maxPoolSize=10,
        minPoolSize=1,
        maxIdleTimeMS=60000,  # 60 seconds
    )
    _db = _client[config.MONGO_DB_NAME]

    # Verify connection
    await _client.server_info()
    log.info("Connected to MongoDB: %s", config.MONGO_DB_NAME)

    await ensure_indexes(_db, config)
    return _db


async def close_mongo_connection():
    """Close MongoDB connection"""
    global _client, _db
    if _client is not None:
        _client.close()
        log.info("Disconnected from MongoDB")
    _client = None
    _db = None


def get_client() -> AsyncIOMotorClient:
    """Get MongoDB client instance"""
    global _client
    if _client is None:
        _client = AsyncIOMotorClient(settings.MONGO_URI)
    return _client


def get_db() -> AsyncIOMotorDatabase:
    """Get MongoDB database instance"""
    global _db
    if _db is None:
        _db = get_client()[settings.MONGO_DB_NAME]
    return _db


async def ensure_indexes(db: Optional[AsyncIOMotorDatabase] = None, config: Optional[Settings] = None) -> None:
    """Create all required indexes (idempotent)"""
    if db is None:
        db = get_db()
    config = config or settings

    try:
        await db[config.STOCKS_COLLECTION].create_index("company", unique=True)
        await db[config.STOCKS_COLLECTION].create_index("ticker")
        log.info("MongoDB indexes created/verified successfully")
    except Exception as e:
        log.warning("Some indexes may not have been created: %s", e)

# backend/stockwatch/db/repositories.py
"""Repository pattern for MongoDB operations"""

from __future__ import annotations
from typing import Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase, AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from stockwatch.core.config import settings
from stockwatch.core.errors import StoreError
from stockwatch.logger import get_logger
from stockwatch.schemas.stock import StockRecord

log = get_logger(__name__)


class BaseRepository:
    """Base repository with common read operations"""

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str):
        self.db = db
        self.collection: AsyncIOMotorCollection = db[collection_name]

    async def find_one(self, filter: dict) -> Optional[dict]:
        """Find single document by filter"""
        return await self.collection.find_one(filter)

    async def find_many(self, filter: dict, limit: int = 0) -> List[dict]:
        """Find multiple documents (limit 0 means all)"""
        cursor = self.collection.find(filter)
        if limit:
            cursor = cursor.limit(limit)
        return await cursor.to_list(length=limit or None)


class StockRepository(BaseRepository):
    """Stock records, one document per company"""

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: Optional[str] = None):
        super().__init__(db, collection_name or settings.STOCKS_COLLECTION)

    async def search(self) -> List[Dict[str, StockRecord]]:
        """Every stored record, as [{"doc": StockRecord}]"""
        try:
            docs = await self.find_many({})
        except PyMongoError as e:
            raise StoreError(f"listing stock records failed: {e}") from e
        return [{"doc": StockRecord.model_validate(d)} for d in docs]

    async def find_by_company(self, company: str) -> Optional[StockRecord]:
        try:
            doc = await self.find_one({"company": company})
        except PyMongoError as e:
            raise StoreError(f"reading {company!r} failed: {e}") from e
        return StockRecord.model_validate(doc) if doc else None

    async def insert_or_update(self, record: StockRecord) -> StockRecord:
        """Upsert keyed by company"""
        record.touch()
        try:
            await self.collection.replace_one(
                {"company": record.company},
                record.to_document(),
                upsert=True,
            )
        except PyMongoError as e:
            raise StoreError(f"upsert of {record.company!r} failed: {e}") from e
        return record

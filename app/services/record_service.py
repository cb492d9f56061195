"""
app/services/record_service.py

Purpose: Report record persistence

- Appends one record per completed wizard run
- Records are never updated or deleted
"""

from typing import Protocol

from motor.motor_asyncio import AsyncIOMotorCollection

from app.core.logging import get_logger
from app.db.mongo import run_store_operation
from app.models.record import Record

logger = get_logger(__name__)


class RecordStore(Protocol):

    async def add(self, record: Record) -> str:
        ...


class MongoRecordStore:
    """RecordStore backed by the append-only `records` collection."""

    def __init__(self, collection: AsyncIOMotorCollection, timeout: float):
        self.collection = collection
        self.timeout = timeout

    async def add(self, record: Record) -> str:
        """
        Inserts a record.

        Returns:
            Generated record ID
        """
        result = await run_store_operation(
            self.collection.insert_one(record.to_document()),
            self.timeout,
            "records.add",
        )
        record_id = str(result.inserted_id)
        logger.info(
            f"Record stored: {record_id}",
            extra={"user_id": record.user_id, "category": record.category}
        )
        return record_id


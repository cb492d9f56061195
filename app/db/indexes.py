"""
app/db/indexes.py

Purpose: Database index management

- One state and one profile per user (unique user_id)
- Fast per-user record history lookups
"""

from pymongo import ASCENDING, DESCENDING
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.db.mongo import STATES_COLLECTION, USERS_COLLECTION, RECORDS_COLLECTION
from app.core.logging import get_logger

logger = get_logger(__name__)


async def create_indexes(database: AsyncIOMotorDatabase):
    """
    Creates all necessary database indexes.
    This function is idempotent - safe to run multiple times.
    """
    try:
        states = database[STATES_COLLECTION]
        users = database[USERS_COLLECTION]
        records = database[RECORDS_COLLECTION]

        logger.info("Creating database indexes...")

        # ==============================================
        # STATES COLLECTION INDEXES
        # ==============================================

        await states.create_index("user_id", unique=True, name="state_user_id_unique")
        logger.debug("Created unique index on states.user_id")

        # ==============================================
        # USERS COLLECTION INDEXES
        # ==============================================

        # Registration gate: a second insert for the same user must fail
        await users.create_index("user_id", unique=True, name="user_id_unique")
        logger.debug("Created unique index on users.user_id")

        # ==============================================
        # RECORDS COLLECTION INDEXES
        # ==============================================

        await records.create_index(
            [("user_id", ASCENDING), ("created_at", DESCENDING)],
            name="user_records_idx"
        )
        logger.debug("Created compound index on records.user_id + created_at")

        await records.create_index("date", name="record_date_idx")
        logger.debug("Created index on records.date")

        logger.info("✅ All database indexes created successfully")

    except Exception as e:
        logger.error(f"Error creating indexes: {str(e)}", exc_info=True)
        raise

"""
Database initialization script - states, users and records collections

Run once to create collections and indexes:
    python scripts/init_db.py
"""

import asyncio
import sys
from pathlib import Path
import os
from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load environment variables
load_dotenv()

from motor.motor_asyncio import AsyncIOMotorClient
import logging

from app.db.indexes import create_indexes
from app.db.mongo import STATES_COLLECTION, USERS_COLLECTION, RECORDS_COLLECTION

logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)


# MongoDB connection - load from .env
MONGODB_URL = os.getenv("MONGODB_URL")
MONGODB_DB_NAME = os.getenv("MONGODB_DB_NAME")

if not MONGODB_URL or not MONGODB_DB_NAME:
    raise ValueError("❌ MONGODB_URL and MONGODB_DB_NAME must be set in .env file")

COLLECTIONS = [STATES_COLLECTION, USERS_COLLECTION, RECORDS_COLLECTION]


async def initialize():
    """Create indexes and print what exists afterwards"""

    logger.info(f"🔌 Connecting to MongoDB: {MONGODB_DB_NAME}")
    client = AsyncIOMotorClient(MONGODB_URL)
    db = client[MONGODB_DB_NAME]

    try:
        # Test connection
        await client.admin.command('ping')
        logger.info("✅ Connected successfully\n")

        await create_indexes(db)

        # ==================== VERIFICATION ====================
        logger.info("\n🔍 Verifying indexes...")

        for collection_name in COLLECTIONS:
            indexes = await db[collection_name].index_information()
            logger.info(f"\n  {collection_name}:")
            for idx_name, info in indexes.items():
                if idx_name != "_id_":
                    unique = " (unique)" if info.get("unique") else ""
                    logger.info(f"    ✅ {idx_name}{unique}")

        # ==================== STATS ====================
        logger.info("\n📊 Current documents:")
        for collection_name in COLLECTIONS:
            count = await db[collection_name].count_documents({})
            logger.info(f"  {collection_name}: {count}")

        logger.info("\n✅ Database initialization complete!")

    except Exception as e:
        logger.error(f"\n❌ Error: {e}")
        raise

    finally:
        client.close()


async def main():
    logger.info("=" * 60)
    logger.info("  Report Bot Database Setup")
    logger.info("=" * 60 + "\n")

    await initialize()

    logger.info("\n" + "=" * 60)


if __name__ == "__main__":
    asyncio.run(main())

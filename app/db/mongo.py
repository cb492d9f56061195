"""
app/db/mongo.py

Purpose: MongoDB connection setup

- Initializes Motor client with connection pooling
- Three collections: states (ephemeral wizard state), users (profiles),
  records (append-only submissions)
- Health checks and retry logic
- Proper connection lifecycle management
"""

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase, AsyncIOMotorCollection
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError, PyMongoError
from typing import Any, Awaitable, Optional
import asyncio
from app.core.config import settings
from app.core.exceptions import StoreError
from app.core.logging import get_logger

logger = get_logger(__name__)

STATES_COLLECTION = "states"
USERS_COLLECTION = "users"
RECORDS_COLLECTION = "records"

_client: Optional[AsyncIOMotorClient] = None
_database: Optional[AsyncIOMotorDatabase] = None


async def connect_to_mongo():
    """
    Establishes connection to MongoDB with retry logic.
    Called during application startup.
    """
    global _client, _database

    if _client is not None:
        logger.warning("MongoDB client already initialized")
        return

    max_retries = 3
    retry_delay = 2
    timeout_ms = int(settings.STORE_TIMEOUT_SECONDS * 1000)

    for attempt in range(1, max_retries + 1):
        client = None
        try:
            logger.info(
                f"Attempting to connect to MongoDB (attempt {attempt}/{max_retries})"
            )

            client = AsyncIOMotorClient(
                settings.MONGODB_URL,
                maxPoolSize=50,
                minPoolSize=5,
                serverSelectionTimeoutMS=timeout_ms,
                connectTimeoutMS=timeout_ms,
                socketTimeoutMS=timeout_ms,
                retryWrites=True,
                retryReads=True,
            )

            # Verify connection
            await client.admin.command("ping")

            _client = client
            _database = client[settings.MONGODB_DB_NAME]

            logger.info(
                f"✅ Successfully connected to MongoDB: {settings.MONGODB_DB_NAME}"
            )
            return

        except (ConnectionFailure, ServerSelectionTimeoutError) as e:
            logger.error(
                f"Failed to connect to MongoDB (attempt {attempt}/{max_retries}): {e}"
            )
            if client is not None:
                client.close()

            if attempt < max_retries:
                logger.info(f"Retrying in {retry_delay} seconds...")
                await asyncio.sleep(retry_delay)
                retry_delay *= 2  # Exponential backoff
            else:
                logger.critical("Failed to connect to MongoDB after all retries")
                raise ConnectionError("Could not establish MongoDB connection") from e


async def close_mongo_connection():
    """
    Closes the MongoDB connection.
    Called during application shutdown.
    """
    global _client, _database

    if _client:
        logger.info("Closing MongoDB connection")
        _client.close()
        _client = None
        _database = None
        logger.info("MongoDB connection closed")


async def check_database_health() -> bool:
    """
    Checks if the database connection is healthy.

    Returns:
        True if connection is healthy, False otherwise
    """
    try:
        if _client is None:
            logger.error("MongoDB client not initialized")
            return False

        await _client.admin.command("ping")
        return True

    except Exception as e:
        logger.error(f"Database health check failed: {str(e)}")
        return False


async def run_store_operation(
    operation: Awaitable[Any],
    timeout: float,
    name: str,
    passthrough: tuple = ()
) -> Any:
    """
    Awaits a driver call with an upper time bound.

    Args:
        operation: Pending driver call
        timeout: Seconds before giving up
        name: Operation name for logs and errors
        passthrough: Driver exceptions the caller handles itself

    Raises:
        StoreError: On timeout or any other driver error
    """
    try:
        return await asyncio.wait_for(operation, timeout=timeout)
    except passthrough:
        raise
    except asyncio.TimeoutError as e:
        logger.error(f"Store operation '{name}' timed out after {timeout}s")
        raise StoreError(f"Store operation '{name}' timed out", details={"timeout": timeout}) from e
    except PyMongoError as e:
        logger.error(f"Store operation '{name}' failed: {e}")
        raise StoreError(f"Store operation '{name}' failed", details={"error": str(e)}) from e


def get_database() -> AsyncIOMotorDatabase:
    """
    Returns the MongoDB database instance.

    Raises:
        RuntimeError: If database is not initialized
    """
    if _database is None:
        raise RuntimeError(
            "Database not initialized. Call connect_to_mongo() during startup."
        )
    return _database


def get_states_collection() -> AsyncIOMotorCollection:
    """
    Ephemeral wizard state, one document per user.

    Fields: user_id, step, location, date, category, temp_items, final_items
    """
    return get_database()[STATES_COLLECTION]


def get_users_collection() -> AsyncIOMotorCollection:
    """
    Registered profiles, one document per user, never updated.

    Fields: user_id, ministry, sutra_name, name, registered_at
    """
    return get_database()[USERS_COLLECTION]


def get_records_collection() -> AsyncIOMotorCollection:
    """
    Submitted wizard runs, append-only.

    Fields: user_id, location, date, category, items, description, created_at
    """
    return get_database()[RECORDS_COLLECTION]

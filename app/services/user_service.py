"""
app/services/user_service.py

Purpose: User profile persistence

- Registration gate (does a profile exist?)
- One-time profile creation; profiles are never updated
"""

from typing import Protocol

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import DuplicateKeyError

from app.core.logging import get_logger, LogContext
from app.db.mongo import run_store_operation
from app.models.user import UserProfile

logger = get_logger(__name__)


class ProfileStore(Protocol):

    async def exists(self, user_id: str) -> bool:
        ...

    async def create(self, profile: UserProfile) -> bool:
        ...


class MongoProfileStore:
    """ProfileStore backed by the `users` collection."""

    def __init__(self, collection: AsyncIOMotorCollection, timeout: float):
        self.collection = collection
        self.timeout = timeout

    async def exists(self, user_id: str) -> bool:
        """
        Checks whether the user has registered.
        """
        document = await run_store_operation(
            self.collection.find_one({"user_id": user_id}, projection={"_id": 1}),
            self.timeout,
            "users.exists",
        )
        return document is not None

    async def create(self, profile: UserProfile) -> bool:
        """
        Inserts a new profile.

        Returns:
            True if created, False if the user already had a profile
            (the existing profile is kept unchanged)
        """
        with LogContext(user_id=profile.user_id):
            try:
                await run_store_operation(
                    self.collection.insert_one(profile.to_document()),
                    self.timeout,
                    "users.create",
                    passthrough=(DuplicateKeyError,),
                )
            except DuplicateKeyError:
                logger.warning("Profile already exists, keeping the first registration")
                return False

            logger.info("User profile created")
            return True

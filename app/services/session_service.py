"""
app/services/session_service.py

Purpose: Conversation state persistence

- One state document per user in the `states` collection
- get / set (full replace) / merge (field-level update) / delete
- Every call bounded by the configured store timeout
- Corrupted documents are treated as no state

Note: handling an event is a read-modify-write (get, decide, write) with
no lock around it. Two rapid taps from the same user may race; the batch
dispatcher serializes events of one user within a request, nothing guards
across requests.
"""

from enum import Enum
from typing import Any, Dict, Optional, Protocol

from motor.motor_asyncio import AsyncIOMotorCollection
from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import StateNotFoundError
from app.core.logging import get_logger, LogContext
from app.db.mongo import run_store_operation
from app.models.user_state import UserState

logger = get_logger(__name__)


class StateStore(Protocol):
    """Key-value persistence of UserState keyed by user ID."""

    async def get(self, user_id: str) -> Optional[UserState]:
        ...

    async def set(self, user_id: str, state: UserState) -> None:
        ...

    async def merge(self, user_id: str, fields: Dict[str, Any]) -> None:
        ...

    async def delete(self, user_id: str) -> None:
        ...


def encode_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Prepares a partial update for storage (enum members become their values).
    """
    return {
        key: value.value if isinstance(value, Enum) else value
        for key, value in fields.items()
    }


class MongoStateStore:
    """StateStore backed by a Motor collection."""

    def __init__(self, collection: AsyncIOMotorCollection, timeout: float):
        self.collection = collection
        self.timeout = timeout

    async def get(self, user_id: str) -> Optional[UserState]:
        """
        Loads the user's state.

        Returns:
            UserState, or None if nothing (valid) is stored
        """
        document = await run_store_operation(
            self.collection.find_one({"user_id": user_id}),
            self.timeout,
            "states.get",
        )

        if not document:
            return None

        try:
            return UserState.from_document(document)
        except PydanticValidationError as e:
            with LogContext(user_id=user_id):
                logger.warning(f"Discarding corrupted state document: {e.errors()}")
            return None

    async def set(self, user_id: str, state: UserState) -> None:
        """
        Replaces the user's state document, creating it if needed.
        """
        await run_store_operation(
            self.collection.replace_one(
                {"user_id": user_id},
                state.to_document(user_id),
                upsert=True,
            ),
            self.timeout,
            "states.set",
        )
        logger.debug(f"State replaced (step={state.step.value})", extra={"user_id": user_id})

    async def merge(self, user_id: str, fields: Dict[str, Any]) -> None:
        """
        Updates only the named fields.

        Raises:
            StateNotFoundError: If the user has no stored state
        """
        encoded = encode_fields(fields)
        encoded.pop("user_id", None)

        result = await run_store_operation(
            self.collection.update_one({"user_id": user_id}, {"$set": encoded}),
            self.timeout,
            "states.merge",
        )

        if result.matched_count == 0:
            raise StateNotFoundError(user_id)

        logger.debug(f"State merged: {sorted(encoded)}", extra={"user_id": user_id})

    async def delete(self, user_id: str) -> None:
        """
        Removes the user's state. Deleting an absent state is not an error.
        """
        result = await run_store_operation(
            self.collection.delete_one({"user_id": user_id}),
            self.timeout,
            "states.delete",
        )
        logger.debug(f"State deleted ({result.deleted_count} document)", extra={"user_id": user_id})

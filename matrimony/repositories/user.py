"""Repository helpers for user accounts."""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ASCENDING, ReturnDocument

from ..db.collections import USERS_COLLECTION
from ..models.user import UserDocument
from .exceptions import NotFoundRepositoryError

LOGGER = logging.getLogger("uvicorn.error")


class UserRepository:
    """Thin abstraction over the users collection, keyed by email."""

    def __init__(self, database: AsyncIOMotorDatabase) -> None:
        self._database = database
        self._collection: AsyncIOMotorCollection = database[USERS_COLLECTION]

    @property
    def collection(self) -> AsyncIOMotorCollection:
        return self._collection

    async def upsert_by_email(
        self,
        *,
        email: str,
        profile: dict[str, Any],
        now_ms: int,
    ) -> tuple[UserDocument, bool]:
        """Create the account on first sign-in, otherwise record the login.

        Returns the stored document and whether it was just created.
        """

        result = await self._collection.update_one(
            {"email": email},
            {
                "$set": {"lastLoginAt": now_ms},
                "$setOnInsert": {
                    **profile,
                    "role": "user",
                    "isPremium": False,
                    "isActive": True,
                    "createdAt": now_ms,
                    "updatedAt": now_ms,
                },
            },
            upsert=True,
        )
        doc = await self._collection.find_one({"email": email})
        if not doc:  # pragma: no cover - upsert always leaves a document behind
            raise NotFoundRepositoryError("user upsert failed")
        created = result.upserted_id is not None
        if created:
            LOGGER.info("Created user account email=%s", email)
        return UserDocument(**doc), created

    async def get_by_email(self, email: str) -> Optional[UserDocument]:
        doc = await self._collection.find_one({"email": email})
        return UserDocument(**doc) if doc else None

    async def get_by_object_id(self, object_id: ObjectId) -> Optional[UserDocument]:
        doc = await self._collection.find_one({"_id": object_id})
        return UserDocument(**doc) if doc else None

    async def list_users(self, name: Optional[str] = None) -> list[UserDocument]:
        query: dict[str, Any] = {}
        if name:
            query["name"] = {"$regex": re.escape(name), "$options": "i"}
        cursor = self._collection.find(query, sort=[("createdAt", ASCENDING)])
        return [UserDocument(**doc) async for doc in cursor]

    async def update_by_object_id(self, object_id: ObjectId, updates: dict[str, Any]) -> UserDocument:
        doc = await self._collection.find_one_and_update(
            {"_id": object_id},
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            raise NotFoundRepositoryError("user not found")
        return UserDocument(**doc)

    async def delete_by_object_id(self, object_id: ObjectId) -> bool:
        result = await self._collection.delete_one({"_id": object_id})
        return bool(result.deleted_count)

    async def count(self) -> int:
        return await self._collection.count_documents({})


__all__ = ["UserRepository"]

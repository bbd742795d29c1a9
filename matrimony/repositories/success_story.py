from __future__ import annotations

from typing import Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import DESCENDING

from ..db.collections import SUCCESS_STORIES_COLLECTION
from ..models.success_story import SuccessStory


class SuccessStoryRepository:
    """Append-only store of marriage stories."""

    def __init__(self, database: AsyncIOMotorDatabase) -> None:
        self._database = database
        self._collection: AsyncIOMotorCollection = database[SUCCESS_STORIES_COLLECTION]

    @property
    def collection(self) -> AsyncIOMotorCollection:
        return self._collection

    async def append(self, *, email: str, fields: dict[str, Any], created_at: int) -> SuccessStory:
        doc = {**fields, "_id": ObjectId(), "email": email, "createdAt": created_at}
        await self._collection.insert_one(doc)
        return SuccessStory(**doc)

    async def list_newest_first(self) -> list[SuccessStory]:
        cursor = self._collection.find({}, sort=[("createdAt", DESCENDING), ("_id", DESCENDING)])
        return [SuccessStory(**doc) async for doc in cursor]

    async def count(self) -> int:
        return await self._collection.count_documents({})


__all__ = ["SuccessStoryRepository"]

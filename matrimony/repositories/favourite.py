from __future__ import annotations

from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError

from ..db.collections import FAVOURITES_COLLECTION


class FavouriteRepository:
    """User-to-biodata favourite links. Unique per (email, biodataId)."""

    def __init__(self, database: AsyncIOMotorDatabase) -> None:
        self._database = database
        self._collection: AsyncIOMotorCollection = database[FAVOURITES_COLLECTION]

    @property
    def collection(self) -> AsyncIOMotorCollection:
        return self._collection

    async def add(self, email: str, biodata_id: int, created_at: int) -> bool:
        """Link the pair; returns False when it was already linked."""

        try:
            result = await self._collection.update_one(
                {"email": email, "biodataId": biodata_id},
                {
                    "$setOnInsert": {
                        "createdAt": created_at,
                    }
                },
                upsert=True,
            )
        except DuplicateKeyError:
            # Lost a race with an identical insert; the unique index keeps one copy
            return False
        return result.upserted_id is not None

    async def remove(self, email: str, biodata_id: int) -> bool:
        result = await self._collection.delete_one({"email": email, "biodataId": biodata_id})
        return bool(result.deleted_count)

    async def list_for_user(self, email: str) -> list[dict]:
        cursor = self._collection.find({"email": email}, sort=[("createdAt", DESCENDING)])
        return [doc async for doc in cursor]


__all__ = ["FavouriteRepository"]

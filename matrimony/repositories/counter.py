"""Named integer sequences backed by a single counter document each."""

from __future__ import annotations

import logging

from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ReturnDocument

from ..db.collections import COUNTERS_COLLECTION
from .exceptions import RepositoryError

LOGGER = logging.getLogger("uvicorn.error")


class CounterRepository:
    """Hands out strictly increasing integers per sequence name.

    Each call is one ``$inc`` applied server-side, so concurrent callers never
    see the same value. A missing counter is created at 0 and the first call
    returns 1.
    """

    def __init__(self, database: AsyncIOMotorDatabase) -> None:
        self._database = database
        self._collection: AsyncIOMotorCollection = database[COUNTERS_COLLECTION]

    @property
    def collection(self) -> AsyncIOMotorCollection:
        return self._collection

    async def next_value(self, sequence: str) -> int:
        doc = await self._collection.find_one_and_update(
            {"_id": sequence},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        if not doc or not isinstance(doc.get("seq"), int):
            LOGGER.error("Counter %s returned no value", sequence)
            raise RepositoryError(f"counter '{sequence}' unavailable")
        return doc["seq"]

    async def current_value(self, sequence: str) -> int:
        doc = await self._collection.find_one({"_id": sequence})
        return int(doc.get("seq", 0)) if doc else 0


__all__ = ["CounterRepository"]

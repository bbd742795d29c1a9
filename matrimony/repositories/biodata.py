"""Repository helpers for biodata persistence."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Sequence

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from ..db.collections import BIODATAS_COLLECTION
from ..models.biodata import BiodataDocument
from .exceptions import DuplicateKeyRepositoryError, NotFoundRepositoryError

LOGGER = logging.getLogger("uvicorn.error")

SortSpec = Sequence[tuple[str, int]]


class BiodataRepository:
    """MongoDB access layer for biodata documents."""

    def __init__(self, database: AsyncIOMotorDatabase) -> None:
        self._database = database
        self._collection: AsyncIOMotorCollection = database[BIODATAS_COLLECTION]

    @property
    def collection(self) -> AsyncIOMotorCollection:
        return self._collection

    async def insert(
        self,
        *,
        biodata_id: int,
        email: str,
        fields: dict[str, Any],
        created_at: int,
    ) -> BiodataDocument:
        doc = {
            **fields,
            "_id": ObjectId(),
            "biodataId": biodata_id,
            "email": email,
            "isPremium": False,
            "premiumRequested": False,
            "createdAt": created_at,
            "updatedAt": created_at,
        }
        try:
            await self._collection.insert_one(doc)
        except DuplicateKeyError as exc:
            LOGGER.debug("Duplicate biodata insertion for email=%s id=%s", email, biodata_id)
            raise DuplicateKeyRepositoryError("biodata already exists") from exc
        return BiodataDocument(**doc)

    async def get_by_biodata_id(self, biodata_id: int) -> Optional[BiodataDocument]:
        doc = await self._collection.find_one({"biodataId": biodata_id})
        return BiodataDocument(**doc) if doc else None

    async def get_by_email(self, email: str) -> Optional[BiodataDocument]:
        doc = await self._collection.find_one({"email": email})
        return BiodataDocument(**doc) if doc else None

    async def get_many(self, biodata_ids: Iterable[int]) -> dict[int, BiodataDocument]:
        ids = list(dict.fromkeys(biodata_ids))
        if not ids:
            return {}
        found: dict[int, BiodataDocument] = {}
        async for doc in self._collection.find({"biodataId": {"$in": ids}}):
            found[doc["biodataId"]] = BiodataDocument(**doc)
        return found

    async def search(
        self,
        query: dict[str, Any],
        *,
        sort: SortSpec,
        skip: int = 0,
        limit: int = 0,
    ) -> list[BiodataDocument]:
        cursor = self._collection.find(query, sort=list(sort), skip=skip, limit=limit)
        return [BiodataDocument(**doc) async for doc in cursor]

    async def count(self, query: Optional[dict[str, Any]] = None) -> int:
        return await self._collection.count_documents(query or {})

    async def update_by_biodata_id(
        self,
        biodata_id: int,
        updates: dict[str, Any],
        unset: Iterable[str] = (),
    ) -> BiodataDocument:
        operations: dict[str, Any] = {"$set": updates}
        cleared = {field: "" for field in unset}
        if cleared:
            operations["$unset"] = cleared
        doc = await self._collection.find_one_and_update(
            {"biodataId": biodata_id},
            operations,
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            raise NotFoundRepositoryError("biodata not found")
        return BiodataDocument(**doc)

    async def delete_by_biodata_id(self, biodata_id: int) -> bool:
        result = await self._collection.delete_one({"biodataId": biodata_id})
        return bool(result.deleted_count)


__all__ = ["BiodataRepository", "SortSpec"]

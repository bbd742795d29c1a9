"""Payments plus the two pending→approved request collections."""

from __future__ import annotations

import logging
from typing import Any, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from ..db.collections import (
    CONTACT_REQUESTS_COLLECTION,
    PAYMENTS_COLLECTION,
    PREMIUM_REQUESTS_COLLECTION,
)
from ..models.payment import (
    ContactRequestDocument,
    PaymentDocument,
    PremiumRequestDocument,
)
from .exceptions import (
    DuplicateKeyRepositoryError,
    NotFoundRepositoryError,
    StaleStateRepositoryError,
)

LOGGER = logging.getLogger("uvicorn.error")

_NEWEST_FIRST = [("createdAt", DESCENDING), ("_id", DESCENDING)]


async def _approve(collection: AsyncIOMotorCollection, object_id: ObjectId, now_ms: int) -> dict:
    """Move a request from pending to approved exactly once."""

    doc = await collection.find_one_and_update(
        {"_id": object_id, "status": "pending"},
        {"$set": {"status": "approved", "approvedAt": now_ms}},
        return_document=ReturnDocument.AFTER,
    )
    if doc:
        LOGGER.info("Approved request %s", object_id)
        return doc
    existing = await collection.find_one({"_id": object_id}, projection={"_id": 1})
    if not existing:
        raise NotFoundRepositoryError("request not found")
    raise StaleStateRepositoryError("request already approved")


class PaymentRepository:
    """Payments and the contact requests they unlock."""

    def __init__(self, database: AsyncIOMotorDatabase) -> None:
        self._database = database
        self._payments: AsyncIOMotorCollection = database[PAYMENTS_COLLECTION]
        self._contacts: AsyncIOMotorCollection = database[CONTACT_REQUESTS_COLLECTION]

    @property
    def payments(self) -> AsyncIOMotorCollection:
        return self._payments

    @property
    def contact_requests(self) -> AsyncIOMotorCollection:
        return self._contacts

    async def insert_payment(
        self,
        *,
        email: str,
        biodata_id: int,
        amount: float,
        currency: str,
        transaction_id: str,
        created_at: int,
    ) -> PaymentDocument:
        doc = {
            "_id": ObjectId(),
            "email": email,
            "biodataId": biodata_id,
            "amount": amount,
            "currency": currency,
            "transactionId": transaction_id,
            "createdAt": created_at,
        }
        await self._payments.insert_one(doc)
        return PaymentDocument(**doc)

    async def list_payments(self) -> list[PaymentDocument]:
        return [PaymentDocument(**doc) async for doc in self._payments.find({}, sort=_NEWEST_FIRST)]

    async def total_revenue(self) -> float:
        pipeline = [{"$group": {"_id": None, "total": {"$sum": "$amount"}}}]
        async for row in self._payments.aggregate(pipeline):
            return float(row.get("total") or 0)
        return 0.0

    async def insert_contact_request(
        self,
        *,
        requester_email: str,
        biodata_id: int,
        payment_id: Optional[ObjectId],
        created_at: int,
    ) -> ContactRequestDocument:
        doc = {
            "_id": ObjectId(),
            "requesterEmail": requester_email,
            "biodataId": biodata_id,
            "paymentId": payment_id,
            "status": "pending",
            "createdAt": created_at,
            "approvedAt": None,
        }
        await self._contacts.insert_one(doc)
        return ContactRequestDocument(**doc)

    async def get_contact_request(self, object_id: ObjectId) -> Optional[ContactRequestDocument]:
        doc = await self._contacts.find_one({"_id": object_id})
        return ContactRequestDocument(**doc) if doc else None

    async def list_contact_requests(self, requester_email: Optional[str] = None) -> list[ContactRequestDocument]:
        query: dict[str, Any] = {}
        if requester_email:
            query["requesterEmail"] = requester_email
        cursor = self._contacts.find(query, sort=_NEWEST_FIRST)
        return [ContactRequestDocument(**doc) async for doc in cursor]

    async def approve_contact_request(self, object_id: ObjectId, now_ms: int) -> ContactRequestDocument:
        return ContactRequestDocument(**await _approve(self._contacts, object_id, now_ms))

    async def delete_contact_request(self, object_id: ObjectId) -> bool:
        result = await self._contacts.delete_one({"_id": object_id})
        return bool(result.deleted_count)

    async def count_contact_requests(self, status: Optional[str] = None) -> int:
        return await self._contacts.count_documents({"status": status} if status else {})


class PremiumRequestRepository:
    def __init__(self, database: AsyncIOMotorDatabase) -> None:
        self._database = database
        self._collection: AsyncIOMotorCollection = database[PREMIUM_REQUESTS_COLLECTION]

    @property
    def collection(self) -> AsyncIOMotorCollection:
        return self._collection

    async def insert(self, *, email: str, biodata_id: int, created_at: int) -> PremiumRequestDocument:
        doc = {
            "_id": ObjectId(),
            "email": email,
            "biodataId": biodata_id,
            "status": "pending",
            "createdAt": created_at,
            "approvedAt": None,
        }
        try:
            await self._collection.insert_one(doc)
        except DuplicateKeyError as exc:
            LOGGER.debug("Concurrent premium request for biodata %s", biodata_id)
            raise DuplicateKeyRepositoryError("premium request already pending") from exc
        return PremiumRequestDocument(**doc)

    async def get_pending_for_biodata(self, biodata_id: int) -> Optional[PremiumRequestDocument]:
        doc = await self._collection.find_one({"biodataId": biodata_id, "status": "pending"})
        return PremiumRequestDocument(**doc) if doc else None

    async def list_requests(self, status: Optional[str] = None) -> list[PremiumRequestDocument]:
        query = {"status": status} if status else {}
        cursor = self._collection.find(query, sort=_NEWEST_FIRST)
        return [PremiumRequestDocument(**doc) async for doc in cursor]

    async def approve(self, object_id: ObjectId, now_ms: int) -> PremiumRequestDocument:
        return PremiumRequestDocument(**await _approve(self._collection, object_id, now_ms))

    async def count(self, status: Optional[str] = None) -> int:
        return await self._collection.count_documents({"status": status} if status else {})


__all__ = ["PaymentRepository", "PremiumRequestRepository"]

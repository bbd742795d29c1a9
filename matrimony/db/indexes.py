import logging

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from .collections import (
    BIODATAS_COLLECTION,
    CONTACT_REQUESTS_COLLECTION,
    FAVOURITES_COLLECTION,
    PREMIUM_REQUESTS_COLLECTION,
    SUCCESS_STORIES_COLLECTION,
    USERS_COLLECTION,
)

LOGGER = logging.getLogger("uvicorn.error")


async def _ensure_user_indexes(db: AsyncIOMotorDatabase) -> None:
    await db[USERS_COLLECTION].create_index("email", unique=True)


async def _ensure_biodata_indexes(db: AsyncIOMotorDatabase) -> None:
    collection = db[BIODATAS_COLLECTION]
    await collection.create_index("biodataId", unique=True)
    await collection.create_index("email", unique=True)
    await collection.create_index([("age", ASCENDING), ("biodataId", ASCENDING)])


async def _ensure_request_indexes(db: AsyncIOMotorDatabase) -> None:
    await db[CONTACT_REQUESTS_COLLECTION].create_index(
        [("requesterEmail", ASCENDING), ("createdAt", DESCENDING)],
        name="contact_requests_requester_idx",
    )
    await db[PREMIUM_REQUESTS_COLLECTION].create_index(
        [("biodataId", ASCENDING), ("status", ASCENDING)],
        name="premium_requests_biodata_status_idx",
    )
    # At most one pending premium request per biodata.
    await db[PREMIUM_REQUESTS_COLLECTION].create_index(
        "biodataId",
        name="premium_requests_one_pending_per_biodata",
        unique=True,
        partialFilterExpression={"status": "pending"},
    )


async def _ensure_favourite_indexes(db: AsyncIOMotorDatabase) -> None:
    await db[FAVOURITES_COLLECTION].create_index(
        [("email", ASCENDING), ("biodataId", ASCENDING)],
        name="favourites_email_biodata_unique",
        unique=True,
    )


async def _ensure_story_indexes(db: AsyncIOMotorDatabase) -> None:
    await db[SUCCESS_STORIES_COLLECTION].create_index([("createdAt", DESCENDING)])


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create every index the API relies on. Idempotent; failures are logged."""

    for ensure in (
        _ensure_user_indexes,
        _ensure_biodata_indexes,
        _ensure_request_indexes,
        _ensure_favourite_indexes,
        _ensure_story_indexes,
    ):
        try:
            await ensure(db)
        except Exception as exc:  # pragma: no cover - best-effort logging
            LOGGER.error("Failed to ensure indexes (%s): %s", ensure.__name__, exc)


__all__ = ["ensure_indexes"]

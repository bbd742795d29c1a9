import logging
import os
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from ..config import Settings, get_settings
from .indexes import ensure_indexes

logger = logging.getLogger("uvicorn.error")

_client: Optional[AsyncIOMotorClient] = None
_db: Optional[AsyncIOMotorDatabase] = None


def _client_options(settings: Settings) -> dict[str, Any]:
    options: dict[str, Any] = {
        "maxPoolSize": 20,
        "serverSelectionTimeoutMS": int(os.getenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "3000")),
        "connectTimeoutMS": int(os.getenv("MONGO_CONNECT_TIMEOUT_MS", "3000")),
        "socketTimeoutMS": int(os.getenv("MONGO_SOCKET_TIMEOUT_MS", "5000")),
    }
    if settings.mongo_direct:
        options["directConnection"] = True
    return options


async def _open(uri: str, settings: Settings) -> tuple[AsyncIOMotorClient, AsyncIOMotorDatabase]:
    client = AsyncIOMotorClient(uri, **_client_options(settings))
    try:
        await client.admin.command("ping")
        database = client[settings.mongo_db]
        await ensure_indexes(database)
    except Exception:
        client.close()
        raise
    return client, database


async def connect_to_mongo() -> None:
    """Open the shared client, trying MONGO_URI then MONGO_ALT_URI.

    Indexes are created on the first database that answers a ping; the
    error from the first candidate is re-raised when none do.
    """

    global _client, _db

    settings = get_settings()
    candidates = [
        (label, uri)
        for label, uri in (("primary", settings.mongo_uri), ("alt", settings.mongo_alt_uri))
        if uri
    ]
    if not candidates:
        raise RuntimeError("Missing MONGO_URI env var for matrimony API")

    first_error: Optional[Exception] = None
    for label, uri in candidates:
        try:
            _client, _db = await _open(uri, settings)
        except Exception as exc:  # pragma: no cover - connection issues
            logger.error("Mongo %s URI failed: %s", label, exc)
            first_error = first_error or exc
            continue
        logger.info("MongoDB connected via %s URI: db=%s", label, settings.mongo_db)
        return

    raise first_error or RuntimeError("Mongo connection failed")


async def close_mongo_connection() -> None:
    global _client, _db
    if _client is None:
        return
    _client.close()
    _client = None
    _db = None
    logger.info("MongoDB connection closed")


def is_connected() -> bool:
    return _client is not None and _db is not None


def get_db() -> AsyncIOMotorDatabase:
    if _db is None:
        raise RuntimeError("MongoDB not connected. Did you call connect_to_mongo()?")
    return _db


__all__ = [
    "connect_to_mongo",
    "close_mongo_connection",
    "is_connected",
    "get_db",
]

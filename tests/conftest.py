from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from pathlib import Path
import sys

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

SERVICE_ROOT = Path(__file__).resolve().parents[1]
if str(SERVICE_ROOT) not in sys.path:
    sys.path.insert(0, str(SERVICE_ROOT))

from matrimony.main import app
from matrimony.db import close_mongo_connection, connect_to_mongo, get_db
from matrimony.config import get_settings
from matrimony.repositories.user import UserRepository
from matrimony.services.auth_service import TokenService

TEST_SECRET = "test-secret"


@pytest.fixture(autouse=True)
def _env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MONGO_URI", "mongodb://localhost:27017/test")
    monkeypatch.setenv("MONGO_DB_NAME", "matrimony-test")
    monkeypatch.setenv("JWT_SECRET", TEST_SECRET)
    monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_dummy")
    get_settings.cache_clear()  # type: ignore[attr-defined]


@pytest_asyncio.fixture
async def mongo_client(monkeypatch: pytest.MonkeyPatch) -> AsyncIterator[AsyncMongoMockClient]:
    client = AsyncMongoMockClient()

    def _client_factory(*_args, **_kwargs) -> AsyncMongoMockClient:
        return client

    monkeypatch.setattr("matrimony.db.AsyncIOMotorClient", _client_factory)
    yield client
    client.close()


@pytest_asyncio.fixture
async def api_client(mongo_client: AsyncMongoMockClient) -> AsyncIterator[AsyncClient]:
    await connect_to_mongo()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client
    await close_mongo_connection()


def auth_headers(email: str) -> dict[str, str]:
    token = TokenService(secret=TEST_SECRET, ttl_seconds=3600).issue_token(email)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def make_user(api_client: AsyncClient) -> Callable[..., Awaitable[dict[str, str]]]:
    """Register an account and return bearer headers for it."""

    async def _make(email: str, *, admin: bool = False) -> dict[str, str]:
        response = await api_client.post("/users", json={"email": email, "name": email.split("@")[0]})
        assert response.status_code in (200, 201), response.text
        if admin:
            await UserRepository(get_db()).collection.update_one({"email": email}, {"$set": {"role": "admin"}})
        return auth_headers(email)

    return _make

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path
import sys
from typing import Any, Awaitable, Callable, Dict, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

SERVICE_ROOT = Path(__file__).resolve().parents[1]
if str(SERVICE_ROOT) not in sys.path:
    sys.path.insert(0, str(SERVICE_ROOT))

from kindred.main import app
from kindred.db import close_mongo_connection, connect_to_mongo, get_db
from kindred.config import get_settings
from kindred.db.collections import PROFILES_COLLECTION
from kindred.services.identity_service import get_identity_service


@pytest.fixture(autouse=True)
def _env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MONGO_URI", "mongodb://localhost:27017/test")
    monkeypatch.setenv("MONGO_DB_NAME", "kindred-test")
    monkeypatch.setenv("JWT_SECRET", "test-secret")
    monkeypatch.setenv("REDIS_PUBSUB_ENABLED", "false")
    monkeypatch.delenv("REDIS_URL", raising=False)
    monkeypatch.delenv("TRIGGER_SECRET", raising=False)
    monkeypatch.delenv("JWT_AUDIENCE", raising=False)
    get_settings.cache_clear()  # type: ignore[attr-defined]


@pytest_asyncio.fixture
async def mongo_client(monkeypatch: pytest.MonkeyPatch) -> AsyncIterator[AsyncMongoMockClient]:
    client = AsyncMongoMockClient()

    def _client_factory(*_args, **_kwargs) -> AsyncMongoMockClient:
        return client

    monkeypatch.setattr("kindred.db.AsyncIOMotorClient", _client_factory)
    yield client
    client.close()


@pytest_asyncio.fixture
async def db(mongo_client: AsyncMongoMockClient):
    await connect_to_mongo()
    yield get_db()
    await close_mongo_connection()


@pytest_asyncio.fixture
async def api_client(db) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture
def auth_headers() -> Callable[[str], Dict[str, str]]:
    def _headers(user_id: str) -> Dict[str, str]:
        token = get_identity_service().issue_token(user_id)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def make_profile(db) -> Callable[..., Awaitable[Dict[str, Any]]]:
    """Insert a feed-eligible profile; keyword overrides replace fields."""

    async def _make(user_id: str, updated_at: Optional[int], **overrides: Any) -> Dict[str, Any]:
        doc: Dict[str, Any] = {
            "_id": user_id,
            "displayName": f"{user_id}-name",
            "bio": "",
            "photos": [f"https://cdn.test/{user_id}.jpg"],
            "onboardingCompleted": True,
            "hideMode": False,
            "createdAt": 1,
        }
        if updated_at is not None:
            doc["updatedAt"] = updated_at
        doc.update(overrides)
        await db[PROFILES_COLLECTION].insert_one(doc)
        return doc

    return _make

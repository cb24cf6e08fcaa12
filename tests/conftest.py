"""Shared test fixtures for Capsule API tests."""

import pytest
import pytest_asyncio
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from api import create_app
from app.auth.services.notifier import LinkNotifier
from app.config import Settings
from app.dependencies import build_services
from app.media.services.object_storage import ObjectStorageService
from common.auth import JWTAuth


TEST_SECRET = "test-secret"


class RecordingNotifier(LinkNotifier):
    """Keeps the plain tokens so tests can follow the emailed links."""

    def __init__(self):
        super().__init__("http://app.test")
        self.verification_tokens = []
        self.reset_tokens = []

    async def send_verification(self, email, token):
        self.verification_tokens.append((email, token))
        return await super().send_verification(email, token)

    async def send_password_reset(self, email, token):
        self.reset_tokens.append((email, token))
        return await super().send_password_reset(email, token)


# ─────────────────────────────────────────────────────────────────
# Unit-test doubles
# ─────────────────────────────────────────────────────────────────


@pytest.fixture
def sample_user_id():
    return str(ObjectId())


@pytest.fixture
def mock_collection():
    collection = AsyncMock()
    # Motor's find() returns a cursor synchronously (not a coroutine),
    # so use MagicMock for it.
    collection.find = MagicMock()
    return collection


@pytest.fixture
def mock_db(mock_collection):
    db = MagicMock()
    db.__getitem__ = MagicMock(return_value=mock_collection)
    return db


@pytest.fixture
def jwt_auth():
    return JWTAuth(secret=TEST_SECRET, bcrypt_rounds=4)


# ─────────────────────────────────────────────────────────────────
# Application fixtures
# ─────────────────────────────────────────────────────────────────


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        MONGODB_URI="mongodb://localhost:27017",
        MONGODB_DATABASE="capsule_test",
        JWT_SECRET=TEST_SECRET,
        BCRYPT_ROUNDS=4,
        GOOGLE_CLIENT_ID="client-id",
        GOOGLE_CLIENT_SECRET="client-secret",
        GOOGLE_REDIRECT_URI="http://test/auth/google/callback",
    )


@pytest.fixture
def db():
    return AsyncMongoMockClient()["capsule_test"]


@pytest.fixture
def s3_client():
    return MagicMock()


@pytest_asyncio.fixture
async def services(db, settings, s3_client):
    services = build_services(db, settings)
    services.notifier = RecordingNotifier()
    services.phone_validator = MagicMock()
    services.phone_validator.validate = AsyncMock(
        return_value={"isValid": True, "e164Format": "+46701234567"}
    )
    services.object_storage = ObjectStorageService(
        bucket="capsule-test",
        region="eu-north-1",
        client=s3_client,
    )
    await services.credential_store.ensure_indexes()
    await services.room_service.ensure_indexes()
    return services


@pytest_asyncio.fixture
async def client(settings, services):
    """HTTP client over the app with services wired to the in-memory db."""
    app = create_app(settings)
    app.state.services = services

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def signed_up(client):
    """A freshly signed-up user: (user dict, bearer headers)."""
    response = await client.post("/signup", json={
        "name": "Anna",
        "email": "anna@example.com",
        "password": "secret1",
    })
    assert response.status_code == 200
    body = response.json()
    return body["user"], {"Authorization": f"Bearer {body['token']}"}

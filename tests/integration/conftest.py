"""
Integration Test Fixtures.

Runs the real application against the in-memory test database. The
hosted media API is replaced by an httpx.MockTransport that records
uploads and deletions.
"""

import itertools
from collections.abc import AsyncGenerator
from typing import Any

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from notely.core.database import get_db_session
from notely.core.dependencies import get_media_service, get_password_rounds, get_token_service
from notely.core.security import TokenService
from notely.services.media import MediaService


# =============================================================================
# Media fake
# =============================================================================


class FakeMediaApi:
    """In-memory stand-in for the hosted image API."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self.uploads: list[str] = []
        self.deleted: list[str] = []
        self.fail_deletes = False

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/image/upload"):
            public_id = f"notely/avatars/avatar{next(self._ids)}"
            self.uploads.append(public_id)
            return httpx.Response(
                200,
                json={
                    "public_id": public_id,
                    "secure_url": f"https://res.cloudinary.com/notely/image/upload/v1/{public_id}.png",
                },
            )
        if request.url.path.endswith("/image/destroy"):
            if self.fail_deletes:
                return httpx.Response(500, json={"error": {"message": "unavailable"}})
            body = request.content.decode()
            self.deleted.append(httpx.QueryParams(body)["public_id"])
            return httpx.Response(200, json={"result": "ok"})
        return httpx.Response(404)


@pytest.fixture
def media_api() -> FakeMediaApi:
    return FakeMediaApi()


@pytest.fixture
async def media_service(media_api: FakeMediaApi) -> AsyncGenerator[MediaService, None]:
    media = MediaService(
        cloud_name="notely",
        api_key="test-api-key",
        api_secret="test-api-secret",
        transport=httpx.MockTransport(media_api),
    )
    yield media
    await media.close()


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
async def client(
    db_session: AsyncSession,
    token_service: TokenService,
    media_service: MediaService,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Test client with the database, token service and media service overridden.

    All requests in a test share one session, rolled back afterwards.
    """
    from notely.main import create_app

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app = create_app()
    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_token_service] = lambda: token_service
    app.dependency_overrides[get_media_service] = lambda: media_service
    app.dependency_overrides[get_password_rounds] = lambda: 4

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# Account helpers
# =============================================================================


async def register(client: AsyncClient, username: str, **overrides: Any) -> dict[str, Any]:
    payload = {
        "username": username,
        "email": f"{username}@example.com",
        "password": f"{username}-password",
        "firstName": "Test",
        "lastName": "User",
    }
    payload.update(overrides)
    response = await client.post("/api/auth/register", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def register_user():
    """Register an account and return ``(user, auth_headers)``."""
    async def _register(client: AsyncClient, username: str, **overrides: Any):
        body = await register(client, username, **overrides)
        return body["user"], {"Authorization": f"Bearer {body['token']}"}
    return _register


@pytest.fixture
async def alice(client: AsyncClient, register_user):
    return await register_user(client, "alice")


@pytest.fixture
async def bob(client: AsyncClient, register_user):
    return await register_user(client, "bob")


TRIP_LOG = {
    "title": "Trip Log",
    "synopsis": "Notes from a weekend trip to the coast",
    "content": "Day one was sunny and long.",
}


@pytest.fixture
def trip_log() -> dict[str, str]:
    return dict(TRIP_LOG)

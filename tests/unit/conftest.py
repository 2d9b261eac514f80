"""
Unit Test Fixtures.

Fixtures for unit tests - all external dependencies are mocked.
Unit tests never touch a real database or network.
"""

from datetime import datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from notely.core.config_schema import (
    ApplicationSchema,
    CorsSchema,
    JwtSchema,
    PasswordSchema,
    SecretsValidationSchema,
    SecuritySchema,
    ServerSchema,
)


# =============================================================================
# Database Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """Mocked AsyncSession with the methods services touch."""
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    session.add = MagicMock()
    return session


# =============================================================================
# Domain Object Builders
# =============================================================================


def make_user(**overrides) -> SimpleNamespace:
    """Build a user-shaped object without touching the ORM."""
    fields = {
        "id": "user-1",
        "username": "ada",
        "email": "ada@example.com",
        "hashed_password": "$2b$04$invalidinvalidinvalidinvalidinvalidinvalidinvalidinval",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "avatar": None,
        "date_joined": datetime(2024, 1, 1),
        "last_profile_update": datetime(2024, 1, 1),
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


def make_entry(**overrides) -> SimpleNamespace:
    """Build an entry-shaped object without touching the ORM."""
    fields = {
        "id": "note-1",
        "title": "Trip Log",
        "synopsis": "Notes from a weekend trip to the coast",
        "content": "Day one was sunny and long.",
        "author_id": "user-1",
        "is_deleted": False,
        "created_at": datetime(2024, 1, 1),
        "updated_at": datetime(2024, 1, 1),
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


@pytest.fixture
def user_factory():
    return make_user


@pytest.fixture
def entry_factory():
    return make_entry


# =============================================================================
# Config Fixtures
# =============================================================================


@pytest.fixture
def security_config() -> SecuritySchema:
    """Real SecuritySchema with test values."""
    return SecuritySchema(
        startup_checks_enabled=True,
        jwt=JwtSchema(algorithm="HS256", token_expire_days=7, audience="notely-api"),
        passwords=PasswordSchema(bcrypt_rounds=4),
        secrets_validation=SecretsValidationSchema(jwt_secret_min_length=32),
    )


@pytest.fixture
def application_config() -> ApplicationSchema:
    return ApplicationSchema(
        name="Notely API",
        version="1.0.0",
        description="Test",
        environment="development",
        debug=True,
        docs_enabled=True,
        server=ServerSchema(host="127.0.0.1", port=5000),
        cors=CorsSchema(origins=["http://localhost:3000"]),
    )


@pytest.fixture
def mock_app_config(application_config, security_config) -> SimpleNamespace:
    return SimpleNamespace(application=application_config, security=security_config)

"""
Unit Tests for Auth Service.

Repository calls are mocked; hashing and token signing run for real.
"""

from unittest.mock import patch

import pytest

from notely.core.exceptions import AuthenticationError, ConflictError, ValidationError
from notely.core.security import hash_password, verify_password
from notely.schemas.auth import LoginRequest, RegisterRequest
from notely.services.auth import AuthService

REGISTRATION = {
    "username": "ada",
    "email": "ada@example.com",
    "password": "correct horse",
    "first_name": "Ada",
    "last_name": "Lovelace",
}


@pytest.fixture
def service(mock_db_session, token_service) -> AuthService:
    return AuthService(mock_db_session, token_service, password_rounds=4)


class TestRegister:

    async def test_creates_user_and_issues_token(self, service, token_service, user_factory):
        created = user_factory(id="user-9")
        with (
            patch.object(service.users, "get_by_email", return_value=None),
            patch.object(service.users, "get_by_username", return_value=None),
            patch.object(service.users, "create", return_value=created) as mock_create,
        ):
            user, token = await service.register(RegisterRequest(**{**REGISTRATION, "username": "  ada  "}))

        kwargs = mock_create.await_args.kwargs
        assert kwargs["username"] == "ada"
        assert kwargs["hashed_password"] != "correct horse"
        assert verify_password("correct horse", kwargs["hashed_password"])
        assert user is created
        assert token_service.verify(token) == "user-9"

    @pytest.mark.parametrize("missing", ["username", "email", "password"])
    async def test_core_fields_required(self, service, missing):
        with pytest.raises(ValidationError, match="Username, email, and password are required"):
            await service.register(RegisterRequest(**{**REGISTRATION, missing: "  "}))

    @pytest.mark.parametrize("missing", ["first_name", "last_name"])
    async def test_names_required(self, service, missing):
        with pytest.raises(ValidationError, match="First name and last name are required"):
            await service.register(RegisterRequest(**{**REGISTRATION, missing: None}))

    async def test_email_taken(self, service, user_factory):
        with (
            patch.object(service.users, "get_by_email", return_value=user_factory()),
            patch.object(service.users, "get_by_username", return_value=user_factory()),
        ):
            with pytest.raises(ConflictError, match="Email already registered"):
                await service.register(RegisterRequest(**REGISTRATION))

    async def test_username_taken(self, service, user_factory):
        with (
            patch.object(service.users, "get_by_email", return_value=None),
            patch.object(service.users, "get_by_username", return_value=user_factory()),
            patch.object(service.users, "create") as mock_create,
        ):
            with pytest.raises(ConflictError, match="Username already taken"):
                await service.register(RegisterRequest(**REGISTRATION))
        mock_create.assert_not_called()


class TestLogin:

    async def test_valid_credentials(self, service, token_service, user_factory):
        user = user_factory(hashed_password=hash_password("correct horse", rounds=4))
        with patch.object(service.users, "get_by_login", return_value=user) as mock_lookup:
            result, token = await service.login(LoginRequest(email_or_username=" ada ", password="correct horse"))

        mock_lookup.assert_awaited_once_with("ada")
        assert result is user
        assert token_service.verify(token) == "user-1"

    async def test_unknown_user(self, service):
        with patch.object(service.users, "get_by_login", return_value=None):
            with pytest.raises(AuthenticationError, match="Invalid credentials"):
                await service.login(LoginRequest(email_or_username="nobody", password="x"))

    async def test_wrong_password(self, service, user_factory):
        user = user_factory(hashed_password=hash_password("correct horse", rounds=4))
        with patch.object(service.users, "get_by_login", return_value=user):
            with pytest.raises(AuthenticationError, match="Invalid credentials"):
                await service.login(LoginRequest(email_or_username="ada", password="wrong"))

    async def test_fields_required(self, service):
        with pytest.raises(ValidationError):
            await service.login(LoginRequest(email_or_username="ada"))

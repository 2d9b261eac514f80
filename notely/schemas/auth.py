"""
Auth Schemas.

Registration and login payloads. Fields are optional at the schema level
so the service can report which one is missing.
"""

from pydantic import Field

from notely.schemas.base import CamelModel
from notely.schemas.user import UserResponse


class RegisterRequest(CamelModel):
    username: str | None = Field(default=None, examples=["ada"])
    email: str | None = Field(default=None, examples=["ada@example.com"])
    password: str | None = Field(default=None, examples=["correct horse battery"])
    first_name: str | None = Field(default=None, examples=["Ada"])
    last_name: str | None = Field(default=None, examples=["Lovelace"])


class LoginRequest(CamelModel):
    email_or_username: str | None = Field(
        default=None,
        description="Either the account email or username",
        examples=["ada"],
    )
    password: str | None = None


class AuthResponse(CamelModel):
    """User plus a freshly issued bearer token."""

    user: UserResponse
    token: str

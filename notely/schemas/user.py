"""
User Schemas.

Public user shapes and profile update requests. No schema here carries
the password hash.
"""

from datetime import datetime

from pydantic import Field

from notely.schemas.base import CamelModel


class UserResponse(CamelModel):
    """User public profile."""

    id: str
    username: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    avatar: str | None = None
    date_joined: datetime
    last_profile_update: datetime


class AuthorSummary(CamelModel):
    """Author fields embedded in note payloads."""

    id: str
    username: str
    first_name: str | None = None
    last_name: str | None = None


class ProfileUpdate(CamelModel):
    """
    Partial profile update.

    Each field is independently present or absent; absent fields are
    left untouched.
    """

    first_name: str | None = Field(default=None, examples=["Ada"])
    last_name: str | None = Field(default=None, examples=["Lovelace"])
    username: str | None = Field(default=None, examples=["ada"])
    email: str | None = Field(default=None, examples=["ada@example.com"])
    avatar: str | None = Field(
        default=None,
        description="Avatar URL; an empty string clears the avatar",
    )


class PasswordUpdate(CamelModel):
    """Password change request."""

    current_password: str | None = None
    new_password: str | None = None


class ProfileResponse(CamelModel):
    message: str
    user: UserResponse


class AvatarResponse(CamelModel):
    message: str
    user: UserResponse
    avatar_url: str
